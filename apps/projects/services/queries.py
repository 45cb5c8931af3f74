"""Back-office list queries for water and sponsorship donations."""

from typing import Optional

from django.db.models import Q, QuerySet


def search_project_donations(
    model,
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
    project_type: Optional[str] = None,
    country: Optional[str] = None,
    date_from=None,
    date_to=None
) -> QuerySet:
    """
    Filter water (``WaterProjectDonation``) or sponsorship donations.

    Args:
        search: Matches donor name/email, donation number or plaque name.
        project_type: The project's type (e.g. WATER_WELL, ORPHANS).
        date_from, date_to: Inclusive ``created_at`` date range.
    """
    project_field = model.project_field
    queryset = model.objects.select_related('donor', 'country', project_field, 'added_by', 'fundraiser')

    if search:
        queryset = queryset.filter(
            Q(donor__first_name__icontains=search) |
            Q(donor__last_name__icontains=search) |
            Q(donor__email__icontains=search) |
            Q(donation_number__icontains=search) |
            Q(plaque_name__icontains=search)
        )
    if status:
        queryset = queryset.filter(status=status)
    if project_type:
        queryset = queryset.filter(**{f'{project_field}__project_type': project_type})
    if country:
        queryset = queryset.filter(country_id=country)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    return queryset
