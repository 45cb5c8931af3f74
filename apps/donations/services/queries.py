"""
Back-office list queries for donations, donors and recurring donations.

Every filter is optional; ``None``/empty values are ignored so views can
pass query parameters straight through.
"""

from datetime import date
from typing import Optional

from django.db.models import Count, Q, QuerySet, Sum
from django.db.models.functions import Coalesce
from django.utils.dateparse import parse_date

from apps.donations.models import Donation, Donor, Fundraiser, RecurringDonation, DonationStatus


def _parse_bool(value) -> Optional[bool]:
    if value in (None, ''):
        return None
    return str(value).lower() in ('1', 'true', 'yes')


def _date_range(queryset: QuerySet, field: str, start, end) -> QuerySet:
    start_date = start if isinstance(start, date) else parse_date(start or '')
    end_date = end if isinstance(end, date) else parse_date(end or '')
    if start_date:
        queryset = queryset.filter(**{f'{field}__date__gte': start_date})
    if end_date:
        queryset = queryset.filter(**{f'{field}__date__lte': end_date})
    return queryset


def search_donations(
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
    payment_method: Optional[str] = None,
    donation_type: Optional[str] = None,
    collected_via: Optional[str] = None,
    frequency: Optional[str] = None,
    appeal: Optional[str] = None,
    fundraiser: Optional[str] = None,
    gift_aid=None,
    start=None,
    end=None
) -> QuerySet:
    """
    Filter donations for the back-office list.

    Args:
        search: Matches donor name/email, order number or transaction id.
        start, end: Inclusive ``created_at`` date range (date or ISO string).

    Returns:
        QuerySet of Donation with donor, appeal and fundraiser selected.
    """
    queryset = Donation.objects.select_related('donor', 'appeal', 'fundraiser')

    if search:
        queryset = queryset.filter(
            Q(donor__first_name__icontains=search) |
            Q(donor__last_name__icontains=search) |
            Q(donor__email__icontains=search) |
            Q(order_number__icontains=search) |
            Q(transaction_id__icontains=search)
        )

    for field, value in (
        ('status', status),
        ('payment_method', payment_method),
        ('donation_type', donation_type),
        ('collected_via', collected_via),
        ('frequency', frequency),
        ('appeal_id', appeal),
        ('fundraiser_id', fundraiser),
    ):
        if value:
            queryset = queryset.filter(**{field: value})

    gift_aid = _parse_bool(gift_aid)
    if gift_aid is not None:
        queryset = queryset.filter(gift_aid=gift_aid)

    return _date_range(queryset, 'created_at', start, end)


def search_donors(*, search: Optional[str] = None, city: Optional[str] = None, country: Optional[str] = None) -> QuerySet:
    """Donors annotated with their completed giving (``total_pence``, ``donation_count``)."""
    completed = Q(donations__status=DonationStatus.COMPLETED)
    queryset = Donor.objects.annotate(
        total_pence=Coalesce(Sum('donations__amount_pence', filter=completed), 0),
        donation_count=Count('donations', filter=completed),
    ).order_by('last_name', 'first_name', 'id')
    if search:
        queryset = queryset.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(email__icontains=search) |
            Q(postcode__icontains=search)
        )
    if city:
        queryset = queryset.filter(city__iexact=city)
    if country:
        queryset = queryset.filter(country__iexact=country)
    return queryset


def search_recurring(
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
    frequency: Optional[str] = None,
    appeal: Optional[str] = None
) -> QuerySet:
    queryset = RecurringDonation.objects.select_related('donor', 'appeal')
    if search:
        queryset = queryset.filter(
            Q(donor__email__icontains=search) |
            Q(donor__last_name__icontains=search) |
            Q(subscription_id__icontains=search) |
            Q(order_number__icontains=search)
        )
    if status:
        queryset = queryset.filter(status=status)
    if frequency:
        queryset = queryset.filter(frequency=frequency)
    if appeal:
        queryset = queryset.filter(appeal_id=appeal)
    return queryset


def fundraisers_with_totals() -> QuerySet:
    """Fundraisers annotated with ``raised_pence`` from completed donations."""
    return Fundraiser.objects.select_related('appeal').annotate(
        raised_pence=Coalesce(
            Sum('donations__amount_pence', filter=Q(donations__status=DonationStatus.COMPLETED)),
            0,
        ),
        donation_count=Count('donations', filter=Q(donations__status=DonationStatus.COMPLETED)),
    ).order_by('-created_at', 'id')
