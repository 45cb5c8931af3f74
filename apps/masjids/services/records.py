"""
Masjid CRM records, collections and offline income.

Collections and offline income are always attributed to the staff user
who recorded them. Staff may only edit records they added; admins may
edit anything.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from django.db.models import Q, QuerySet

from apps.accounts.models import User, UserRole
from apps.donations.models import Appeal, CollectionSource, DonationType
from apps.donations.services import generate_donation_number
from apps.masjids.models import Collection, Masjid, OfflineIncome, OfflineSource

from .exceptions import NotRecordOwnerError


logger = logging.getLogger(__name__)


def normalize_string(value) -> str:
    """Trim a free-text value; blank and ``None`` become ``''``."""
    if value is None:
        return ''
    return str(value).strip()


def normalize_fields(data: dict, fields: Iterable[str]) -> dict:
    """Return ``data`` with every listed string field trimmed."""
    normalized = dict(data)
    for field in fields:
        if field in normalized:
            normalized[field] = normalize_string(normalized[field])
    return normalized


def ensure_can_edit(record, user: User) -> None:
    """
    Check that ``user`` may change ``record``.

    Raises:
        NotRecordOwnerError: If a STAFF user did not add the record.
    """
    if user.is_superuser or user.role == UserRole.ADMIN:
        return
    if record.added_by_id != user.id:
        raise NotRecordOwnerError('You can only change records you added.')


def record_collection(
    *,
    added_by: User,
    amount_pence: int,
    collected_at: datetime,
    masjid: Optional[Masjid] = None,
    appeal: Optional[Appeal] = None,
    donation_type: str = DonationType.GENERAL,
    type: str = 'JUMMAH',
    notes: str = ''
) -> Collection:
    collection = Collection.objects.create(
        masjid=masjid,
        appeal=appeal,
        amount_pence=amount_pence,
        donation_type=donation_type,
        type=type,
        collected_at=collected_at,
        notes=normalize_string(notes),
        added_by=added_by,
    )
    logger.info('Collection %s (%sp) recorded by %s', collection.id, amount_pence, added_by.email)
    return collection


def record_offline_income(
    *,
    added_by: User,
    amount_pence: int,
    received_at: datetime,
    appeal: Optional[Appeal] = None,
    donation_type: str = DonationType.GENERAL,
    source: str = OfflineSource.CASH,
    collected_via: str = CollectionSource.OFFICE,
    notes: str = ''
) -> OfflineIncome:
    """
    Record office income for an appeal with a fresh donation number.

    Raises:
        DonationNumberUnavailableError: If no donation number could be generated.
    """
    income = OfflineIncome.objects.create(
        appeal=appeal,
        amount_pence=amount_pence,
        donation_type=donation_type,
        source=source,
        collected_via=collected_via,
        received_at=received_at,
        donation_number=generate_donation_number(),
        notes=normalize_string(notes),
        added_by=added_by,
    )
    logger.info('Offline income %s (%sp) recorded by %s', income.donation_number, amount_pence, added_by.email)
    return income


def search_masjids(*, search: Optional[str] = None, status: Optional[str] = None, city: Optional[str] = None) -> QuerySet:
    queryset = Masjid.objects.select_related('added_by')
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(city__icontains=search) |
            Q(postcode__icontains=search) |
            Q(contact_name__icontains=search)
        )
    if status:
        queryset = queryset.filter(status=status)
    if city:
        queryset = queryset.filter(city__iexact=city)
    return queryset


def search_collections(
    *,
    masjid: Optional[str] = None,
    appeal: Optional[str] = None,
    type: Optional[str] = None,
    date_from=None,
    date_to=None
) -> QuerySet:
    queryset = Collection.objects.select_related('masjid', 'appeal', 'added_by')
    if masjid:
        queryset = queryset.filter(masjid_id=masjid)
    if appeal:
        queryset = queryset.filter(appeal_id=appeal)
    if type:
        queryset = queryset.filter(type=type)
    if date_from:
        queryset = queryset.filter(collected_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(collected_at__date__lte=date_to)
    return queryset


def search_offline_income(
    *,
    search: Optional[str] = None,
    appeal: Optional[str] = None,
    source: Optional[str] = None,
    date_from=None,
    date_to=None
) -> QuerySet:
    queryset = OfflineIncome.objects.select_related('appeal', 'added_by')
    if search:
        queryset = queryset.filter(
            Q(donation_number__icontains=search) |
            Q(notes__icontains=search) |
            Q(appeal__title__icontains=search)
        )
    if appeal:
        queryset = queryset.filter(appeal_id=appeal)
    if source:
        queryset = queryset.filter(source=source)
    if date_from:
        queryset = queryset.filter(received_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(received_at__date__lte=date_to)
    return queryset
