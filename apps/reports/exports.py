"""
CSV exports.

Each export variant declares its columns (key, header label, how to read
the value, whether it is included by default), the filters it accepts and
the queryset it reads from. The back-office list queries are reused so an
export returns exactly what the matching list page shows.

Usage:
    header, rows = build_export('donations', columns=['donor_email', 'amount'], filters={'status': 'COMPLETED'})
    content = render_csv(header, rows)
"""

import csv
import io
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from apps.donations.formatting import (
    format_currency,
    format_date,
    format_datetime,
    format_donor_name,
    format_enum,
    format_payment_method,
)
from apps.donations.services import fundraisers_with_totals, search_donations, search_donors, search_recurring
from apps.masjids.services import search_collections, search_masjids, search_offline_income

from .exceptions import InvalidColumnError, UnknownExportError


@dataclass(frozen=True)
class ExportColumn:
    key: str
    label: str
    value: Callable[[Any], Any]
    default: bool = True


@dataclass(frozen=True)
class ExportVariant:
    name: str
    filename: str
    columns: Tuple[ExportColumn, ...]
    filters: Tuple[str, ...]
    queryset: Callable[..., Any]

    def default_columns(self) -> List[ExportColumn]:
        return [column for column in self.columns if column.default]


def yes_no(value) -> str:
    return 'Yes' if value else 'No'


def appeal_title(record, fallback='General') -> str:
    return record.appeal.title if record.appeal else fallback


# =============================================================================
# Querysets
# =============================================================================

def donations_queryset(search=None, status=None, appeal=None, date_from=None, date_to=None):
    return search_donations(search=search, status=status, appeal=appeal, start=date_from, end=date_to)


def recurring_queryset(search=None, status=None, frequency=None, appeal=None, date_from=None, date_to=None):
    queryset = search_recurring(search=search, status=status, frequency=frequency, appeal=appeal)
    if date_from:
        queryset = queryset.filter(next_payment_date__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(next_payment_date__date__lte=date_to)
    return queryset


def fundraisers_queryset(search=None, status=None, appeal=None):
    queryset = fundraisers_with_totals()
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(fundraiser_name__icontains=search))
    if status == 'active':
        queryset = queryset.filter(is_active=True)
    elif status == 'inactive':
        queryset = queryset.filter(is_active=False)
    if appeal:
        queryset = queryset.filter(appeal_id=appeal)
    return queryset


def masjids_queryset(search=None, status=None, city=None):
    return search_masjids(search=search, status=status, city=city).annotate(
        collection_total=Count('collections'),
        collected_pence=Coalesce(Sum('collections__amount_pence'), 0),
    ).order_by('name', 'id')


# =============================================================================
# Variants
# =============================================================================

EXPORTS = {
    variant.name: variant
    for variant in (
        ExportVariant(
            name='donations',
            filename='donations',
            filters=('search', 'status', 'appeal', 'date_from', 'date_to'),
            queryset=donations_queryset,
            columns=(
                ExportColumn('donor_first_name', 'Donor First Name', lambda d: d.donor.first_name),
                ExportColumn('donor_last_name', 'Donor Last Name', lambda d: d.donor.last_name),
                ExportColumn('donor_email', 'Donor Email', lambda d: d.donor.email),
                ExportColumn('amount', 'Amount', lambda d: format_currency(d.amount_pence)),
                ExportColumn('status', 'Status', lambda d: format_enum(d.status)),
                ExportColumn('payment_method', 'Payment Method', lambda d: format_payment_method(d.payment_method)),
                ExportColumn(
                    'appeal',
                    'Campaign / Appeal / Product',
                    lambda d: d.appeal.title if d.appeal else (d.product_name or 'General'),
                ),
                ExportColumn('order_number', 'Order Number', lambda d: d.order_number),
                ExportColumn('gift_aid', 'Gift Aid', lambda d: yes_no(d.gift_aid)),
                ExportColumn('date', 'Date', lambda d: format_datetime(d.created_at)),
                ExportColumn('address', 'Address', lambda d: d.donor.address),
                ExportColumn('city', 'City', lambda d: d.donor.city),
                ExportColumn('postcode', 'Postcode', lambda d: d.donor.postcode),
                ExportColumn('country', 'Country', lambda d: d.donor.country),
                ExportColumn('transaction_id', 'Transaction ID', lambda d: d.transaction_id, default=False),
            ),
        ),
        ExportVariant(
            name='recurring',
            filename='recurring-donations',
            filters=('search', 'status', 'frequency', 'appeal', 'date_from', 'date_to'),
            queryset=recurring_queryset,
            columns=(
                ExportColumn('donor_first_name', 'Donor First Name', lambda r: r.donor.first_name),
                ExportColumn('donor_last_name', 'Donor Last Name', lambda r: r.donor.last_name),
                ExportColumn('donor_email', 'Donor Email', lambda r: r.donor.email),
                ExportColumn('amount', 'Amount', lambda r: format_currency(r.amount_pence)),
                ExportColumn('frequency', 'Frequency', lambda r: format_enum(r.frequency)),
                ExportColumn('status', 'Status', lambda r: format_enum(r.status)),
                ExportColumn('appeal', 'Appeal', appeal_title),
                ExportColumn('next_payment', 'Next Payment', lambda r: format_date(r.next_payment_date)),
                ExportColumn('last_payment', 'Last Payment', lambda r: format_date(r.last_payment_date), default=False),
                ExportColumn('subscription_id', 'Subscription ID', lambda r: r.subscription_id, default=False),
            ),
        ),
        ExportVariant(
            name='offline-income',
            filename='offline-income',
            filters=('search', 'appeal', 'source', 'date_from', 'date_to'),
            queryset=search_offline_income,
            columns=(
                ExportColumn('donation_number', 'Donation Number', lambda o: o.donation_number),
                ExportColumn('appeal', 'Appeal', appeal_title),
                ExportColumn('amount', 'Amount', lambda o: format_currency(o.amount_pence)),
                ExportColumn('source', 'Source', lambda o: format_enum(o.source)),
                ExportColumn('donation_type', 'Donation Type', lambda o: format_enum(o.donation_type)),
                ExportColumn('received_at', 'Date Received', lambda o: format_date(o.received_at)),
                ExportColumn('notes', 'Notes', lambda o: o.notes, default=False),
            ),
        ),
        ExportVariant(
            name='collections',
            filename='collections',
            filters=('masjid', 'appeal', 'type', 'date_from', 'date_to'),
            queryset=search_collections,
            columns=(
                ExportColumn('masjid', 'Masjid', lambda c: c.masjid.name if c.masjid else 'No masjid'),
                ExportColumn('appeal', 'Appeal', appeal_title),
                ExportColumn('amount', 'Amount', lambda c: format_currency(c.amount_pence)),
                ExportColumn('type', 'Type', lambda c: format_enum(c.type)),
                ExportColumn('donation_type', 'Donation Type', lambda c: format_enum(c.donation_type)),
                ExportColumn('collected_at', 'Date Collected', lambda c: format_date(c.collected_at)),
                ExportColumn('notes', 'Notes', lambda c: c.notes, default=False),
            ),
        ),
        ExportVariant(
            name='fundraisers',
            filename='fundraisers',
            filters=('search', 'status', 'appeal'),
            queryset=fundraisers_queryset,
            columns=(
                ExportColumn('title', 'Title', lambda f: f.title),
                ExportColumn('fundraiser_name', 'Fundraiser', lambda f: f.fundraiser_name),
                ExportColumn('email', 'Email', lambda f: f.email),
                ExportColumn('campaign', 'Campaign', lambda f: f.appeal.title),
                ExportColumn('status', 'Status', lambda f: 'Active' if f.is_active else 'Inactive'),
                ExportColumn('amount_raised', 'Amount Raised', lambda f: format_currency(f.raised_pence)),
                ExportColumn('slug', 'Slug', lambda f: f.slug, default=False),
            ),
        ),
        ExportVariant(
            name='donors',
            filename='donors',
            filters=('search', 'city', 'country'),
            queryset=search_donors,
            columns=(
                ExportColumn('first_name', 'First Name', lambda d: d.first_name),
                ExportColumn('last_name', 'Last Name', lambda d: d.last_name),
                ExportColumn('email', 'Email', lambda d: d.email),
                ExportColumn('phone', 'Phone', lambda d: d.phone),
                ExportColumn('address', 'Address', lambda d: d.address),
                ExportColumn('city', 'City', lambda d: d.city),
                ExportColumn('postcode', 'Postcode', lambda d: d.postcode),
                ExportColumn('country', 'Country', lambda d: d.country),
                ExportColumn('total_donated', 'Total Donated', lambda d: format_currency(d.total_pence)),
                ExportColumn('name', 'Full Name', format_donor_name, default=False),
            ),
        ),
        ExportVariant(
            name='masjids',
            filename='masjids',
            filters=('search', 'status', 'city'),
            queryset=masjids_queryset,
            columns=(
                ExportColumn('name', 'Name', lambda m: m.name),
                ExportColumn('status', 'Status', lambda m: format_enum(m.status)),
                ExportColumn('city', 'City', lambda m: m.city),
                ExportColumn('address', 'Address', lambda m: m.address),
                ExportColumn('postcode', 'Postcode', lambda m: m.postcode, default=False),
                ExportColumn('country', 'Country', lambda m: m.country, default=False),
                ExportColumn('region', 'Region', lambda m: m.region, default=False),
                ExportColumn('contact_name', 'Contact Name', lambda m: m.contact_name),
                ExportColumn('contact_role', 'Contact Role', lambda m: m.contact_role, default=False),
                ExportColumn('phone', 'Phone', lambda m: m.phone),
                ExportColumn('phone_alt', 'Alternative Phone', lambda m: m.phone_alt, default=False),
                ExportColumn('email', 'Email', lambda m: m.email),
                ExportColumn('email_alt', 'Alternative Email', lambda m: m.email_alt, default=False),
                ExportColumn(
                    'secondary_contact_name',
                    'Secondary Contact',
                    lambda m: m.secondary_contact_name,
                    default=False,
                ),
                ExportColumn(
                    'secondary_contact_role',
                    'Secondary Contact Role',
                    lambda m: m.secondary_contact_role,
                    default=False,
                ),
                ExportColumn('website', 'Website', lambda m: m.website, default=False),
                ExportColumn(
                    'preferred_contact_method',
                    'Preferred Contact',
                    lambda m: format_enum(m.preferred_contact_method),
                    default=False,
                ),
                ExportColumn('last_contacted_at', 'Last Contacted', lambda m: format_date(m.last_contacted_at)),
                ExportColumn('next_follow_up_at', 'Next Follow-up', lambda m: format_date(m.next_follow_up_at)),
                ExportColumn('notes', 'Notes', lambda m: m.notes, default=False),
                ExportColumn('collection_count', 'Collections', lambda m: m.collection_total),
                ExportColumn('total_amount_raised', 'Total Raised', lambda m: format_currency(m.collected_pence)),
                ExportColumn('created_at', 'Created', lambda m: format_date(m.created_at), default=False),
                ExportColumn('updated_at', 'Updated', lambda m: format_date(m.updated_at), default=False),
            ),
        ),
    )
}


def get_export(name: str) -> ExportVariant:
    try:
        return EXPORTS[name]
    except KeyError:
        raise UnknownExportError(f"Unknown export: '{name}'. Valid options: {', '.join(EXPORTS)}")


def select_columns(variant: ExportVariant, keys: Optional[Sequence[str]] = None) -> List[ExportColumn]:
    """
    Resolve requested column keys, in the order requested.

    Raises:
        InvalidColumnError: If any key is not a column of ``variant``.
    """
    if not keys:
        return variant.default_columns()

    by_key = {column.key: column for column in variant.columns}
    unknown = [key for key in keys if key not in by_key]
    if unknown:
        raise InvalidColumnError(f"Unknown columns for {variant.name}: {', '.join(unknown)}")
    return [by_key[key] for key in keys]


def build_export(name: str, columns: Optional[Sequence[str]] = None, filters: Optional[dict] = None):
    """
    Build the header and rows for an export.

    Args:
        name: Export variant (``donations``, ``recurring``, ``offline-income``,
            ``collections``, ``fundraisers``, ``donors``, ``masjids``).
        columns: Column keys to include; the variant's default columns when empty.
        filters: Filter values. Keys the variant does not accept and empty
            values are ignored.

    Returns:
        tuple: ``(header, rows)`` with ``header`` a list of labels and
        ``rows`` a list of lists of cell values.

    Raises:
        UnknownExportError: If ``name`` is not a known variant.
        InvalidColumnError: If a requested column does not exist.
    """
    variant = get_export(name)
    selected = select_columns(variant, columns)

    filters = {
        key: value
        for key, value in (filters or {}).items()
        if key in variant.filters and value not in (None, '')
    }

    header = [column.label for column in selected]
    rows = [
        [column.value(record) for column in selected]
        for record in variant.queryset(**filters)
    ]
    return header, rows


def render_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    output = io.StringIO(newline='')
    writer = csv.writer(output)
    writer.writerow(header)
    for row in rows:
        writer.writerow(['' if value is None else value for value in row])
    return output.getvalue()


# =============================================================================
# Report sections
# =============================================================================

SECTION_HEADER = ['Group', 'Label', 'Amount (pence)', 'Amount', 'Count']


def flatten_section(section: dict, prefix: str = '') -> List[list]:
    """
    Flatten one report section into CSV rows.

    Row lists become one CSV row per entry under their group name, nested
    dicts are flattened with a dotted group name (``water.by_status``) and
    scalar figures are written with an empty label.

    Example::

        >>> flatten_section({'total_collected_pence': 150, 'by_type': [{'label': 'JUMMAH', 'amount_pence': 150, 'count': 3}]})
        [['summary', 'total_collected_pence', 150, '£1.50', ''], ['by_type', 'JUMMAH', 150, '£1.50', 3]]
    """
    rows = []
    for key, value in section.items():
        group = f'{prefix}.{key}' if prefix else key

        if isinstance(value, dict):
            rows.extend(flatten_section(value, group))
        elif isinstance(value, list):
            for entry in value:
                amount = entry.get('amount_pence', entry.get('total_pence'))
                count = entry.get('count', entry.get('donation_count', entry.get('total_count')))
                rows.append([
                    group,
                    entry.get('label', entry.get('name', '')),
                    amount if amount is not None else '',
                    format_currency(amount) if amount is not None else '',
                    count if count is not None else '',
                ])
        elif key.endswith('_pence'):
            rows.append([prefix or 'summary', key, value, format_currency(value), ''])
        else:
            rows.append([prefix or 'summary', key, '', '', '' if value is None else value])
    return rows
