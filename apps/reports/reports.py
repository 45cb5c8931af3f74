"""
Back-office reports.

This module builds every figure shown on the reports, dashboard and Gift
Aid pages. Queries group rows in the database (``values().annotate()``)
and the per-source results are combined with :func:`merge_rows`.

Classes:
    ReportQueries: Static methods, one per report section.

Key Features:
    - Completed income is read from three sources (online donations,
      water project donations and sponsorship donations) and merged per
      label, so ``CASH`` from every source lands on one row.
    - Office income (offline income, masjid collections) is reported
      alongside online income in the financial and appeals sections.
    - An optional staff filter narrows records entered by one staff
      member (project donations, offline income, collections).

Example:
    Full report for March 2025::

        from datetime import date
        from apps.reports.reports import ReportQueries

        report = ReportQueries.full_report(date(2025, 3, 1), date(2025, 3, 31))
        report['financial']['total_income_pence']
        # 125000

Note:
    Date ranges are inclusive calendar dates compared against the local
    date of each record's timestamp. Online donations count as completed
    when ``status == COMPLETED``; project donations when
    ``status == COMPLETE``.
"""

from datetime import date, timedelta
from decimal import Decimal
from itertools import chain

from django.db.models import Count, Sum
from django.db.models.functions import Coalesce, TruncMonth
from django.utils import timezone

from apps.accounts.models import User
from apps.checkout.services.fees import round_half_up
from apps.donations.formatting import format_currency, format_donor_name
from apps.donations.models import (
    Appeal,
    Donation,
    DonationStatus,
    Donor,
    Fundraiser,
    PaymentMethod,
    RecurringDonation,
    RecurringStatus,
)
from apps.masjids.models import Collection, OfflineIncome, OfflineSource
from apps.projects.models import ProjectDonationStatus, SponsorshipDonation, WaterProjectDonation

from .exceptions import UnknownSectionError
from .rows import DEFAULT_LABEL, ReportRow, merge_rows, rows_to_dicts, total_amount, total_count


SECTIONS = (
    'financial',
    'donations',
    'donors',
    'collections',
    'fundraising',
    'projects',
    'recurring',
    'appeals',
    'operations',
    'staff',
)

UNASSIGNED = 'Unassigned'
UNSPECIFIED = 'UNSPECIFIED'
TOP_DONORS_LIMIT = 10
TOP_APPEALS_LIMIT = 6
LATEST_DONATIONS_LIMIT = 5


def in_range(queryset, field, start, end):
    """Filter ``queryset`` to records whose ``field`` date is in ``[start, end]``."""
    if start:
        queryset = queryset.filter(**{f'{field}__date__gte': start})
    if end:
        queryset = queryset.filter(**{f'{field}__date__lte': end})
    return queryset


def by_staff(queryset, staff):
    if staff:
        queryset = queryset.filter(added_by_id=staff)
    return queryset


def grouped_rows(queryset, field):
    """
    Amount and count per distinct value of ``field``.

    Returns:
        list[dict]: ``{'label', 'amount_pence', 'count'}`` per group; the
        label is the raw field value (may be ``None`` or ``''``).
    """
    groups = (
        queryset.order_by()
        .values(field)
        .annotate(total_pence=Coalesce(Sum('amount_pence'), 0), row_count=Count('id'))
    )
    return [
        {'label': group[field], 'amount_pence': group['total_pence'], 'count': group['row_count']}
        for group in groups
    ]


def merged_by(querysets, field, default_label=DEFAULT_LABEL):
    """Group each queryset by ``field`` and merge the results per label."""
    return merge_rows(
        chain.from_iterable(grouped_rows(queryset, field) for queryset in querysets),
        default_label=default_label,
    )


def totals_row(label, queryset):
    totals = queryset.order_by().aggregate(
        total_pence=Coalesce(Sum('amount_pence'), 0),
        row_count=Count('id'),
    )
    return ReportRow(label=label, amount_pence=totals['total_pence'], count=totals['row_count'])


def percent(part, whole):
    """Whole-number percentage, ``None`` when there is nothing to compare against."""
    if not whole:
        return None
    return round_half_up(Decimal(part) * 100 / Decimal(whole))


class ReportQueries:
    """
    Report queries for the back office.

    Every section method takes an inclusive ``start``/``end`` date pair and
    an optional ``staff`` user id and returns plain dicts/lists ready for
    a DRF ``Response``.
    """

    # =========================================================================
    # Sources
    # =========================================================================

    @staticmethod
    def online_donations(start, end):
        return in_range(Donation.objects.all(), 'created_at', start, end)

    @staticmethod
    def project_donations(model, start, end, staff=None):
        return by_staff(in_range(model.objects.all(), 'created_at', start, end), staff)

    @staticmethod
    def completed_sources(start, end, staff=None):
        """
        Completed donations from every donation source.

        Returns:
            list[QuerySet]: Online donations, water project donations and
            sponsorship donations, in that order. The staff filter only
            applies to project donations (online donations have no staff
            author).
        """
        return [
            ReportQueries.online_donations(start, end).filter(status=DonationStatus.COMPLETED),
            ReportQueries.project_donations(WaterProjectDonation, start, end, staff).filter(
                status=ProjectDonationStatus.COMPLETE
            ),
            ReportQueries.project_donations(SponsorshipDonation, start, end, staff).filter(
                status=ProjectDonationStatus.COMPLETE
            ),
        ]

    @staticmethod
    def all_sources(start, end, staff=None):
        """Donations from every source regardless of status."""
        return [
            ReportQueries.online_donations(start, end),
            ReportQueries.project_donations(WaterProjectDonation, start, end, staff),
            ReportQueries.project_donations(SponsorshipDonation, start, end, staff),
        ]

    @staticmethod
    def offline_income(start, end, staff=None):
        return by_staff(in_range(OfflineIncome.objects.all(), 'received_at', start, end), staff)

    @staticmethod
    def collections(start, end, staff=None):
        return by_staff(in_range(Collection.objects.all(), 'collected_at', start, end), staff)

    @staticmethod
    def fundraiser_totals(start, end, staff=None):
        """
        Completed income per fundraiser across every donation source.

        Fundraisers are keyed by id so two pages with the same title stay
        separate. Donations without a fundraiser are kept under ``None``.

        Returns:
            dict: ``{fundraiser_id: ReportRow}``.
        """
        totals = {}
        for queryset in ReportQueries.completed_sources(start, end, staff):
            groups = (
                queryset.order_by()
                .values('fundraiser_id', 'fundraiser__title', 'fundraiser__fundraiser_name')
                .annotate(total_pence=Coalesce(Sum('amount_pence'), 0), row_count=Count('id'))
            )
            for group in groups:
                fundraiser_id = group['fundraiser_id']
                if fundraiser_id is None:
                    label = UNASSIGNED
                else:
                    label = group['fundraiser__title'] or group['fundraiser__fundraiser_name'] or 'Unknown fundraiser'

                row = totals.setdefault(fundraiser_id, ReportRow(label=label))
                row.amount_pence += group['total_pence']
                row.count += group['row_count']
        return totals

    # =========================================================================
    # Sections
    # =========================================================================

    @staticmethod
    def financial(start, end, staff=None):
        """
        Income per source and the overall total.

        Returns:
            dict: ``total_income_pence``, ``total_count``, ``gift_aid_pence``
            and ``sources`` (one row per income source, in a fixed order).
        """
        online, water, sponsorship = ReportQueries.completed_sources(start, end, staff)
        active_recurring = in_range(
            RecurringDonation.objects.filter(status=RecurringStatus.ACTIVE), 'created_at', start, end
        )

        sources = [
            totals_row('Online donations', online),
            totals_row('Water projects', water),
            totals_row('Sponsorships', sponsorship),
            totals_row('Offline income', ReportQueries.offline_income(start, end, staff)),
            totals_row('Collections', ReportQueries.collections(start, end, staff)),
            totals_row('Recurring (active)', active_recurring),
        ]
        gift_aid = merged_by([qs.filter(gift_aid=True) for qs in (online, water, sponsorship)], 'donation_type')

        return {
            'total_income_pence': total_amount(sources),
            'total_count': total_count(sources),
            'gift_aid_pence': total_amount(gift_aid),
            'sources': rows_to_dicts(sources),
        }

    @staticmethod
    def donations(start, end, staff=None):
        """Completed donations grouped by type, method, appeal, fundraiser, channel and geography."""
        completed = ReportQueries.completed_sources(start, end, staff)
        online = completed[0]

        fundraisers = merge_rows(ReportQueries.fundraiser_totals(start, end, staff).values())

        return {
            'by_type': rows_to_dicts(merged_by(completed, 'donation_type')),
            'by_payment_method': rows_to_dicts(merged_by(completed, 'payment_method')),
            'by_appeal': rows_to_dicts(merged_by([online], 'appeal__title', default_label=UNASSIGNED)),
            'by_fundraiser': rows_to_dicts(fundraisers),
            'by_status': rows_to_dicts(merged_by(ReportQueries.all_sources(start, end, staff), 'status')),
            'by_channel': rows_to_dicts(merged_by(completed, 'collected_via', default_label=UNSPECIFIED)),
            'by_country': rows_to_dicts(merged_by(completed, 'donor__country')),
            'by_city': rows_to_dicts(merged_by(completed, 'donor__city')),
            'gift_aid': rows_to_dicts(merged_by([qs.filter(gift_aid=True) for qs in completed], 'donation_type')),
        }

    @staticmethod
    def donors(start, end, staff=None):
        """
        Donor summary and the top donors by completed income.

        Returns:
            dict: ``summary`` (total, new and returning donors, Gift Aid
            rate as a whole percentage, donation count), ``top_donors``
            (at most 10), ``by_country`` and ``by_city``.
        """
        completed = ReportQueries.completed_sources(start, end, staff)

        per_donor = {}
        donation_count = 0
        gift_aid_count = 0
        for queryset in completed:
            groups = (
                queryset.order_by()
                .values('donor_id')
                .annotate(total_pence=Coalesce(Sum('amount_pence'), 0), row_count=Count('id'))
            )
            for group in groups:
                entry = per_donor.setdefault(group['donor_id'], {'amount_pence': 0, 'count': 0})
                entry['amount_pence'] += group['total_pence']
                entry['count'] += group['row_count']
                donation_count += group['row_count']
            gift_aid_count += queryset.filter(gift_aid=True).count()

        new_donors = in_range(Donor.objects.all(), 'created_at', start, end).count()
        total_donors = len(per_donor)

        ranked = sorted(per_donor.items(), key=lambda item: item[1]['amount_pence'], reverse=True)
        ranked = ranked[:TOP_DONORS_LIMIT]
        donor_lookup = Donor.objects.in_bulk([donor_id for donor_id, _ in ranked])

        top_donors = []
        for donor_id, entry in ranked:
            donor = donor_lookup.get(donor_id)
            top_donors.append({
                'donor_id': str(donor_id),
                'name': format_donor_name(donor),
                'email': donor.email if donor else '-',
                'amount_pence': entry['amount_pence'],
                'donation_count': entry['count'],
            })

        return {
            'summary': {
                'total_donors': total_donors,
                'new_donors': new_donors,
                'returning_donors': max(total_donors - new_donors, 0),
                'gift_aid_rate': percent(gift_aid_count, donation_count) or 0,
                'total_donations': donation_count,
            },
            'top_donors': top_donors,
            'by_country': rows_to_dicts(merged_by(completed, 'donor__country')),
            'by_city': rows_to_dicts(merged_by(completed, 'donor__city')),
        }

    @staticmethod
    def collections_report(start, end, staff=None):
        """Masjid collections grouped by type, masjid and appeal."""
        collections = ReportQueries.collections(start, end, staff)
        totals = totals_row('Collections', collections)

        return {
            'total_collected_pence': totals.amount_pence,
            'collection_count': totals.count,
            'by_type': rows_to_dicts(merged_by([collections], 'type')),
            'by_masjid': rows_to_dicts(merged_by([collections], 'masjid__name', default_label=UNASSIGNED)),
            'by_appeal': rows_to_dicts(merged_by([collections], 'appeal__title', default_label=UNASSIGNED)),
        }

    @staticmethod
    def fundraising(start, end, staff=None):
        """
        Fundraiser income and progress against targets.

        ``by_fundraiser_target`` lists every fundraiser, with ``percent``
        set to ``None`` when the fundraiser has no target.
        """
        totals = ReportQueries.fundraiser_totals(start, end, staff)
        rows = merge_rows(totals.values())

        targets = []
        fundraisers = Fundraiser.objects.order_by('created_at')
        for fundraiser in fundraisers:
            row = totals.get(fundraiser.id)
            amount = row.amount_pence if row else 0
            targets.append({
                'fundraiser_id': str(fundraiser.id),
                'label': fundraiser.title or fundraiser.fundraiser_name,
                'amount_pence': amount,
                'target_pence': fundraiser.target_amount_pence,
                'percent': percent(amount, fundraiser.target_amount_pence),
            })

        return {
            'total_raised_pence': total_amount(rows),
            'active_fundraisers': sum(1 for fundraiser in fundraisers if fundraiser.is_active),
            'fundraiser_count': len(fundraisers),
            'by_fundraiser': rows_to_dicts(rows),
            'by_fundraiser_target': targets,
        }

    @staticmethod
    def projects(start, end, staff=None):
        """Water and sponsorship project totals (completed), reports sent and status breakdown."""
        report = {}
        for key, model in (('water', WaterProjectDonation), ('sponsorship', SponsorshipDonation)):
            donations = ReportQueries.project_donations(model, start, end, staff)
            completed = donations.filter(status=ProjectDonationStatus.COMPLETE)
            totals = totals_row(key, completed)

            report[key] = {
                'total_pence': totals.amount_pence,
                'donation_count': totals.count,
                'completed_reports': donations.filter(report_sent=True).count(),
                'by_project_type': rows_to_dicts(merged_by([completed], f'{model.project_field}__project_type')),
                'by_status': rows_to_dicts(merged_by([donations], 'status')),
            }
        return report

    @staticmethod
    def recurring(start, end, staff=None):
        """
        Recurring donations created in the range, plus upcoming payments.

        ``next_payment_month`` groups subscriptions whose next payment falls
        in the range by calendar month (``YYYY-MM``).
        """
        recurring = in_range(RecurringDonation.objects.all(), 'created_at', start, end)
        active = totals_row('Active', recurring.filter(status=RecurringStatus.ACTIVE))

        upcoming = (
            in_range(RecurringDonation.objects.all(), 'next_payment_date', start, end)
            .order_by()
            .annotate(month=TruncMonth('next_payment_date'))
            .values('month')
            .annotate(total_pence=Coalesce(Sum('amount_pence'), 0), row_count=Count('id'))
        )
        next_payment_rows = merge_rows(
            {
                'label': group['month'].strftime('%Y-%m') if group['month'] else None,
                'amount_pence': group['total_pence'],
                'count': group['row_count'],
            }
            for group in upcoming
        )

        return {
            'active_total_pence': active.amount_pence,
            'active_count': active.count,
            'by_status': rows_to_dicts(merged_by([recurring], 'status')),
            'by_frequency': rows_to_dicts(merged_by([recurring], 'frequency')),
            'next_payment_month': rows_to_dicts(next_payment_rows),
        }

    @staticmethod
    def appeals(start, end, staff=None):
        """
        Income per appeal: completed online donations, offline income and collections.

        Returns:
            dict: ``by_appeal`` rows sorted by ``total_pence`` descending.
        """
        by_appeal = {}

        def entry_for(appeal_id, title):
            label = (title or 'Unknown appeal') if appeal_id else UNASSIGNED
            return by_appeal.setdefault(appeal_id, {
                'appeal_id': str(appeal_id) if appeal_id else None,
                'label': label,
                'donation_amount_pence': 0,
                'donation_count': 0,
                'offline_amount_pence': 0,
                'collection_amount_pence': 0,
            })

        sources = (
            ('donation', ReportQueries.completed_sources(start, end, staff)[0]),
            ('offline', ReportQueries.offline_income(start, end, staff)),
            ('collection', ReportQueries.collections(start, end, staff)),
        )
        for key, queryset in sources:
            groups = (
                queryset.order_by()
                .values('appeal_id', 'appeal__title')
                .annotate(total_pence=Coalesce(Sum('amount_pence'), 0), row_count=Count('id'))
            )
            for group in groups:
                entry = entry_for(group['appeal_id'], group['appeal__title'])
                entry[f'{key}_amount_pence'] += group['total_pence']
                if key == 'donation':
                    entry['donation_count'] += group['row_count']

        rows = []
        for entry in by_appeal.values():
            entry['total_pence'] = (
                entry['donation_amount_pence'] + entry['offline_amount_pence'] + entry['collection_amount_pence']
            )
            rows.append(entry)
        rows.sort(key=lambda row: row['total_pence'], reverse=True)

        return {'by_appeal': rows}

    @staticmethod
    def operations(start, end, staff=None):
        """Refunded and failed donations across every source."""
        status_rows = merged_by(ReportQueries.all_sources(start, end, staff), 'status')
        return {
            'refunds': rows_to_dicts(row for row in status_rows if row.label == DonationStatus.REFUNDED),
            'failed': rows_to_dicts(row for row in status_rows if row.label == DonationStatus.FAILED),
        }

    @staticmethod
    def staff(start, end, staff=None):
        """
        Income entered by each staff member.

        Offline income, collections and completed project donations are
        attributed to ``added_by``; records without an author are left out.
        The staff filter is ignored here: the section always compares
        every staff member.
        """
        sources = (
            ('offline_income', ReportQueries.offline_income(start, end)),
            ('collections', ReportQueries.collections(start, end)),
            ('water_donations', ReportQueries.project_donations(WaterProjectDonation, start, end).filter(
                status=ProjectDonationStatus.COMPLETE
            )),
            ('sponsorship_donations', ReportQueries.project_donations(SponsorshipDonation, start, end).filter(
                status=ProjectDonationStatus.COMPLETE
            )),
        )

        per_staff = {}
        for key, queryset in sources:
            groups = (
                queryset.exclude(added_by__isnull=True)
                .order_by()
                .values('added_by_id')
                .annotate(total_pence=Coalesce(Sum('amount_pence'), 0), row_count=Count('id'))
            )
            for group in groups:
                entry = per_staff.setdefault(group['added_by_id'], {
                    f'{name}_{suffix}': 0
                    for name, _ in sources
                    for suffix in ('pence', 'count')
                })
                entry[f'{key}_pence'] += group['total_pence']
                entry[f'{key}_count'] += group['row_count']

        users = User.objects.in_bulk(list(per_staff))
        rows = []
        for user_id, entry in per_staff.items():
            user = users.get(user_id)
            rows.append({
                'staff_id': str(user_id),
                'label': user.get_display_name() if user else DEFAULT_LABEL,
                **entry,
                'total_pence': sum(entry[f'{name}_pence'] for name, _ in sources),
                'total_count': sum(entry[f'{name}_count'] for name, _ in sources),
            })
        rows.sort(key=lambda row: row['total_pence'], reverse=True)

        return {'by_staff': rows}

    # =========================================================================
    # Whole reports
    # =========================================================================

    @staticmethod
    def section(name, start, end, staff=None):
        """
        Build one report section by name.

        Raises:
            UnknownSectionError: If ``name`` is not in ``SECTIONS``.
        """
        builders = {
            'financial': ReportQueries.financial,
            'donations': ReportQueries.donations,
            'donors': ReportQueries.donors,
            'collections': ReportQueries.collections_report,
            'fundraising': ReportQueries.fundraising,
            'projects': ReportQueries.projects,
            'recurring': ReportQueries.recurring,
            'appeals': ReportQueries.appeals,
            'operations': ReportQueries.operations,
            'staff': ReportQueries.staff,
        }
        if name not in builders:
            raise UnknownSectionError(f"Unknown report section: '{name}'. Valid options: {', '.join(SECTIONS)}")
        return builders[name](start, end, staff)

    @staticmethod
    def full_report(start, end, staff=None):
        report = {'range': {'start': start.isoformat(), 'end': end.isoformat()}}
        for name in SECTIONS:
            report[name] = ReportQueries.section(name, start, end, staff)
        return report

    # =========================================================================
    # Dashboard
    # =========================================================================

    @staticmethod
    def monthly_income(months=12, today=None):
        """
        Online and office income per calendar month, oldest first.

        Online income is completed online donations; office income is
        offline income plus masjid collections. Months without income are
        included with zero totals.

        Returns:
            list[dict]: ``{'period': 'YYYY-MM', 'online_pence', 'office_pence', 'total_pence'}``.
        """
        today = today or timezone.localdate()

        periods = []
        year, month = today.year, today.month
        for _ in range(months):
            periods.append(date(year, month, 1))
            year, month = (year - 1, 12) if month == 1 else (year, month - 1)
        periods.reverse()

        series = {
            period.strftime('%Y-%m'): {'online_pence': 0, 'office_pence': 0}
            for period in periods
        }

        sources = (
            ('online_pence', Donation.objects.filter(status=DonationStatus.COMPLETED), 'created_at'),
            ('office_pence', OfflineIncome.objects.all(), 'received_at'),
            ('office_pence', Collection.objects.all(), 'collected_at'),
        )
        for key, queryset, field in sources:
            groups = (
                in_range(queryset, field, periods[0], today)
                .order_by()
                .annotate(month=TruncMonth(field))
                .values('month')
                .annotate(total_pence=Coalesce(Sum('amount_pence'), 0))
            )
            for group in groups:
                period = group['month'].strftime('%Y-%m')
                if period in series:
                    series[period][key] += group['total_pence']

        return [
            {
                'period': period,
                **values,
                'total_pence': values['online_pence'] + values['office_pence'],
            }
            for period, values in series.items()
        ]

    @staticmethod
    def dashboard(today=None):
        """
        Headline KPIs for the back-office dashboard.

        Counts are all-time; each KPI carries a ``trend`` (percentage change
        against the same figure at the end of last month, one decimal).

        Returns:
            dict: ``kpis``, ``payment_methods`` (online, card, cash),
            ``monthly_income`` (12 months), ``top_appeals`` (at most 6) and
            ``latest_donations`` (at most 5).
        """
        today = today or timezone.localdate()
        last_month_end = today.replace(day=1) - timedelta(days=1)

        completed = Donation.objects.filter(status=DonationStatus.COMPLETED)
        completed_before = completed.filter(created_at__date__lte=last_month_end)

        def kpi(value, previous):
            trend = 0.0
            if previous:
                trend = round((value - previous) * 100 / previous, 1)
            return {'value': value, 'trend': trend}

        income = totals_row('income', completed).amount_pence
        income_before = totals_row('income', completed_before).amount_pence

        kpis = {
            'total_donors': kpi(
                Donor.objects.count(),
                Donor.objects.filter(created_at__date__lte=last_month_end).count(),
            ),
            'total_donations': kpi(completed.count(), completed_before.count()),
            'total_income_pence': kpi(income, income_before),
            'active_appeals': Appeal.objects.filter(is_active=True).count(),
            'active_fundraisers': Fundraiser.objects.filter(is_active=True).count(),
            'active_recurring': RecurringDonation.objects.filter(status=RecurringStatus.ACTIVE).count(),
            'projects_awaiting_review': sum(
                model.objects.filter(status=ProjectDonationStatus.WAITING_TO_REVIEW).count()
                for model in (WaterProjectDonation, SponsorshipDonation)
            ),
        }

        payment_methods = [
            totals_row('Online', completed.filter(payment_method=PaymentMethod.WEBSITE_STRIPE)).to_dict(),
            totals_row('Card', completed.filter(payment_method=PaymentMethod.CARD_SUMUP)).to_dict(),
            totals_row('Cash', OfflineIncome.objects.filter(source=OfflineSource.CASH)).to_dict(),
        ]

        top_appeals = [
            row for row in ReportQueries.appeals(None, None)['by_appeal']
            if row['appeal_id'] is not None
        ]
        active_ids = {str(pk) for pk in Appeal.objects.filter(is_active=True).values_list('id', flat=True)}
        top_appeals = [row for row in top_appeals if row['appeal_id'] in active_ids][:TOP_APPEALS_LIMIT]

        latest = completed.select_related('donor', 'appeal').order_by('-created_at')[:LATEST_DONATIONS_LIMIT]
        latest_donations = [
            {
                'id': str(donation.id),
                'donor_name': format_donor_name(donation.donor),
                'appeal_title': donation.appeal.title if donation.appeal else 'General Donation',
                'amount_pence': donation.amount_pence,
                'amount_display': format_currency(donation.amount_pence),
                'created_at': donation.created_at.isoformat(),
            }
            for donation in latest
        ]

        return {
            'kpis': kpis,
            'payment_methods': payment_methods,
            'monthly_income': ReportQueries.monthly_income(today=today),
            'top_appeals': top_appeals,
            'latest_donations': latest_donations,
        }

    # =========================================================================
    # Gift Aid
    # =========================================================================

    @staticmethod
    def gift_aid_schedule(start, end):
        """
        Completed donations split into Gift Aid eligible and ineligible.

        Rows follow the HMRC schedule layout (title, names, house
        name/number, postcode, date, amount) and are ordered by date.
        """
        def schedule_rows(gift_aid):
            rows = []
            for source, queryset in zip(('donation', 'water', 'sponsorship'), ReportQueries.completed_sources(start, end)):
                for donation in queryset.filter(gift_aid=gift_aid).select_related('donor'):
                    donor = donation.donor
                    rows.append({
                        'id': str(donation.id),
                        'source': source,
                        'donor_id': str(donor.id),
                        'title': donor.title or None,
                        'first_name': donor.first_name or None,
                        'last_name': donor.last_name or None,
                        'email': donor.email or None,
                        'phone': donor.phone or None,
                        'gift_aid_claimed': donation.gift_aid_claimed,
                        'house_number': donor.address or None,
                        'postcode': donor.postcode or None,
                        'aggregated': None,
                        'sponsored': None,
                        'donation_date': donation.created_at,
                        'amount_pence': donation.amount_pence,
                    })
            rows.sort(key=lambda row: row['donation_date'])
            for row in rows:
                row['donation_date'] = row['donation_date'].isoformat()
            return {
                'rows': rows,
                'summary': {
                    'total_amount_pence': sum(row['amount_pence'] for row in rows),
                    'total_count': len(rows),
                },
            }

        return {
            'range': {'start': start.isoformat(), 'end': end.isoformat()},
            'eligible': schedule_rows(True),
            'ineligible': schedule_rows(False),
        }

    @staticmethod
    def mark_gift_aid_claimed(start, end):
        """
        Flag every eligible donation in the range as claimed from HMRC.

        Returns:
            int: Number of donations updated.
        """
        return sum(
            queryset.filter(gift_aid=True, gift_aid_claimed=False).update(gift_aid_claimed=True)
            for queryset in ReportQueries.completed_sources(start, end)
        )

    @staticmethod
    def mark_donor_gift_aid(donor_id, start, end):
        """
        Turn on Gift Aid for a donor's completed donations in the range.

        Used when a donor returns a Gift Aid declaration after giving.

        Returns:
            int: Number of donations updated.
        """
        return sum(
            queryset.filter(donor_id=donor_id, gift_aid=False).update(gift_aid=True)
            for queryset in ReportQueries.completed_sources(start, end)
        )
