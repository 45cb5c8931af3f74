import pytest
from datetime import date
from django.utils import timezone

from apps.donations.models import Donation
from apps.projects.models import WaterProjectDonation
from apps.reports.exceptions import UnknownSectionError
from apps.reports.reports import SECTIONS, ReportQueries


def rows_by_label(rows):
    return {row['label']: (row['amount_pence'], row['count']) for row in rows}


# =============================================================================
# Financial
# =============================================================================

@pytest.mark.django_db
class TestFinancial:

    def test_sources_and_totals(self, report_data, this_month):
        data = ReportQueries.financial(*this_month)

        assert rows_by_label(data['sources']) == {
            'Online donations': (2600, 3),
            'Water projects': (50, 1),
            'Sponsorships': (3000, 1),
            'Offline income': (1200, 1),
            'Collections': (1000, 2),
            'Recurring (active)': (1500, 1),
        }
        assert data['total_income_pence'] == 9350
        assert data['total_count'] == 9
        assert data['gift_aid_pence'] == 2560

    def test_sources_keep_fixed_order(self, report_data, this_month):
        data = ReportQueries.financial(*this_month)

        assert [row['label'] for row in data['sources']][0] == 'Online donations'
        assert [row['label'] for row in data['sources']][-1] == 'Recurring (active)'

    def test_staff_filter_narrows_office_and_project_income(self, report_data, this_month, staff_user):
        data = ReportQueries.financial(*this_month, staff=staff_user.id)
        sources = rows_by_label(data['sources'])

        assert sources['Online donations'] == (2600, 3)
        assert sources['Water projects'] == (50, 1)
        assert sources['Sponsorships'] == (0, 0)
        assert sources['Collections'] == (800, 1)

    def test_range_outside_data_is_empty(self, report_data):
        data = ReportQueries.financial(date(2020, 1, 1), date(2020, 1, 31))

        assert data['total_income_pence'] == 0
        assert data['total_count'] == 0


# =============================================================================
# Donations
# =============================================================================

@pytest.mark.django_db
class TestDonationsSection:

    def test_payment_methods_merge_across_sources(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert data['by_payment_method'] == [
            {'label': 'WEBSITE_STRIPE', 'amount_pence': 5500, 'count': 2},
            {'label': 'CASH', 'amount_pence': 150, 'count': 3},
        ]

    def test_by_type(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert rows_by_label(data['by_type']) == {'GENERAL': (3150, 4), 'ZAKAT': (2500, 1)}

    def test_blank_channel_is_unspecified(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert rows_by_label(data['by_channel']) == {
            'website': (5500, 2),
            'office': (110, 2),
            'UNSPECIFIED': (40, 1),
        }

    def test_by_status_includes_every_status(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert rows_by_label(data['by_status']) == {
            'WAITING_TO_REVIEW': (45000, 1),
            'COMPLETE': (3050, 2),
            'COMPLETED': (2600, 3),
            'REFUNDED': (700, 1),
            'FAILED': (300, 1),
        }

    def test_by_appeal_and_city(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert rows_by_label(data['by_appeal']) == {'Emergency Relief': (2600, 3)}
        assert rows_by_label(data['by_city']) == {'Leeds': (5560, 3), 'Bradford': (90, 2)}

    def test_gift_aid_rows(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert rows_by_label(data['gift_aid']) == {'ZAKAT': (2500, 1), 'GENERAL': (60, 1)}

    def test_fundraisers_include_project_donations(self, report_data, this_month):
        data = ReportQueries.donations(*this_month)

        assert data['by_fundraiser'] == [
            {'label': 'Unassigned', 'amount_pence': 5540, 'count': 3},
            {'label': 'Run for Relief', 'amount_pence': 110, 'count': 2},
        ]


# =============================================================================
# Donors
# =============================================================================

@pytest.mark.django_db
class TestDonorsSection:

    def test_summary(self, report_data, this_month):
        summary = ReportQueries.donors(*this_month)['summary']

        assert summary == {
            'total_donors': 2,
            'new_donors': 2,
            'returning_donors': 0,
            'gift_aid_rate': 40,
            'total_donations': 5,
        }

    def test_top_donors(self, report_data, this_month, amina):
        top = ReportQueries.donors(*this_month)['top_donors']

        assert top[0] == {
            'donor_id': str(amina.id),
            'name': 'Mrs Amina Khan',
            'email': 'amina@example.com',
            'amount_pence': 5560,
            'donation_count': 3,
        }
        assert top[1]['amount_pence'] == 90

    def test_no_donations_gives_zero_rate(self, db, this_month):
        summary = ReportQueries.donors(*this_month)['summary']

        assert summary['gift_aid_rate'] == 0
        assert summary['total_donations'] == 0


# =============================================================================
# Collections, fundraising, projects, recurring
# =============================================================================

@pytest.mark.django_db
class TestOtherSections:

    def test_collections(self, report_data, this_month):
        data = ReportQueries.collections_report(*this_month)

        assert data['total_collected_pence'] == 1000
        assert data['collection_count'] == 2
        assert rows_by_label(data['by_masjid']) == {'Makkah Masjid': (800, 1), 'Unassigned': (200, 1)}
        assert rows_by_label(data['by_type']) == {'JUMMAH': (800, 1), 'EID': (200, 1)}

    def test_fundraising_targets(self, report_data, this_month, fundraiser):
        data = ReportQueries.fundraising(*this_month)

        assert data['fundraiser_count'] == 1
        assert data['active_fundraisers'] == 1
        assert data['total_raised_pence'] == 5650
        assert data['by_fundraiser_target'] == [{
            'fundraiser_id': str(fundraiser.id),
            'label': 'Run for Relief',
            'amount_pence': 110,
            'target_pence': 10000,
            'percent': 1,
        }]

    def test_projects(self, report_data, this_month):
        data = ReportQueries.projects(*this_month)

        assert data['water']['total_pence'] == 50
        assert data['water']['donation_count'] == 1
        assert data['water']['completed_reports'] == 0
        assert rows_by_label(data['water']['by_project_type']) == {'WATER_WELL': (50, 1)}
        assert data['sponsorship']['total_pence'] == 3000
        assert data['sponsorship']['completed_reports'] == 1

    def test_recurring(self, report_data, this_month):
        data = ReportQueries.recurring(*this_month)
        month = timezone.localdate().strftime('%Y-%m')

        assert data['active_total_pence'] == 1500
        assert data['active_count'] == 1
        assert rows_by_label(data['by_frequency']) == {'MONTHLY': (1500, 1), 'YEARLY': (1000, 1)}
        assert data['next_payment_month'] == [{'label': month, 'amount_pence': 1500, 'count': 1}]


# =============================================================================
# Appeals, operations, staff
# =============================================================================

@pytest.mark.django_db
class TestAttributionSections:

    def test_appeals_combine_income(self, report_data, this_month, appeal):
        rows = ReportQueries.appeals(*this_month)['by_appeal']

        assert rows[0] == {
            'appeal_id': str(appeal.id),
            'label': 'Emergency Relief',
            'donation_amount_pence': 2600,
            'donation_count': 3,
            'offline_amount_pence': 1200,
            'collection_amount_pence': 800,
            'total_pence': 4600,
        }
        assert rows[1]['label'] == 'Unassigned'
        assert rows[1]['total_pence'] == 200

    def test_operations(self, report_data, this_month):
        data = ReportQueries.operations(*this_month)

        assert data['refunds'] == [{'label': 'REFUNDED', 'amount_pence': 700, 'count': 1}]
        assert data['failed'] == [{'label': 'FAILED', 'amount_pence': 300, 'count': 1}]

    def test_staff_attribution(self, report_data, this_month, staff_user):
        rows = ReportQueries.staff(*this_month)['by_staff']

        assert [row['label'] for row in rows] == ['Sami Staff', 'admin@example.com']
        sami = rows[0]
        assert sami['staff_id'] == str(staff_user.id)
        assert sami['offline_income_pence'] == 1200
        assert sami['collections_pence'] == 800
        assert sami['water_donations_pence'] == 50
        assert sami['water_donations_count'] == 1
        assert sami['sponsorship_donations_count'] == 0
        assert sami['total_pence'] == 2050
        assert sami['total_count'] == 3


# =============================================================================
# Full report
# =============================================================================

@pytest.mark.django_db
class TestFullReport:

    def test_contains_every_section(self, report_data, this_month):
        report = ReportQueries.full_report(*this_month)

        assert set(SECTIONS) <= set(report)
        assert report['range'] == {'start': this_month[0].isoformat(), 'end': this_month[1].isoformat()}

    def test_unknown_section(self, db, this_month):
        with pytest.raises(UnknownSectionError):
            ReportQueries.section('weather', *this_month)


# =============================================================================
# Dashboard
# =============================================================================

@pytest.mark.django_db
class TestDashboard:

    def test_kpis(self, report_data):
        data = ReportQueries.dashboard()

        assert data['kpis']['total_donors'] == {'value': 2, 'trend': 0.0}
        assert data['kpis']['total_donations']['value'] == 3
        assert data['kpis']['total_income_pence']['value'] == 2600
        assert data['kpis']['active_recurring'] == 1
        assert data['kpis']['projects_awaiting_review'] == 1

    def test_payment_methods(self, report_data):
        data = ReportQueries.dashboard()

        assert [(row['label'], row['amount_pence']) for row in data['payment_methods']] == [
            ('Online', 2500),
            ('Card', 0),
            ('Cash', 1200),
        ]

    def test_monthly_income_has_twelve_months(self, report_data):
        series = ReportQueries.dashboard()['monthly_income']

        assert len(series) == 12
        assert series[-1] == {
            'period': timezone.localdate().strftime('%Y-%m'),
            'online_pence': 2600,
            'office_pence': 2200,
            'total_pence': 4800,
        }
        assert series[0]['total_pence'] == 0

    def test_top_appeals_and_latest(self, report_data):
        data = ReportQueries.dashboard()

        assert [row['label'] for row in data['top_appeals']] == ['Emergency Relief']
        assert len(data['latest_donations']) == 3
        assert data['latest_donations'][0]['amount_display'] in ('£0.60', '£0.40', '£25.00')


# =============================================================================
# Gift Aid
# =============================================================================

@pytest.mark.django_db
class TestGiftAid:

    def test_schedule_splits_eligible(self, report_data, this_month):
        schedule = ReportQueries.gift_aid_schedule(*this_month)

        assert schedule['eligible']['summary'] == {'total_amount_pence': 2560, 'total_count': 2}
        assert schedule['ineligible']['summary'] == {'total_amount_pence': 3090, 'total_count': 3}

        row = next(row for row in schedule['eligible']['rows'] if row['amount_pence'] == 2500)
        assert row['title'] == 'Mrs'
        assert row['house_number'] == '12 Park Lane'
        assert row['postcode'] == 'LS1 4AP'
        assert row['source'] == 'donation'
        assert row['gift_aid_claimed'] is False

    def test_mark_claimed_once(self, report_data, this_month):
        assert ReportQueries.mark_gift_aid_claimed(*this_month) == 2
        assert ReportQueries.mark_gift_aid_claimed(*this_month) == 0
        assert Donation.objects.filter(gift_aid_claimed=True).count() == 2

    def test_mark_donor_gift_aid(self, report_data, this_month, bilal):
        updated = ReportQueries.mark_donor_gift_aid(bilal.id, *this_month)

        assert updated == 2
        assert WaterProjectDonation.objects.get(donation_number='786-100000001').gift_aid is True
        # Refunded and failed donations stay ineligible
        assert Donation.objects.filter(donor=bilal, gift_aid=True).count() == 1
