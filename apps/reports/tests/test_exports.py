import csv
import io

import pytest

from apps.masjids.models import Masjid
from apps.reports.exceptions import InvalidColumnError, UnknownExportError
from apps.reports.exports import EXPORTS, SECTION_HEADER, build_export, flatten_section, masjids_queryset, render_csv


# =============================================================================
# Column selection
# =============================================================================

@pytest.mark.django_db
class TestBuildExport:

    def test_default_columns_skip_hidden_ones(self, report_data):
        header, rows = build_export('donations')

        assert 'Donor Email' in header
        assert 'Transaction ID' not in header
        assert len(rows) == 5

    def test_selected_columns_in_requested_order(self, report_data):
        header, rows = build_export(
            'donations',
            columns=['amount', 'donor_email'],
            filters={'status': 'COMPLETED'},
        )

        assert header == ['Amount', 'Donor Email']
        assert sorted(rows) == [
            ['£0.40', 'bilal@example.com'],
            ['£0.60', 'amina@example.com'],
            ['£25.00', 'amina@example.com'],
        ]

    def test_unknown_column(self, db):
        with pytest.raises(InvalidColumnError):
            build_export('donations', columns=['amount', 'favourite_colour'])

    def test_unknown_variant(self, db):
        with pytest.raises(UnknownExportError):
            build_export('volunteers')

    def test_unsupported_and_blank_filters_are_ignored(self, report_data):
        header, rows = build_export('donors', filters={'status': 'ACTIVE', 'city': '', 'search': 'amina'})

        assert len(rows) == 1
        assert rows[0][header.index('Total Donated')] == '£25.60'


# =============================================================================
# Variants
# =============================================================================

@pytest.mark.django_db
class TestVariants:

    def test_every_variant_has_default_columns(self):
        for variant in EXPORTS.values():
            assert variant.default_columns(), variant.name

    def test_offline_income(self, report_data):
        header, rows = build_export('offline-income', filters={'source': 'CASH'})

        assert header[:3] == ['Donation Number', 'Appeal', 'Amount']
        assert rows == [['786-100000004', 'Emergency Relief', '£12.00', 'Cash', 'General', rows[0][5]]]

    def test_collections_filter_by_type(self, report_data):
        header, rows = build_export('collections', columns=['masjid', 'appeal', 'amount'], filters={'type': 'EID'})

        assert rows == [['No masjid', 'General', '£2.00']]

    def test_recurring(self, report_data):
        header, rows = build_export('recurring', columns=['amount', 'status'], filters={'status': 'ACTIVE'})

        assert rows == [['£15.00', 'Active']]

    def test_fundraisers_status_filter(self, report_data):
        header, rows = build_export('fundraisers', columns=['title', 'status'], filters={'status': 'inactive'})

        assert rows == []

        header, rows = build_export('fundraisers', columns=['title', 'status', 'amount_raised'], filters={'status': 'active'})

        assert rows == [['Run for Relief', 'Active', '£0.60']]

    def test_masjids_totals(self, report_data):
        header, rows = build_export('masjids', columns=['name', 'collection_count', 'total_amount_raised'])

        assert rows == [['Makkah Masjid', 1, '£8.00']]

    def test_masjids_sorted_by_name(self, report_data):
        Masjid.objects.create(name='Al-Noor Masjid', address='9 Harehills Lane', city='Leeds')

        assert masjids_queryset().ordered
        header, rows = build_export('masjids', columns=['name', 'collection_count'])

        assert rows == [['Al-Noor Masjid', 0], ['Makkah Masjid', 1]]


# =============================================================================
# CSV rendering
# =============================================================================

class TestRenderCsv:

    def test_quotes_values(self):
        content = render_csv(['Name', 'Notes'], [['Khan, Amina', None], ['Bilal', 'said "thanks"']])

        parsed = list(csv.reader(io.StringIO(content)))
        assert parsed == [['Name', 'Notes'], ['Khan, Amina', ''], ['Bilal', 'said "thanks"']]

    def test_flatten_section(self):
        section = {
            'total_collected_pence': 1000,
            'collection_count': 2,
            'by_type': [
                {'label': 'JUMMAH', 'amount_pence': 800, 'count': 1},
                {'label': 'EID', 'amount_pence': 200, 'count': 1},
            ],
        }

        rows = flatten_section(section)

        assert rows == [
            ['summary', 'total_collected_pence', 1000, '£10.00', ''],
            ['summary', 'collection_count', '', '', 2],
            ['by_type', 'JUMMAH', 800, '£8.00', 1],
            ['by_type', 'EID', 200, '£2.00', 1],
        ]

    def test_flatten_nested_section(self):
        section = {'water': {'total_pence': 50, 'by_status': [{'label': 'COMPLETE', 'amount_pence': 50, 'count': 1}]}}

        rows = flatten_section(section)

        assert rows == [
            ['water', 'total_pence', 50, '£0.50', ''],
            ['water.by_status', 'COMPLETE', 50, '£0.50', 1],
        ]
        assert len(SECTION_HEADER) == len(rows[0])
