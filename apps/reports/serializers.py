"""
Serializers for reports app.

Input Serializers:
    ReportQuerySerializer - Date range (defaults to the current month) and staff filter
    GiftAidQuerySerializer - Date range for the Gift Aid schedule
    GiftAidDonorSerializer - Donor whose donations become Gift Aid eligible
    ExportQuerySerializer - Column selection and filters for CSV exports

Response Serializers:
    ReportRowSerializer - One grouped report row
    GiftAidScheduleSerializer - Gift Aid eligible/ineligible schedule
"""

import calendar

from django.utils import timezone
from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class ReportQuerySerializer(serializers.Serializer):
    """
    Validate the report date range.

    Query Parameters:
        start (date): First day of the range (inclusive)
        end (date): Last day of the range (inclusive)
        staff (uuid): Only count records entered by this staff user

    Note:
        A missing ``start`` defaults to the first day of the current month
        and a missing ``end`` to its last day.
    """

    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)
    staff = serializers.UUIDField(required=False)

    def validate(self, attrs):
        today = timezone.localdate()
        last_day = calendar.monthrange(today.year, today.month)[1]

        attrs.setdefault('start', today.replace(day=1))
        attrs.setdefault('end', today.replace(day=last_day))

        if attrs['start'] > attrs['end']:
            raise serializers.ValidationError({
                'start': 'Start date must be before end date'
            })

        return attrs


class GiftAidQuerySerializer(ReportQuerySerializer):
    staff = None


class GiftAidDonorSerializer(GiftAidQuerySerializer):
    donor = serializers.UUIDField()


class ExportQuerySerializer(serializers.Serializer):
    """
    Validate CSV export parameters.

    ``columns`` is a comma-separated list of column keys. Filters a
    variant does not support are ignored.
    """

    columns = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)
    frequency = serializers.CharField(required=False, allow_blank=True)
    source = serializers.CharField(required=False, allow_blank=True)
    type = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    country = serializers.CharField(required=False, allow_blank=True)
    appeal = serializers.UUIDField(required=False)
    masjid = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate_columns(self, value):
        return [key.strip() for key in value.split(',') if key.strip()]

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


# =============================================================================
# Response Serializers (for API documentation)
# =============================================================================

class ReportRowSerializer(serializers.Serializer):
    label = serializers.CharField()
    amount_pence = serializers.IntegerField()
    count = serializers.IntegerField()


class GiftAidSummarySerializer(serializers.Serializer):
    total_amount_pence = serializers.IntegerField()
    total_count = serializers.IntegerField()


class GiftAidRowSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    source = serializers.CharField()
    donor_id = serializers.UUIDField()
    title = serializers.CharField(allow_null=True)
    first_name = serializers.CharField(allow_null=True)
    last_name = serializers.CharField(allow_null=True)
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField(allow_null=True)
    gift_aid_claimed = serializers.BooleanField()
    house_number = serializers.CharField(allow_null=True)
    postcode = serializers.CharField(allow_null=True)
    aggregated = serializers.CharField(allow_null=True)
    sponsored = serializers.CharField(allow_null=True)
    donation_date = serializers.DateTimeField()
    amount_pence = serializers.IntegerField()


class GiftAidGroupSerializer(serializers.Serializer):
    rows = GiftAidRowSerializer(many=True)
    summary = GiftAidSummarySerializer()


class GiftAidScheduleSerializer(serializers.Serializer):
    range = serializers.DictField()
    eligible = GiftAidGroupSerializer()
    ineligible = GiftAidGroupSerializer()


class UpdatedCountSerializer(serializers.Serializer):
    updated = serializers.IntegerField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
