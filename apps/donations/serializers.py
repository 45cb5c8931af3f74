from rest_framework import serializers

from .formatting import format_collection_source, format_currency, format_payment_method
from .models import Appeal, Donation, Donor, Fundraiser, RecurringDonation


class DonorMinimalSerializer(serializers.ModelSerializer):
    """Minimal donor info for nested serialization."""

    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = Donor
        fields = ['id', 'full_name', 'email']
        read_only_fields = fields


class DonorSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)
    total_pence = serializers.IntegerField(read_only=True, default=0)
    donation_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Donor
        fields = [
            'id',
            'title',
            'first_name',
            'last_name',
            'full_name',
            'email',
            'phone',
            'address',
            'city',
            'postcode',
            'country',
            'total_pence',
            'donation_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_email(self, value):
        return value.strip().lower()


class AppealSerializer(serializers.ModelSerializer):
    class Meta:
        model = Appeal
        fields = [
            'id',
            'title',
            'slug',
            'summary',
            'is_active',
            'allow_monthly',
            'allow_yearly',
            'sort_order',
            'created_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at']


class FundraiserSerializer(serializers.ModelSerializer):
    appeal_title = serializers.CharField(source='appeal.title', read_only=True)
    raised_pence = serializers.IntegerField(read_only=True, default=0)
    donation_count = serializers.IntegerField(read_only=True, default=0)
    progress_percent = serializers.SerializerMethodField()

    class Meta:
        model = Fundraiser
        fields = [
            'id',
            'appeal',
            'appeal_title',
            'fundraiser_name',
            'email',
            'title',
            'slug',
            'target_amount_pence',
            'raised_pence',
            'donation_count',
            'progress_percent',
            'is_active',
            'created_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at']

    def get_progress_percent(self, obj):
        raised = getattr(obj, 'raised_pence', 0) or 0
        if not obj.target_amount_pence:
            return None
        return round(raised * 100 / obj.target_amount_pence, 1)


class DonationSerializer(serializers.ModelSerializer):
    donor = DonorMinimalSerializer(read_only=True)
    appeal_title = serializers.CharField(source='appeal.title', read_only=True, default=None)
    fundraiser_title = serializers.CharField(source='fundraiser.title', read_only=True, default=None)
    amount_display = serializers.SerializerMethodField()
    payment_method_display = serializers.SerializerMethodField()
    collected_via_display = serializers.SerializerMethodField()

    class Meta:
        model = Donation
        fields = [
            'id',
            'order_number',
            'donor',
            'appeal',
            'appeal_title',
            'fundraiser',
            'fundraiser_title',
            'product_name',
            'amount_pence',
            'amount_display',
            'donation_type',
            'frequency',
            'payment_method',
            'payment_method_display',
            'collected_via',
            'collected_via_display',
            'status',
            'gift_aid',
            'gift_aid_claimed',
            'transaction_id',
            'created_at',
            'completed_at',
        ]
        read_only_fields = fields

    def get_amount_display(self, obj):
        return format_currency(obj.amount_pence)

    def get_payment_method_display(self, obj):
        return format_payment_method(obj.payment_method)

    def get_collected_via_display(self, obj):
        return format_collection_source(obj.collected_via)


class RecurringDonationSerializer(serializers.ModelSerializer):
    donor = DonorMinimalSerializer(read_only=True)
    appeal_title = serializers.CharField(source='appeal.title', read_only=True, default=None)
    amount_display = serializers.SerializerMethodField()

    class Meta:
        model = RecurringDonation
        fields = [
            'id',
            'order_number',
            'donor',
            'appeal',
            'appeal_title',
            'product_name',
            'amount_pence',
            'amount_display',
            'donation_type',
            'frequency',
            'payment_method',
            'status',
            'gift_aid',
            'subscription_id',
            'next_payment_date',
            'last_payment_date',
            'created_at',
            'cancelled_at',
        ]
        read_only_fields = fields

    def get_amount_display(self, obj):
        return format_currency(obj.amount_pence)
