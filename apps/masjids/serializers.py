from rest_framework import serializers

from apps.donations.formatting import format_currency, format_staff_name
from apps.donations.models import Appeal, CollectionSource, DonationType

from .models import Collection, CollectionType, Masjid, OfflineIncome, OfflineSource
from .services import normalize_fields


MASJID_TEXT_FIELDS = [
    'name',
    'address',
    'city',
    'postcode',
    'country',
    'region',
    'contact_name',
    'contact_role',
    'secondary_contact_name',
    'secondary_contact_role',
    'phone',
    'phone_alt',
    'email',
    'email_alt',
    'website',
    'notes',
]


# =============================================================================
# Input Serializers
# =============================================================================

class DateRangeFilterSerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


class CollectionFilterSerializer(DateRangeFilterSerializer):
    masjid = serializers.UUIDField(required=False)
    appeal = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=CollectionType.choices, required=False)


class OfflineIncomeFilterSerializer(DateRangeFilterSerializer):
    search = serializers.CharField(required=False, allow_blank=True)
    appeal = serializers.UUIDField(required=False)
    source = serializers.ChoiceField(choices=OfflineSource.choices, required=False)


# =============================================================================
# Model Serializers
# =============================================================================

class MasjidSerializer(serializers.ModelSerializer):
    added_by_name = serializers.SerializerMethodField()
    collection_count = serializers.IntegerField(source='collections.count', read_only=True)

    class Meta:
        model = Masjid
        fields = [
            'id',
            'name',
            'status',
            'address',
            'city',
            'postcode',
            'country',
            'region',
            'contact_name',
            'contact_role',
            'secondary_contact_name',
            'secondary_contact_role',
            'phone',
            'phone_alt',
            'email',
            'email_alt',
            'website',
            'preferred_contact_method',
            'last_contacted_at',
            'next_follow_up_at',
            'notes',
            'added_by_name',
            'collection_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def to_internal_value(self, data):
        if hasattr(data, 'dict'):
            data = data.dict()
        return super().to_internal_value(normalize_fields(data, MASJID_TEXT_FIELDS))

    def get_added_by_name(self, obj):
        return format_staff_name(obj.added_by)


class CollectionSerializer(serializers.ModelSerializer):
    masjid = serializers.PrimaryKeyRelatedField(queryset=Masjid.objects.all(), required=False, allow_null=True)
    appeal = serializers.PrimaryKeyRelatedField(queryset=Appeal.objects.all(), required=False, allow_null=True)
    masjid_name = serializers.CharField(source='masjid.name', read_only=True, default=None)
    appeal_title = serializers.CharField(source='appeal.title', read_only=True, default=None)
    amount_pence = serializers.IntegerField(min_value=1)
    amount_display = serializers.SerializerMethodField()
    added_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Collection
        fields = [
            'id',
            'masjid',
            'masjid_name',
            'appeal',
            'appeal_title',
            'amount_pence',
            'amount_display',
            'donation_type',
            'type',
            'collected_at',
            'notes',
            'added_by_name',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']

    def get_amount_display(self, obj):
        return format_currency(obj.amount_pence)

    def get_added_by_name(self, obj):
        return format_staff_name(obj.added_by)


class OfflineIncomeSerializer(serializers.ModelSerializer):
    appeal = serializers.PrimaryKeyRelatedField(queryset=Appeal.objects.all())
    appeal_title = serializers.CharField(source='appeal.title', read_only=True, default=None)
    amount_pence = serializers.IntegerField(min_value=1)
    donation_type = serializers.ChoiceField(choices=DonationType.choices, default=DonationType.GENERAL)
    source = serializers.ChoiceField(choices=OfflineSource.choices)
    collected_via = serializers.ChoiceField(choices=CollectionSource.choices, default=CollectionSource.OFFICE)
    amount_display = serializers.SerializerMethodField()
    added_by_name = serializers.SerializerMethodField()

    class Meta:
        model = OfflineIncome
        fields = [
            'id',
            'donation_number',
            'appeal',
            'appeal_title',
            'amount_pence',
            'amount_display',
            'donation_type',
            'source',
            'collected_via',
            'received_at',
            'notes',
            'added_by_name',
            'created_at',
        ]
        read_only_fields = ['id', 'donation_number', 'created_at']

    def get_amount_display(self, obj):
        return format_currency(obj.amount_pence)

    def get_added_by_name(self, obj):
        return format_staff_name(obj.added_by)
