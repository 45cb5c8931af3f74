from rest_framework import serializers

from apps.donations.formatting import format_currency, format_staff_name
from apps.donations.models import CollectionSource, DonationType, Donor, Fundraiser, PaymentMethod
from apps.donations.serializers import DonorMinimalSerializer

from .models import (
    ProjectDonationStatus,
    SponsorshipDonation,
    SponsorshipProject,
    SponsorshipProjectCountry,
    SponsorshipProjectType,
    WaterProject,
    WaterProjectCountry,
    WaterProjectDonation,
    WaterProjectType,
)
from .services import REQUIRED_COMPLETION_IMAGES


# =============================================================================
# Input Serializers
# =============================================================================

class ProjectDonationFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for project donation lists.

    Query Parameters:
        search (str): Donor name/email, donation number or plaque name
        status (str): Fulfillment status
        project_type (str): Project type
        country (UUID): Country id
        date_from (date), date_to (date): Created date range
    """

    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ProjectDonationStatus.choices, required=False)
    project_type = serializers.CharField(required=False, allow_blank=True)
    country = serializers.UUIDField(required=False)
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


class ProjectDonationUpdateSerializer(serializers.Serializer):
    """PATCH body: status and/or notes."""

    status = serializers.ChoiceField(choices=ProjectDonationStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Provide a status or notes.')
        return attrs


class CompleteDonationInputSerializer(serializers.Serializer):
    """
    Completion report for a project donation.

    Fields:
        images (list[url]): Exactly four photo URLs
        report (str): Optional report text
        report_pdf (url): Optional PDF link
        drive_link (url): Optional Google Drive folder
    """

    images = serializers.ListField(child=serializers.URLField(max_length=500))
    report = serializers.CharField(required=False, allow_blank=True, default='')
    report_pdf = serializers.URLField(required=False, allow_blank=True, max_length=500)
    drive_link = serializers.URLField(required=False, allow_blank=True, max_length=500)

    def validate_images(self, value):
        if len(value) != REQUIRED_COMPLETION_IMAGES:
            raise serializers.ValidationError(f'Exactly {REQUIRED_COMPLETION_IMAGES} images are required')
        return value


class ProjectDonationCreateSerializer(serializers.Serializer):
    """
    Offline water/sponsorship donation entered by staff.

    Subclasses set the ``project`` and ``country`` querysets.
    """

    donor = serializers.PrimaryKeyRelatedField(queryset=Donor.objects.all())
    fundraiser = serializers.PrimaryKeyRelatedField(
        queryset=Fundraiser.objects.all(),
        required=False,
        allow_null=True
    )
    amount_pence = serializers.IntegerField(min_value=1)
    donation_type = serializers.ChoiceField(choices=DonationType.choices, default=DonationType.GENERAL)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    collected_via = serializers.ChoiceField(choices=CollectionSource.choices, default=CollectionSource.OFFICE)
    gift_aid = serializers.BooleanField(default=False)
    status = serializers.ChoiceField(
        choices=[ProjectDonationStatus.WAITING_TO_REVIEW, ProjectDonationStatus.ORDERED],
        default=ProjectDonationStatus.WAITING_TO_REVIEW
    )
    plaque_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class WaterDonationCreateSerializer(ProjectDonationCreateSerializer):
    project = serializers.PrimaryKeyRelatedField(queryset=WaterProject.objects.all())
    country = serializers.PrimaryKeyRelatedField(queryset=WaterProjectCountry.objects.all())


class SponsorshipDonationCreateSerializer(ProjectDonationCreateSerializer):
    project = serializers.PrimaryKeyRelatedField(queryset=SponsorshipProject.objects.all())
    country = serializers.PrimaryKeyRelatedField(queryset=SponsorshipProjectCountry.objects.all())


# =============================================================================
# Output Serializers
# =============================================================================

class WaterProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = WaterProject
        fields = [
            'id',
            'project_type',
            'location',
            'description',
            'plaque_available',
            'is_active',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class SponsorshipProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = SponsorshipProject
        fields = [
            'id',
            'project_type',
            'location',
            'description',
            'is_active',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class WaterProjectCountrySerializer(serializers.ModelSerializer):
    project_type = serializers.ChoiceField(choices=WaterProjectType.choices)
    price_display = serializers.SerializerMethodField()

    class Meta:
        model = WaterProjectCountry
        fields = ['id', 'project_type', 'country', 'price_pence', 'price_display', 'is_active', 'sort_order']
        read_only_fields = ['id']

    def get_price_display(self, obj):
        return format_currency(obj.price_pence)


class SponsorshipProjectCountrySerializer(WaterProjectCountrySerializer):
    project_type = serializers.ChoiceField(choices=SponsorshipProjectType.choices)

    class Meta(WaterProjectCountrySerializer.Meta):
        model = SponsorshipProjectCountry


class ProjectDonationSerializer(serializers.ModelSerializer):
    """Shared output fields for water and sponsorship donations."""

    donor = DonorMinimalSerializer(read_only=True)
    project_type = serializers.SerializerMethodField()
    country_name = serializers.CharField(source='country.country', read_only=True)
    amount_display = serializers.SerializerMethodField()
    added_by_name = serializers.SerializerMethodField()

    class Meta:
        fields = [
            'id',
            'donation_number',
            'donor',
            'project_type',
            'country',
            'country_name',
            'amount_pence',
            'amount_display',
            'donation_type',
            'payment_method',
            'collected_via',
            'status',
            'gift_aid',
            'gift_aid_claimed',
            'transaction_id',
            'plaque_name',
            'notes',
            'fundraiser',
            'added_by_name',
            'email_sent',
            'report_sent',
            'completion_images',
            'completion_report',
            'completion_report_pdf',
            'google_drive_link',
            'completed_at',
            'created_at',
        ]
        read_only_fields = fields

    def get_project_type(self, obj):
        return obj.project.project_type

    def get_amount_display(self, obj):
        return format_currency(obj.amount_pence)

    def get_added_by_name(self, obj):
        return format_staff_name(obj.added_by)


class WaterProjectDonationSerializer(ProjectDonationSerializer):
    class Meta(ProjectDonationSerializer.Meta):
        model = WaterProjectDonation


class SponsorshipDonationSerializer(ProjectDonationSerializer):
    class Meta(ProjectDonationSerializer.Meta):
        model = SponsorshipDonation
