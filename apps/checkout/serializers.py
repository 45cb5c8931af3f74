from rest_framework import serializers

from apps.donations.models import Appeal, DonationType, Frequency, Fundraiser
from apps.projects.models import (
    SponsorshipProject,
    SponsorshipProjectCountry,
    WaterProject,
    WaterProjectCountry,
)

from .models import Order, OrderItem
from .services.validation import errors_to_dict, normalize_country, validate_donor_details


# =============================================================================
# Input serializers
# =============================================================================

class OrderItemInputSerializer(serializers.Serializer):
    """One basket line: an appeal, a water project or a sponsorship."""

    appeal = serializers.PrimaryKeyRelatedField(
        queryset=Appeal.objects.all(), required=False, allow_null=True
    )
    fundraiser = serializers.PrimaryKeyRelatedField(
        queryset=Fundraiser.objects.filter(is_active=True), required=False, allow_null=True
    )
    water_project = serializers.PrimaryKeyRelatedField(
        queryset=WaterProject.objects.filter(is_active=True), required=False, allow_null=True
    )
    water_project_country = serializers.PrimaryKeyRelatedField(
        queryset=WaterProjectCountry.objects.filter(is_active=True), required=False, allow_null=True
    )
    sponsorship_project = serializers.PrimaryKeyRelatedField(
        queryset=SponsorshipProject.objects.filter(is_active=True), required=False, allow_null=True
    )
    sponsorship_country = serializers.PrimaryKeyRelatedField(
        queryset=SponsorshipProjectCountry.objects.filter(is_active=True), required=False, allow_null=True
    )
    appeal_title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    product_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    frequency = serializers.ChoiceField(choices=Frequency.choices, default=Frequency.ONE_OFF)
    donation_type = serializers.ChoiceField(choices=DonationType.choices, default=DonationType.GENERAL)
    amount_pence = serializers.IntegerField(min_value=1)
    plaque_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        targets = [
            attrs.get(key) for key in ('appeal', 'water_project', 'sponsorship_project')
            if attrs.get(key) is not None
        ]
        if len(targets) != 1:
            raise serializers.ValidationError(
                'Choose exactly one of appeal, water_project or sponsorship_project.'
            )

        if not attrs.get('appeal_title'):
            target = targets[0]
            attrs['appeal_title'] = target.title if isinstance(target, Appeal) else str(target)
        return attrs


class BasketAddSerializer(OrderItemInputSerializer):
    pass


class FeeQuerySerializer(serializers.Serializer):
    one_off_subtotal_pence = serializers.IntegerField(min_value=0, default=0)
    recurring_subtotal_pence = serializers.IntegerField(min_value=0, default=0)
    cover_fees = serializers.BooleanField(default=False)


class BasketQuerySerializer(serializers.Serializer):
    cover_fees = serializers.BooleanField(required=False, allow_null=True, default=None)


class BasketUpdateSerializer(serializers.Serializer):
    cover_fees = serializers.BooleanField()


class DonorDetailsSerializer(serializers.Serializer):
    """Donor details plus checkout choices (Gift Aid, fees, marketing)."""

    title = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    first_name = serializers.CharField(max_length=100, allow_blank=True)
    last_name = serializers.CharField(max_length=100, allow_blank=True)
    email = serializers.CharField(max_length=255, allow_blank=True)
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default='')
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    postcode = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    country = serializers.CharField(max_length=2, required=False, default='GB')
    gift_aid = serializers.BooleanField(default=False)
    cover_fees = serializers.BooleanField(default=False)
    marketing_email = serializers.BooleanField(default=False)
    marketing_sms = serializers.BooleanField(default=False)

    def validate(self, attrs):
        attrs['country'] = normalize_country(attrs.get('country')) or 'GB'
        errors = validate_donor_details(attrs)
        if errors:
            raise serializers.ValidationError(errors_to_dict(errors))

        for key in ('first_name', 'last_name', 'email', 'address', 'city'):
            attrs[key] = attrs.get(key, '').strip()
        attrs['postcode'] = attrs.get('postcode', '').strip().upper()
        attrs['email'] = attrs['email'].lower()
        return attrs


class CheckoutInputSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    donor = DonorDetailsSerializer()
    subtotal_pence = serializers.IntegerField(min_value=0)
    fees_pence = serializers.IntegerField(min_value=0)
    total_pence = serializers.IntegerField(min_value=0)


class ExpressCheckoutInputSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    email = serializers.EmailField()
    cover_fees = serializers.BooleanField(default=False)
    total_pence = serializers.IntegerField(min_value=0, required=False)
    wallet = serializers.DictField(required=False, default=dict)


class ConfirmPaymentInputSerializer(serializers.Serializer):
    order_number = serializers.CharField(min_length=5, max_length=20)
    payment_intent_id = serializers.CharField(required=False, allow_blank=True)
    subscription_id = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get('payment_intent_id') and not attrs.get('subscription_id'):
            raise serializers.ValidationError('Missing payment reference')
        return attrs


# =============================================================================
# Output serializers
# =============================================================================

class FeeSplitSerializer(serializers.Serializer):
    one_off_subtotal_pence = serializers.IntegerField()
    recurring_subtotal_pence = serializers.IntegerField()
    subtotal_pence = serializers.IntegerField()
    fees_pence = serializers.IntegerField()
    one_off_fees_pence = serializers.IntegerField()
    recurring_fees_pence = serializers.IntegerField()
    one_off_total_pence = serializers.IntegerField()
    recurring_total_pence = serializers.IntegerField()
    total_pence = serializers.IntegerField()


class BasketItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    appeal_title = serializers.CharField()
    product_name = serializers.CharField()
    amount_pence = serializers.IntegerField()
    frequency = serializers.CharField()
    donation_type = serializers.CharField()
    appeal_id = serializers.CharField(allow_null=True)
    fundraiser_id = serializers.CharField(allow_null=True)
    water_project_id = serializers.CharField(allow_null=True)
    water_project_country_id = serializers.CharField(allow_null=True)
    sponsorship_project_id = serializers.CharField(allow_null=True)
    sponsorship_country_id = serializers.CharField(allow_null=True)
    plaque_name = serializers.CharField()


class BasketSerializer(serializers.Serializer):
    items = BasketItemSerializer(many=True)
    cover_fees = serializers.BooleanField()
    summary = FeeSplitSerializer()


class OrderItemSerializer(serializers.ModelSerializer):
    display_title = serializers.CharField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id',
            'appeal_title',
            'product_name',
            'display_title',
            'frequency',
            'donation_type',
            'amount_pence',
            'plaque_name',
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order status for the success page."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'order_number',
            'status',
            'subtotal_pence',
            'fees_pence',
            'total_pence',
            'cover_fees',
            'gift_aid',
            'donor_first_name',
            'items',
            'created_at',
            'completed_at',
        ]
        read_only_fields = fields


class PaymentIntentSecretSerializer(serializers.Serializer):
    id = serializers.CharField()
    client_secret = serializers.CharField()


class SubscriptionSecretSerializer(serializers.Serializer):
    order_item_id = serializers.CharField()
    subscription_id = serializers.CharField()
    client_secret = serializers.CharField(allow_null=True)


class CheckoutResponseSerializer(serializers.Serializer):
    order_number = serializers.CharField()
    totals = FeeSplitSerializer()
    payment_intent = PaymentIntentSecretSerializer(allow_null=True)
    subscriptions = SubscriptionSecretSerializer(many=True)
    publishable_key = serializers.CharField()
