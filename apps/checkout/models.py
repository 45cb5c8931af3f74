# ==========================================
# apps/checkout/models.py
# ==========================================

from django.db import models
import uuid

from apps.donations.models import DonationType, Frequency


class OrderStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    FAILED = 'FAILED', 'Failed'


class Order(models.Model):
    """
    A checkout of one basket.

    Donor details are snapshotted at checkout time so the order stays
    readable even if the donor record is later edited.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, unique=True, db_index=True)
    status = models.CharField(max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING)

    # Totals (server-computed)
    subtotal_pence = models.PositiveIntegerField(default=0)
    fees_pence = models.PositiveIntegerField(default=0)
    total_pence = models.PositiveIntegerField(default=0)
    one_off_total_pence = models.PositiveIntegerField(default=0)
    recurring_total_pence = models.PositiveIntegerField(default=0)

    cover_fees = models.BooleanField(default=False)
    gift_aid = models.BooleanField(default=False)
    marketing_email = models.BooleanField(default=False)
    marketing_sms = models.BooleanField(default=False)
    is_express = models.BooleanField(default=False)

    donor = models.ForeignKey(
        'donations.Donor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    donor_title = models.CharField(max_length=20, blank=True)
    donor_first_name = models.CharField(max_length=100)
    donor_last_name = models.CharField(max_length=100)
    donor_email = models.EmailField(max_length=255)
    donor_phone = models.CharField(max_length=40, blank=True)
    donor_address = models.CharField(max_length=255, blank=True)
    donor_city = models.CharField(max_length=100, blank=True)
    donor_postcode = models.CharField(max_length=20, blank=True)
    donor_country = models.CharField(max_length=2, blank=True)

    # Stripe references
    stripe_customer_id = models.CharField(max_length=255, blank=True)
    payment_intent_id = models.CharField(max_length=255, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['status', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_number} ({self.status})"

    @property
    def donor_name(self):
        return f"{self.donor_first_name} {self.donor_last_name}".strip()


class OrderItem(models.Model):
    """One basket line within an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')

    appeal = models.ForeignKey(
        'donations.Appeal',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    fundraiser = models.ForeignKey(
        'donations.Fundraiser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    water_project = models.ForeignKey(
        'projects.WaterProject',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    water_project_country = models.ForeignKey(
        'projects.WaterProjectCountry',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    sponsorship_project = models.ForeignKey(
        'projects.SponsorshipProject',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    sponsorship_country = models.ForeignKey(
        'projects.SponsorshipProjectCountry',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )

    # Records created from this line
    donation = models.ForeignKey(
        'donations.Donation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    recurring_donation = models.ForeignKey(
        'donations.RecurringDonation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )

    appeal_title = models.CharField(max_length=200)
    product_name = models.CharField(max_length=200, blank=True)
    frequency = models.CharField(max_length=10, choices=Frequency.choices, default=Frequency.ONE_OFF)
    donation_type = models.CharField(max_length=10, choices=DonationType.choices, default=DonationType.GENERAL)
    amount_pence = models.PositiveIntegerField()
    plaque_name = models.CharField(max_length=200, blank=True)

    subscription_id = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'order_items'
        ordering = ['order', 'id']

    def __str__(self):
        return f"{self.display_title}: {self.amount_pence}p {self.frequency}"

    @property
    def display_title(self):
        if self.product_name:
            return f"{self.appeal_title} • {self.product_name}"
        return self.appeal_title

    @property
    def is_recurring(self):
        return self.frequency in (Frequency.MONTHLY, Frequency.YEARLY)

    @property
    def kind(self):
        if self.water_project_id:
            return 'water'
        if self.sponsorship_project_id:
            return 'sponsorship'
        return 'appeal'
