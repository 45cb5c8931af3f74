# ==========================================
# apps/donations/models.py
# ==========================================

from django.db import models
from django.utils.text import slugify
import uuid


class DonationType(models.TextChoices):
    GENERAL = 'GENERAL', 'General'
    SADAQAH = 'SADAQAH', 'Sadaqah'
    ZAKAT = 'ZAKAT', 'Zakat'
    LILLAH = 'LILLAH', 'Lillah'


class Frequency(models.TextChoices):
    ONE_OFF = 'ONE_OFF', 'One-off'
    MONTHLY = 'MONTHLY', 'Monthly'
    YEARLY = 'YEARLY', 'Yearly'


class RecurringFrequency(models.TextChoices):
    MONTHLY = 'MONTHLY', 'Monthly'
    YEARLY = 'YEARLY', 'Yearly'


class PaymentMethod(models.TextChoices):
    WEBSITE_STRIPE = 'WEBSITE_STRIPE', 'Website (Stripe)'
    CARD_SUMUP = 'CARD_SUMUP', 'Card (SumUp)'
    CASH = 'CASH', 'Cash'
    BANK_TRANSFER = 'BANK_TRANSFER', 'Bank Transfer'
    OFFICE_BUCKETS = 'OFFICE_BUCKETS', 'Office Buckets'


class CollectionSource(models.TextChoices):
    WEBSITE = 'website', 'Website'
    OFFICE = 'office', 'Office'
    EVENTS = 'events', 'Events'
    COLLECTIONS = 'collections', 'Collections'
    MASJID_COLLECTIONS = 'masjid_collections', 'Masjid Collections'
    FUNDRAISING = 'fundraising', 'Fundraising'


class DonationStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    FAILED = 'FAILED', 'Failed'
    REFUNDED = 'REFUNDED', 'Refunded'


class RecurringStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    ACTIVE = 'ACTIVE', 'Active'
    PAUSED = 'PAUSED', 'Paused'
    CANCELLED = 'CANCELLED', 'Cancelled'
    FAILED = 'FAILED', 'Failed'


class Donor(models.Model):
    """A person who has given at least once (online or offline)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=20, blank=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(unique=True, max_length=255)
    phone = models.CharField(max_length=40, blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    postcode = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=2, default='GB')
    stripe_customer_id = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'donors'
        indexes = [
            models.Index(fields=['email']),
            models.Index(fields=['created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_full_name()} <{self.email}>"

    def get_full_name(self):
        return ' '.join(part for part in [self.first_name, self.last_name] if part).strip()


class Appeal(models.Model):
    """A fundraising cause donors can give to (e.g. Emergency Relief)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    summary = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    allow_monthly = models.BooleanField(default=True)
    allow_yearly = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appeals'
        ordering = ['sort_order', 'title']

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.title)[:220]
        super().save(*args, **kwargs)

    def allows_frequency(self, frequency):
        if frequency == Frequency.MONTHLY:
            return self.allow_monthly
        if frequency == Frequency.YEARLY:
            return self.allow_yearly
        return True


class Fundraiser(models.Model):
    """A public fundraising page raising money for an appeal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    appeal = models.ForeignKey(Appeal, on_delete=models.PROTECT, related_name='fundraisers')
    fundraiser_name = models.CharField(max_length=200)
    email = models.EmailField(max_length=255, blank=True)
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    target_amount_pence = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'fundraisers'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.fundraiser_name})"

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = f"{slugify(self.title)[:200]}-{uuid.uuid4().hex[:6]}"
        super().save(*args, **kwargs)


class Donation(models.Model):
    """A single (one-off or recurring instalment) gift to an appeal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor = models.ForeignKey(Donor, on_delete=models.PROTECT, related_name='donations')
    appeal = models.ForeignKey(
        Appeal,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='donations'
    )
    fundraiser = models.ForeignKey(
        Fundraiser,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='donations'
    )
    product_name = models.CharField(max_length=200, blank=True)

    amount_pence = models.PositiveIntegerField()
    donation_type = models.CharField(max_length=10, choices=DonationType.choices, default=DonationType.GENERAL)
    frequency = models.CharField(max_length=10, choices=Frequency.choices, default=Frequency.ONE_OFF)
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.WEBSITE_STRIPE
    )
    collected_via = models.CharField(
        max_length=20,
        choices=CollectionSource.choices,
        default=CollectionSource.WEBSITE,
        blank=True
    )
    status = models.CharField(max_length=10, choices=DonationStatus.choices, default=DonationStatus.PENDING)

    gift_aid = models.BooleanField(default=False)
    gift_aid_claimed = models.BooleanField(default=False)

    transaction_id = models.CharField(max_length=255, blank=True)
    order_number = models.CharField(max_length=20, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'donations'
        indexes = [
            models.Index(fields=['status', 'created_at']),
            models.Index(fields=['order_number']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_number or self.id}: {self.amount_pence}p ({self.status})"


class RecurringDonation(models.Model):
    """A monthly or yearly Stripe subscription."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor = models.ForeignKey(Donor, on_delete=models.PROTECT, related_name='recurring_donations')
    appeal = models.ForeignKey(
        Appeal,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recurring_donations'
    )
    product_name = models.CharField(max_length=200, blank=True)

    amount_pence = models.PositiveIntegerField()
    donation_type = models.CharField(max_length=10, choices=DonationType.choices, default=DonationType.GENERAL)
    frequency = models.CharField(max_length=10, choices=RecurringFrequency.choices)
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.WEBSITE_STRIPE
    )
    status = models.CharField(max_length=10, choices=RecurringStatus.choices, default=RecurringStatus.PENDING)
    gift_aid = models.BooleanField(default=False)

    subscription_id = models.CharField(max_length=255, blank=True, db_index=True)
    order_number = models.CharField(max_length=20, blank=True, db_index=True)
    next_payment_date = models.DateTimeField(null=True, blank=True)
    last_payment_date = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'recurring_donations'
        indexes = [
            models.Index(fields=['status', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_frequency_display()} {self.amount_pence}p ({self.status})"
