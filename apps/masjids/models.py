# ==========================================
# apps/masjids/models.py
# ==========================================

from django.db import models
import uuid

from apps.donations.models import CollectionSource, DonationType


class MasjidStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    INACTIVE = 'INACTIVE', 'Inactive'
    PROSPECT = 'PROSPECT', 'Prospect'
    ON_HOLD = 'ON_HOLD', 'On hold'


class ContactMethod(models.TextChoices):
    EMAIL = 'EMAIL', 'Email'
    PHONE = 'PHONE', 'Phone'
    WHATSAPP = 'WHATSAPP', 'WhatsApp'
    SMS = 'SMS', 'SMS'
    ANY = 'ANY', 'Any'


class CollectionType(models.TextChoices):
    JUMMAH = 'JUMMAH', 'Jummah'
    RAMADAN = 'RAMADAN', 'Ramadan'
    EID = 'EID', 'Eid'
    SPECIAL = 'SPECIAL', 'Special'
    OTHER = 'OTHER', 'Other'


class OfflineSource(models.TextChoices):
    """Payment methods accepted for offline income (a subset of PaymentMethod)."""
    CASH = 'CASH', 'Cash'
    OFFICE_BUCKETS = 'OFFICE_BUCKETS', 'Office Buckets'
    CARD_SUMUP = 'CARD_SUMUP', 'Card (SumUp)'
    BANK_TRANSFER = 'BANK_TRANSFER', 'Bank Transfer'


class Masjid(models.Model):
    """A masjid the charity collects at, with its CRM contact details."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    status = models.CharField(max_length=10, choices=MasjidStatus.choices, default=MasjidStatus.ACTIVE)

    # Location
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    postcode = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, blank=True)
    region = models.CharField(max_length=100, blank=True)

    # Contacts
    contact_name = models.CharField(max_length=200, blank=True)
    contact_role = models.CharField(max_length=100, blank=True)
    secondary_contact_name = models.CharField(max_length=200, blank=True)
    secondary_contact_role = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=40, blank=True)
    phone_alt = models.CharField(max_length=40, blank=True)
    email = models.EmailField(max_length=255, blank=True)
    email_alt = models.EmailField(max_length=255, blank=True)
    website = models.CharField(max_length=255, blank=True)
    preferred_contact_method = models.CharField(max_length=10, choices=ContactMethod.choices, blank=True)

    # Follow-up
    last_contacted_at = models.DateTimeField(null=True, blank=True)
    next_follow_up_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    added_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='masjids_added'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'masjids'
        indexes = [
            models.Index(fields=['status']),
            models.Index(fields=['city']),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.city})"


class Collection(models.Model):
    """Money collected at a masjid (Jummah, Ramadan, Eid...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    masjid = models.ForeignKey(
        Masjid,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='collections'
    )
    appeal = models.ForeignKey(
        'donations.Appeal',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='collections'
    )
    amount_pence = models.PositiveIntegerField()
    donation_type = models.CharField(max_length=10, choices=DonationType.choices, default=DonationType.GENERAL)
    type = models.CharField(max_length=10, choices=CollectionType.choices, default=CollectionType.JUMMAH)
    collected_at = models.DateTimeField()
    notes = models.TextField(blank=True)
    added_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='collections_added'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'collections'
        indexes = [
            models.Index(fields=['collected_at']),
        ]
        ordering = ['-collected_at']

    def __str__(self):
        return f"{self.get_type_display()} {self.amount_pence}p"


class OfflineIncome(models.Model):
    """Cash, card or bank income for an appeal recorded at the office."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    appeal = models.ForeignKey(
        'donations.Appeal',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='offline_income'
    )
    amount_pence = models.PositiveIntegerField()
    donation_type = models.CharField(max_length=10, choices=DonationType.choices, default=DonationType.GENERAL)
    source = models.CharField(max_length=20, choices=OfflineSource.choices, default=OfflineSource.CASH)
    collected_via = models.CharField(
        max_length=20,
        choices=CollectionSource.choices,
        default=CollectionSource.OFFICE
    )
    received_at = models.DateTimeField()
    donation_number = models.CharField(max_length=20, blank=True, db_index=True)
    notes = models.TextField(blank=True)
    added_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='offline_income_added'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'offline_income'
        indexes = [
            models.Index(fields=['received_at']),
        ]
        ordering = ['-received_at']

    def __str__(self):
        return f"{self.donation_number or self.id}: {self.amount_pence}p ({self.source})"
