# ==========================================
# apps/projects/models.py
# ==========================================

from django.db import models
import uuid

from apps.donations.models import CollectionSource, DonationType, PaymentMethod


class WaterProjectType(models.TextChoices):
    WATER_PUMP = 'WATER_PUMP', 'Water Pump'
    WATER_WELL = 'WATER_WELL', 'Water Well'
    WATER_TANK = 'WATER_TANK', 'Water Tank'
    WUDHU_AREA = 'WUDHU_AREA', 'Wudhu Area'


class SponsorshipProjectType(models.TextChoices):
    ORPHANS = 'ORPHANS', 'Orphans'
    HIFZ = 'HIFZ', 'Hifz'
    FAMILIES = 'FAMILIES', 'Families'


class ProjectDonationStatus(models.TextChoices):
    WAITING_TO_REVIEW = 'WAITING_TO_REVIEW', 'Waiting to review'
    ORDERED = 'ORDERED', 'Ordered'
    PENDING = 'PENDING', 'Pending'
    COMPLETE = 'COMPLETE', 'Complete'
    FAILED = 'FAILED', 'Failed'
    REFUNDED = 'REFUNDED', 'Refunded'


class BaseProject(models.Model):
    """Fields shared by water and sponsorship projects (one project per type)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    location = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return self.get_project_type_display()


class BaseProjectCountry(models.Model):
    """A country a project can be funded in, with its fixed price."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    country = models.CharField(max_length=100)
    price_pence = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.country} ({self.get_project_type_display()})"


class BaseProjectDonation(models.Model):
    """
    A donation funding one project in one country.

    Moves WAITING_TO_REVIEW -> ORDERED -> COMPLETE as the charity
    fulfils it; completion records exactly four photos plus a report.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor = models.ForeignKey(
        'donations.Donor',
        on_delete=models.PROTECT,
        related_name='%(class)ss'
    )
    fundraiser = models.ForeignKey(
        'donations.Fundraiser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)ss'
    )
    added_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)ss_added'
    )

    amount_pence = models.PositiveIntegerField()
    donation_type = models.CharField(max_length=10, choices=DonationType.choices, default=DonationType.GENERAL)
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
    status = models.CharField(
        max_length=20,
        choices=ProjectDonationStatus.choices,
        default=ProjectDonationStatus.PENDING
    )
    gift_aid = models.BooleanField(default=False)
    gift_aid_claimed = models.BooleanField(default=False)
    transaction_id = models.CharField(max_length=255, blank=True)
    donation_number = models.CharField(max_length=20, blank=True, db_index=True)
    plaque_name = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)

    email_sent = models.BooleanField(default=False)
    report_sent = models.BooleanField(default=False)

    # Completion report
    completion_images = models.JSONField(default=list, blank=True)
    completion_report = models.TextField(blank=True)
    completion_report_pdf = models.URLField(max_length=500, blank=True)
    google_drive_link = models.URLField(max_length=500, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.donation_number or self.id}: {self.amount_pence}p ({self.status})"


class WaterProject(BaseProject):
    project_type = models.CharField(max_length=20, choices=WaterProjectType.choices, unique=True)
    plaque_available = models.BooleanField(default=False)

    class Meta:
        db_table = 'water_projects'
        ordering = ['project_type']


class WaterProjectCountry(BaseProjectCountry):
    project_type = models.CharField(max_length=20, choices=WaterProjectType.choices)

    class Meta:
        db_table = 'water_project_countries'
        unique_together = [['project_type', 'country']]
        ordering = ['project_type', 'sort_order', 'country']


class WaterProjectDonation(BaseProjectDonation):
    project_field = 'water_project'

    water_project = models.ForeignKey(WaterProject, on_delete=models.PROTECT, related_name='donations')
    country = models.ForeignKey(WaterProjectCountry, on_delete=models.PROTECT, related_name='donations')

    class Meta(BaseProjectDonation.Meta):
        db_table = 'water_project_donations'
        indexes = [
            models.Index(fields=['status', 'created_at']),
        ]

    @property
    def project(self):
        return self.water_project


class SponsorshipProject(BaseProject):
    project_type = models.CharField(max_length=20, choices=SponsorshipProjectType.choices, unique=True)

    class Meta:
        db_table = 'sponsorship_projects'
        ordering = ['project_type']


class SponsorshipProjectCountry(BaseProjectCountry):
    project_type = models.CharField(max_length=20, choices=SponsorshipProjectType.choices)

    class Meta:
        db_table = 'sponsorship_project_countries'
        unique_together = [['project_type', 'country']]
        ordering = ['project_type', 'sort_order', 'country']


class SponsorshipDonation(BaseProjectDonation):
    project_field = 'sponsorship_project'

    sponsorship_project = models.ForeignKey(SponsorshipProject, on_delete=models.PROTECT, related_name='donations')
    country = models.ForeignKey(SponsorshipProjectCountry, on_delete=models.PROTECT, related_name='donations')

    class Meta(BaseProjectDonation.Meta):
        db_table = 'sponsorship_donations'
        indexes = [
            models.Index(fields=['status', 'created_at']),
        ]

    @property
    def project(self):
        return self.sponsorship_project
