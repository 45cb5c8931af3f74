# Generated manually for projects app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


DONATION_TYPE_CHOICES = [('GENERAL', 'General'), ('SADAQAH', 'Sadaqah'), ('ZAKAT', 'Zakat'), ('LILLAH', 'Lillah')]
PAYMENT_METHOD_CHOICES = [
    ('WEBSITE_STRIPE', 'Website (Stripe)'),
    ('CARD_SUMUP', 'Card (SumUp)'),
    ('CASH', 'Cash'),
    ('BANK_TRANSFER', 'Bank Transfer'),
    ('OFFICE_BUCKETS', 'Office Buckets'),
]
COLLECTION_SOURCE_CHOICES = [
    ('website', 'Website'),
    ('office', 'Office'),
    ('events', 'Events'),
    ('collections', 'Collections'),
    ('masjid_collections', 'Masjid Collections'),
    ('fundraising', 'Fundraising'),
]
STATUS_CHOICES = [
    ('WAITING_TO_REVIEW', 'Waiting to review'),
    ('ORDERED', 'Ordered'),
    ('PENDING', 'Pending'),
    ('COMPLETE', 'Complete'),
    ('FAILED', 'Failed'),
    ('REFUNDED', 'Refunded'),
]
WATER_TYPE_CHOICES = [
    ('WATER_PUMP', 'Water Pump'),
    ('WATER_WELL', 'Water Well'),
    ('WATER_TANK', 'Water Tank'),
    ('WUDHU_AREA', 'Wudhu Area'),
]
SPONSORSHIP_TYPE_CHOICES = [('ORPHANS', 'Orphans'), ('HIFZ', 'Hifz'), ('FAMILIES', 'Families')]


def project_donation_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('amount_pence', models.PositiveIntegerField()),
        ('donation_type', models.CharField(choices=DONATION_TYPE_CHOICES, default='GENERAL', max_length=10)),
        ('payment_method', models.CharField(choices=PAYMENT_METHOD_CHOICES, default='WEBSITE_STRIPE', max_length=20)),
        ('collected_via', models.CharField(blank=True, choices=COLLECTION_SOURCE_CHOICES, default='website', max_length=20)),
        ('status', models.CharField(choices=STATUS_CHOICES, default='PENDING', max_length=20)),
        ('gift_aid', models.BooleanField(default=False)),
        ('gift_aid_claimed', models.BooleanField(default=False)),
        ('transaction_id', models.CharField(blank=True, max_length=255)),
        ('donation_number', models.CharField(blank=True, db_index=True, max_length=20)),
        ('plaque_name', models.CharField(blank=True, max_length=200)),
        ('notes', models.TextField(blank=True)),
        ('email_sent', models.BooleanField(default=False)),
        ('report_sent', models.BooleanField(default=False)),
        ('completion_images', models.JSONField(blank=True, default=list)),
        ('completion_report', models.TextField(blank=True)),
        ('completion_report_pdf', models.URLField(blank=True, max_length=500)),
        ('google_drive_link', models.URLField(blank=True, max_length=500)),
        ('completed_at', models.DateTimeField(blank=True, null=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('donations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='WaterProject',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('description', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('project_type', models.CharField(choices=WATER_TYPE_CHOICES, max_length=20, unique=True)),
                ('plaque_available', models.BooleanField(default=False)),
            ],
            options={
                'db_table': 'water_projects',
                'ordering': ['project_type'],
            },
        ),
        migrations.CreateModel(
            name='WaterProjectCountry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('country', models.CharField(max_length=100)),
                ('price_pence', models.PositiveIntegerField()),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('project_type', models.CharField(choices=WATER_TYPE_CHOICES, max_length=20)),
            ],
            options={
                'db_table': 'water_project_countries',
                'ordering': ['project_type', 'sort_order', 'country'],
                'unique_together': {('project_type', 'country')},
            },
        ),
        migrations.CreateModel(
            name='WaterProjectDonation',
            fields=project_donation_fields() + [
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='waterprojectdonations_added', to=settings.AUTH_USER_MODEL)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='waterprojectdonations', to='donations.donor')),
                ('fundraiser', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='waterprojectdonations', to='donations.fundraiser')),
                ('water_project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='projects.waterproject')),
                ('country', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='projects.waterprojectcountry')),
            ],
            options={
                'db_table': 'water_project_donations',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SponsorshipProject',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('description', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('project_type', models.CharField(choices=SPONSORSHIP_TYPE_CHOICES, max_length=20, unique=True)),
            ],
            options={
                'db_table': 'sponsorship_projects',
                'ordering': ['project_type'],
            },
        ),
        migrations.CreateModel(
            name='SponsorshipProjectCountry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('country', models.CharField(max_length=100)),
                ('price_pence', models.PositiveIntegerField()),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('project_type', models.CharField(choices=SPONSORSHIP_TYPE_CHOICES, max_length=20)),
            ],
            options={
                'db_table': 'sponsorship_project_countries',
                'ordering': ['project_type', 'sort_order', 'country'],
                'unique_together': {('project_type', 'country')},
            },
        ),
        migrations.CreateModel(
            name='SponsorshipDonation',
            fields=project_donation_fields() + [
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sponsorshipdonations_added', to=settings.AUTH_USER_MODEL)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sponsorshipdonations', to='donations.donor')),
                ('fundraiser', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sponsorshipdonations', to='donations.fundraiser')),
                ('sponsorship_project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='projects.sponsorshipproject')),
                ('country', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='projects.sponsorshipprojectcountry')),
            ],
            options={
                'db_table': 'sponsorship_donations',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.AddIndex(
            model_name='waterprojectdonation',
            index=models.Index(fields=['status', 'created_at'], name='water_proje_status_2b7d41_idx'),
        ),
        migrations.AddIndex(
            model_name='sponsorshipdonation',
            index=models.Index(fields=['status', 'created_at'], name='sponsorship_status_9c3e58_idx'),
        ),
    ]
