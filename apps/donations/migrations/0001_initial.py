# Generated manually for donations app

import uuid
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


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Donor',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(blank=True, max_length=20)),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=255, unique=True)),
                ('phone', models.CharField(blank=True, max_length=40)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('postcode', models.CharField(blank=True, max_length=20)),
                ('country', models.CharField(default='GB', max_length=2)),
                ('stripe_customer_id', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'donors',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Appeal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('slug', models.SlugField(max_length=220, unique=True)),
                ('summary', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('allow_monthly', models.BooleanField(default=True)),
                ('allow_yearly', models.BooleanField(default=False)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'appeals',
                'ordering': ['sort_order', 'title'],
            },
        ),
        migrations.CreateModel(
            name='Fundraiser',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('fundraiser_name', models.CharField(max_length=200)),
                ('email', models.EmailField(blank=True, max_length=255)),
                ('title', models.CharField(max_length=200)),
                ('slug', models.SlugField(max_length=220, unique=True)),
                ('target_amount_pence', models.PositiveIntegerField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('appeal', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='fundraisers', to='donations.appeal')),
            ],
            options={
                'db_table': 'fundraisers',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Donation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(blank=True, max_length=200)),
                ('amount_pence', models.PositiveIntegerField()),
                ('donation_type', models.CharField(choices=DONATION_TYPE_CHOICES, default='GENERAL', max_length=10)),
                ('frequency', models.CharField(choices=[('ONE_OFF', 'One-off'), ('MONTHLY', 'Monthly'), ('YEARLY', 'Yearly')], default='ONE_OFF', max_length=10)),
                ('payment_method', models.CharField(choices=PAYMENT_METHOD_CHOICES, default='WEBSITE_STRIPE', max_length=20)),
                ('collected_via', models.CharField(blank=True, choices=[('website', 'Website'), ('office', 'Office'), ('events', 'Events'), ('collections', 'Collections'), ('masjid_collections', 'Masjid Collections'), ('fundraising', 'Fundraising')], default='website', max_length=20)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('COMPLETED', 'Completed'), ('FAILED', 'Failed'), ('REFUNDED', 'Refunded')], default='PENDING', max_length=10)),
                ('gift_aid', models.BooleanField(default=False)),
                ('gift_aid_claimed', models.BooleanField(default=False)),
                ('transaction_id', models.CharField(blank=True, max_length=255)),
                ('order_number', models.CharField(blank=True, db_index=True, max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('appeal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='donations', to='donations.appeal')),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='donations.donor')),
                ('fundraiser', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='donations', to='donations.fundraiser')),
            ],
            options={
                'db_table': 'donations',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='RecurringDonation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(blank=True, max_length=200)),
                ('amount_pence', models.PositiveIntegerField()),
                ('donation_type', models.CharField(choices=DONATION_TYPE_CHOICES, default='GENERAL', max_length=10)),
                ('frequency', models.CharField(choices=[('MONTHLY', 'Monthly'), ('YEARLY', 'Yearly')], max_length=10)),
                ('payment_method', models.CharField(choices=PAYMENT_METHOD_CHOICES, default='WEBSITE_STRIPE', max_length=20)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('ACTIVE', 'Active'), ('PAUSED', 'Paused'), ('CANCELLED', 'Cancelled'), ('FAILED', 'Failed')], default='PENDING', max_length=10)),
                ('gift_aid', models.BooleanField(default=False)),
                ('subscription_id', models.CharField(blank=True, db_index=True, max_length=255)),
                ('order_number', models.CharField(blank=True, db_index=True, max_length=20)),
                ('next_payment_date', models.DateTimeField(blank=True, null=True)),
                ('last_payment_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('appeal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recurring_donations', to='donations.appeal')),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='recurring_donations', to='donations.donor')),
            ],
            options={
                'db_table': 'recurring_donations',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='donor',
            index=models.Index(fields=['email'], name='donors_email_3c1f2a_idx'),
        ),
        migrations.AddIndex(
            model_name='donor',
            index=models.Index(fields=['created_at'], name='donors_created_8e4b71_idx'),
        ),
        migrations.AddIndex(
            model_name='donation',
            index=models.Index(fields=['status', 'created_at'], name='donations_status_5d2e90_idx'),
        ),
        migrations.AddIndex(
            model_name='donation',
            index=models.Index(fields=['order_number'], name='donations_order_n_a7c3b4_idx'),
        ),
        migrations.AddIndex(
            model_name='recurringdonation',
            index=models.Index(fields=['status', 'created_at'], name='recurring_d_status_6f8a12_idx'),
        ),
    ]
