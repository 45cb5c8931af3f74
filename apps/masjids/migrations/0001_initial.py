# Generated manually for masjids app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


DONATION_TYPE_CHOICES = [('GENERAL', 'General'), ('SADAQAH', 'Sadaqah'), ('ZAKAT', 'Zakat'), ('LILLAH', 'Lillah')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('donations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Masjid',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive'), ('PROSPECT', 'Prospect'), ('ON_HOLD', 'On hold')], default='ACTIVE', max_length=10)),
                ('address', models.CharField(max_length=255)),
                ('city', models.CharField(max_length=100)),
                ('postcode', models.CharField(blank=True, max_length=20)),
                ('country', models.CharField(blank=True, max_length=100)),
                ('region', models.CharField(blank=True, max_length=100)),
                ('contact_name', models.CharField(blank=True, max_length=200)),
                ('contact_role', models.CharField(blank=True, max_length=100)),
                ('secondary_contact_name', models.CharField(blank=True, max_length=200)),
                ('secondary_contact_role', models.CharField(blank=True, max_length=100)),
                ('phone', models.CharField(blank=True, max_length=40)),
                ('phone_alt', models.CharField(blank=True, max_length=40)),
                ('email', models.EmailField(blank=True, max_length=255)),
                ('email_alt', models.EmailField(blank=True, max_length=255)),
                ('website', models.CharField(blank=True, max_length=255)),
                ('preferred_contact_method', models.CharField(blank=True, choices=[('EMAIL', 'Email'), ('PHONE', 'Phone'), ('WHATSAPP', 'WhatsApp'), ('SMS', 'SMS'), ('ANY', 'Any')], max_length=10)),
                ('last_contacted_at', models.DateTimeField(blank=True, null=True)),
                ('next_follow_up_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='masjids_added', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'masjids',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Collection',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount_pence', models.PositiveIntegerField()),
                ('donation_type', models.CharField(choices=DONATION_TYPE_CHOICES, default='GENERAL', max_length=10)),
                ('type', models.CharField(choices=[('JUMMAH', 'Jummah'), ('RAMADAN', 'Ramadan'), ('EID', 'Eid'), ('SPECIAL', 'Special'), ('OTHER', 'Other')], default='JUMMAH', max_length=10)),
                ('collected_at', models.DateTimeField()),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='collections_added', to=settings.AUTH_USER_MODEL)),
                ('appeal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='collections', to='donations.appeal')),
                ('masjid', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='collections', to='masjids.masjid')),
            ],
            options={
                'db_table': 'collections',
                'ordering': ['-collected_at'],
            },
        ),
        migrations.CreateModel(
            name='OfflineIncome',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount_pence', models.PositiveIntegerField()),
                ('donation_type', models.CharField(choices=DONATION_TYPE_CHOICES, default='GENERAL', max_length=10)),
                ('source', models.CharField(choices=[('CASH', 'Cash'), ('OFFICE_BUCKETS', 'Office Buckets'), ('CARD_SUMUP', 'Card (SumUp)'), ('BANK_TRANSFER', 'Bank Transfer')], default='CASH', max_length=20)),
                ('collected_via', models.CharField(choices=[('website', 'Website'), ('office', 'Office'), ('events', 'Events'), ('collections', 'Collections'), ('masjid_collections', 'Masjid Collections'), ('fundraising', 'Fundraising')], default='office', max_length=20)),
                ('received_at', models.DateTimeField()),
                ('donation_number', models.CharField(blank=True, db_index=True, max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='offline_income_added', to=settings.AUTH_USER_MODEL)),
                ('appeal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='offline_income', to='donations.appeal')),
            ],
            options={
                'db_table': 'offline_income',
                'ordering': ['-received_at'],
            },
        ),
        migrations.AddIndex(
            model_name='masjid',
            index=models.Index(fields=['status'], name='masjids_status_4d8e27_idx'),
        ),
        migrations.AddIndex(
            model_name='masjid',
            index=models.Index(fields=['city'], name='masjids_city_a31c5f_idx'),
        ),
        migrations.AddIndex(
            model_name='collection',
            index=models.Index(fields=['collected_at'], name='collections_collect_6e2b90_idx'),
        ),
        migrations.AddIndex(
            model_name='offlineincome',
            index=models.Index(fields=['received_at'], name='offline_inc_receive_b7f013_idx'),
        ),
    ]
