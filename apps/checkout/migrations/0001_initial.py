# Generated manually for checkout app

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('donations', '0001_initial'),
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_number', models.CharField(db_index=True, max_length=20, unique=True)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('COMPLETED', 'Completed'), ('FAILED', 'Failed')], default='PENDING', max_length=10)),
                ('subtotal_pence', models.PositiveIntegerField(default=0)),
                ('fees_pence', models.PositiveIntegerField(default=0)),
                ('total_pence', models.PositiveIntegerField(default=0)),
                ('one_off_total_pence', models.PositiveIntegerField(default=0)),
                ('recurring_total_pence', models.PositiveIntegerField(default=0)),
                ('cover_fees', models.BooleanField(default=False)),
                ('gift_aid', models.BooleanField(default=False)),
                ('marketing_email', models.BooleanField(default=False)),
                ('marketing_sms', models.BooleanField(default=False)),
                ('is_express', models.BooleanField(default=False)),
                ('donor_title', models.CharField(blank=True, max_length=20)),
                ('donor_first_name', models.CharField(max_length=100)),
                ('donor_last_name', models.CharField(max_length=100)),
                ('donor_email', models.EmailField(max_length=255)),
                ('donor_phone', models.CharField(blank=True, max_length=40)),
                ('donor_address', models.CharField(blank=True, max_length=255)),
                ('donor_city', models.CharField(blank=True, max_length=100)),
                ('donor_postcode', models.CharField(blank=True, max_length=20)),
                ('donor_country', models.CharField(blank=True, max_length=2)),
                ('stripe_customer_id', models.CharField(blank=True, max_length=255)),
                ('payment_intent_id', models.CharField(blank=True, db_index=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('donor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='donations.donor')),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('appeal_title', models.CharField(max_length=200)),
                ('product_name', models.CharField(blank=True, max_length=200)),
                ('frequency', models.CharField(choices=[('ONE_OFF', 'One-off'), ('MONTHLY', 'Monthly'), ('YEARLY', 'Yearly')], default='ONE_OFF', max_length=10)),
                ('donation_type', models.CharField(choices=[('GENERAL', 'General'), ('SADAQAH', 'Sadaqah'), ('ZAKAT', 'Zakat'), ('LILLAH', 'Lillah')], default='GENERAL', max_length=10)),
                ('amount_pence', models.PositiveIntegerField()),
                ('plaque_name', models.CharField(blank=True, max_length=200)),
                ('subscription_id', models.CharField(blank=True, max_length=255)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='checkout.order')),
                ('appeal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='donations.appeal')),
                ('fundraiser', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='donations.fundraiser')),
                ('water_project', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='projects.waterproject')),
                ('water_project_country', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='projects.waterprojectcountry')),
                ('sponsorship_project', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='projects.sponsorshipproject')),
                ('sponsorship_country', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='projects.sponsorshipprojectcountry')),
                ('donation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='donations.donation')),
                ('recurring_donation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='donations.recurringdonation')),
            ],
            options={
                'db_table': 'order_items',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['status', 'created_at'], name='orders_status_1d9f63_idx'),
        ),
    ]
