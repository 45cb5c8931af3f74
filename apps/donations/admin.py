# ==========================================
# apps/donations/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html

from .formatting import format_currency
from .models import Appeal, Donation, DonationStatus, Donor, Fundraiser, RecurringDonation, RecurringStatus


STATUS_COLORS = {
    DonationStatus.PENDING: ('#E5C49A', '#2C1810'),
    DonationStatus.COMPLETED: ('#6B8E5E', 'white'),
    DonationStatus.FAILED: ('#B85C5C', 'white'),
    DonationStatus.REFUNDED: ('#A47449', 'white'),
    RecurringStatus.ACTIVE: ('#6B8E5E', 'white'),
    RecurringStatus.PAUSED: ('#E5C49A', '#2C1810'),
    RecurringStatus.CANCELLED: ('#A47449', 'white'),
}


def status_badge(obj):
    bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, obj.get_status_display()
    )
status_badge.short_description = 'Status'


def amount_display(obj):
    return format_currency(obj.amount_pence)
amount_display.short_description = 'Amount'
amount_display.admin_order_field = 'amount_pence'


@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display = ['email', 'first_name', 'last_name', 'city', 'postcode', 'country', 'created_at']
    list_filter = ['country', 'created_at']
    search_fields = ['email', 'first_name', 'last_name', 'postcode']
    readonly_fields = ['stripe_customer_id', 'created_at', 'updated_at']
    ordering = ['-created_at']


@admin.register(Appeal)
class AppealAdmin(admin.ModelAdmin):
    list_display = ['title', 'is_active', 'allow_monthly', 'allow_yearly', 'sort_order']
    list_filter = ['is_active']
    list_editable = ['sort_order']
    search_fields = ['title']
    prepopulated_fields = {'slug': ('title',)}


@admin.register(Fundraiser)
class FundraiserAdmin(admin.ModelAdmin):
    list_display = ['title', 'fundraiser_name', 'appeal', 'target_amount_pence', 'is_active', 'created_at']
    list_filter = ['is_active', 'appeal']
    search_fields = ['title', 'fundraiser_name', 'email']
    raw_id_fields = ['appeal']


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = [
        'order_number',
        'donor',
        'appeal',
        amount_display,
        'donation_type',
        'payment_method',
        'gift_aid',
        status_badge,
        'created_at',
    ]
    list_filter = ['status', 'payment_method', 'donation_type', 'collected_via', 'gift_aid', 'created_at']
    search_fields = ['order_number', 'transaction_id', 'donor__email', 'donor__last_name']
    raw_id_fields = ['donor', 'appeal', 'fundraiser']
    readonly_fields = ['order_number', 'transaction_id', 'created_at', 'completed_at']
    date_hierarchy = 'created_at'
    actions = ['mark_gift_aid_claimed']

    @admin.action(description='Mark Gift Aid as claimed')
    def mark_gift_aid_claimed(self, request, queryset):
        updated = queryset.filter(gift_aid=True, status=DonationStatus.COMPLETED).update(gift_aid_claimed=True)
        self.message_user(request, f'{updated} donation(s) marked as claimed.')


@admin.register(RecurringDonation)
class RecurringDonationAdmin(admin.ModelAdmin):
    list_display = [
        'donor',
        'appeal',
        amount_display,
        'frequency',
        status_badge,
        'next_payment_date',
        'created_at',
    ]
    list_filter = ['status', 'frequency', 'created_at']
    search_fields = ['subscription_id', 'order_number', 'donor__email']
    raw_id_fields = ['donor', 'appeal']
    readonly_fields = ['subscription_id', 'order_number', 'created_at', 'cancelled_at']
