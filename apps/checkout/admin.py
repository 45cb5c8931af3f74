# ==========================================
# apps/checkout/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html

from apps.donations.formatting import format_currency
from .models import Order, OrderItem, OrderStatus


class OrderItemInline(admin.TabularInline):
    """Basket lines within an order."""
    model = OrderItem
    extra = 0
    fields = [
        'appeal_title',
        'product_name',
        'frequency',
        'donation_type',
        'amount_pence',
        'plaque_name',
        'subscription_id',
    ]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Items are created by checkout only."""
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'order_number',
        'donor_email',
        'get_total_display',
        'cover_fees',
        'gift_aid',
        'status_badge',
        'created_at',
    ]
    list_filter = ['status', 'cover_fees', 'gift_aid', 'is_express', 'created_at']
    search_fields = ['order_number', 'donor_email', 'donor_first_name', 'donor_last_name', 'payment_intent_id']
    readonly_fields = [
        'order_number',
        'subtotal_pence',
        'fees_pence',
        'total_pence',
        'one_off_total_pence',
        'recurring_total_pence',
        'stripe_customer_id',
        'payment_intent_id',
        'created_at',
        'updated_at',
        'completed_at',
    ]
    inlines = [OrderItemInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Order', {
            'fields': ('order_number', 'status', 'is_express')
        }),
        ('Totals', {
            'fields': (
                'subtotal_pence',
                'fees_pence',
                'total_pence',
                'one_off_total_pence',
                'recurring_total_pence',
                'cover_fees',
            )
        }),
        ('Donor', {
            'fields': (
                'donor',
                'donor_title',
                'donor_first_name',
                'donor_last_name',
                'donor_email',
                'donor_phone',
                'donor_address',
                'donor_city',
                'donor_postcode',
                'donor_country',
                'gift_aid',
                'marketing_email',
                'marketing_sms',
            )
        }),
        ('Stripe', {
            'fields': ('stripe_customer_id', 'payment_intent_id'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'completed_at'),
            'classes': ('collapse',)
        }),
    )

    def get_total_display(self, obj):
        return format_currency(obj.total_pence)
    get_total_display.short_description = 'Total'
    get_total_display.admin_order_field = 'total_pence'

    def status_badge(self, obj):
        colors = {
            OrderStatus.PENDING: ('#E5C49A', '#2C1810'),
            OrderStatus.COMPLETED: ('#6B8E5E', 'white'),
            OrderStatus.FAILED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
