# ==========================================
# apps/masjids/admin.py
# ==========================================

from django.contrib import admin

from apps.donations.formatting import format_currency
from .models import Collection, Masjid, OfflineIncome


def amount_display(obj):
    return format_currency(obj.amount_pence)
amount_display.short_description = 'Amount'
amount_display.admin_order_field = 'amount_pence'


class CollectionInline(admin.TabularInline):
    model = Collection
    extra = 0
    fields = ['collected_at', 'type', 'amount_pence', 'donation_type', 'appeal', 'added_by']
    readonly_fields = fields
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Masjid)
class MasjidAdmin(admin.ModelAdmin):
    list_display = ['name', 'city', 'status', 'contact_name', 'phone', 'next_follow_up_at']
    list_filter = ['status', 'city', 'preferred_contact_method']
    search_fields = ['name', 'city', 'postcode', 'contact_name', 'email']
    raw_id_fields = ['added_by']
    inlines = [CollectionInline]
    fieldsets = (
        (None, {'fields': ('name', 'status')}),
        ('Location', {'fields': ('address', 'city', 'postcode', 'country', 'region')}),
        ('Contacts', {
            'fields': (
                'contact_name', 'contact_role', 'secondary_contact_name', 'secondary_contact_role',
                'phone', 'phone_alt', 'email', 'email_alt', 'website', 'preferred_contact_method',
            )
        }),
        ('Follow-up', {'fields': ('last_contacted_at', 'next_follow_up_at', 'notes', 'added_by')}),
    )


@admin.register(Collection)
class CollectionAdmin(admin.ModelAdmin):
    list_display = ['collected_at', 'masjid', 'type', amount_display, 'donation_type', 'appeal', 'added_by']
    list_filter = ['type', 'donation_type', 'collected_at']
    search_fields = ['masjid__name', 'notes']
    raw_id_fields = ['masjid', 'appeal', 'added_by']
    date_hierarchy = 'collected_at'


@admin.register(OfflineIncome)
class OfflineIncomeAdmin(admin.ModelAdmin):
    list_display = ['donation_number', 'received_at', 'appeal', amount_display, 'source', 'collected_via', 'added_by']
    list_filter = ['source', 'collected_via', 'donation_type', 'received_at']
    search_fields = ['donation_number', 'notes', 'appeal__title']
    raw_id_fields = ['appeal', 'added_by']
    readonly_fields = ['donation_number', 'created_at']
    date_hierarchy = 'received_at'
