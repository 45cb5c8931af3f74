# ==========================================
# apps/projects/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html

from apps.donations.formatting import format_currency
from .models import (
    ProjectDonationStatus,
    SponsorshipDonation,
    SponsorshipProject,
    SponsorshipProjectCountry,
    WaterProject,
    WaterProjectCountry,
    WaterProjectDonation,
)


STATUS_COLORS = {
    ProjectDonationStatus.WAITING_TO_REVIEW: ('#E5C49A', '#2C1810'),
    ProjectDonationStatus.ORDERED: ('#8FA8C8', 'white'),
    ProjectDonationStatus.PENDING: ('#E5C49A', '#2C1810'),
    ProjectDonationStatus.COMPLETE: ('#6B8E5E', 'white'),
    ProjectDonationStatus.FAILED: ('#B85C5C', 'white'),
    ProjectDonationStatus.REFUNDED: ('#A47449', 'white'),
}


class ProjectDonationAdmin(admin.ModelAdmin):
    """Shared admin for water and sponsorship donations."""

    list_display = [
        'donation_number',
        'donor',
        'country',
        'get_amount_display',
        'status_badge',
        'email_sent',
        'report_sent',
        'created_at',
    ]
    list_filter = ['status', 'email_sent', 'report_sent', 'created_at']
    search_fields = ['donation_number', 'donor__email', 'donor__last_name', 'plaque_name']
    raw_id_fields = ['donor', 'fundraiser', 'added_by']
    readonly_fields = ['donation_number', 'transaction_id', 'created_at', 'updated_at', 'completed_at']
    date_hierarchy = 'created_at'

    def get_amount_display(self, obj):
        return format_currency(obj.amount_pence)
    get_amount_display.short_description = 'Amount'
    get_amount_display.admin_order_field = 'amount_pence'

    def status_badge(self, obj):
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'


@admin.register(WaterProject, SponsorshipProject)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['project_type', 'location', 'is_active', 'created_at']
    list_filter = ['is_active']


@admin.register(WaterProjectCountry, SponsorshipProjectCountry)
class ProjectCountryAdmin(admin.ModelAdmin):
    list_display = ['country', 'project_type', 'price_pence', 'is_active', 'sort_order']
    list_filter = ['project_type', 'is_active']
    list_editable = ['sort_order']
    search_fields = ['country']


@admin.register(WaterProjectDonation)
class WaterProjectDonationAdmin(ProjectDonationAdmin):
    list_filter = ProjectDonationAdmin.list_filter + ['water_project']
    raw_id_fields = ProjectDonationAdmin.raw_id_fields + ['water_project', 'country']


@admin.register(SponsorshipDonation)
class SponsorshipDonationAdmin(ProjectDonationAdmin):
    list_filter = ProjectDonationAdmin.list_filter + ['sponsorship_project']
    raw_id_fields = ProjectDonationAdmin.raw_id_fields + ['sponsorship_project', 'country']
