from django.contrib import admin
from django.utils.html import format_html

from apps.enquiries.choices import Status
from .models import Customer, Enquiry


class EnquiryInline(admin.TabularInline):
    model = Enquiry
    fields = ('date', 'segment', 'status', 'assigned_to', 'reminder_date')
    readonly_fields = fields
    extra = 0
    can_delete = False
    show_change_link = True


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):

    list_display = ['name', 'phone', 'location', 'enquiries_count', 'created_at']
    search_fields = ['name', 'phone', 'location']
    readonly_fields = ['id', 'created_at']
    inlines = [EnquiryInline]

    def enquiries_count(self, obj):
        return obj.enquiries.count()

    enquiries_count.short_description = 'Enquiries'


@admin.register(Enquiry)
class EnquiryAdmin(admin.ModelAdmin):

    list_display = ['customer_name', 'phone', 'date', 'segment', 'status_badge', 'assigned_to', 'reminder_date', 'created_at']
    list_filter = ['status', 'segment', 'assigned_to', 'date']
    search_fields = ['customer_name', 'phone', 'location', 'requirement_details']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['customer']
    date_hierarchy = 'date'

    fieldsets = (
        ('Enquiry', {
            'fields': ('date', 'segment', 'status', 'assigned_to', 'reminder_date')
        }),
        ('Customer', {
            'fields': ('customer', 'customer_name', 'phone', 'location')
        }),
        ('Details', {
            'fields': ('requirement_details', 'remarks')
        }),
        ('Timestamps', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):

        colors = {
            Status.LEAD: '#6c757d',
            Status.ENQUIRY: '#0d6efd',
            Status.QUOTE: '#ffc107',
            Status.WON: '#28a745',
            Status.LOSS: '#dc3545',
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 10px; border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )

    status_badge.short_description = 'Status'
