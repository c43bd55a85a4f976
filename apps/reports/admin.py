from django.contrib import admin

from .models import DepartmentalReport, ReportData


@admin.register(DepartmentalReport)
class DepartmentalReportAdmin(admin.ModelAdmin):
    '''
    View only. Reports are written through ``ReportSynchronizer`` so the
    ``report_data`` mirror stays in step, and the typed columns may be
    missing from the live table.
    '''
    list_display = ('part', 'region_name', 'majlis_name', 'month', 'year', 'updated_at')
    list_filter = ('part', 'year')
    search_fields = ('region_name', 'majlis_name', 'month')
    ordering = ('-year', '-created_at')
    fields = DepartmentalReport.BASE_FIELDS
    readonly_fields = DepartmentalReport.BASE_FIELDS

    def get_queryset(self, request):
        return super().get_queryset(request).only(*DepartmentalReport.BASE_FIELDS)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ReportData)
class ReportDataAdmin(admin.ModelAdmin):
    list_display = ('section_key', 'region', 'majlis', 'report_month', 'report_year', 'updated_at')
    list_filter = ('section_key', 'report_year')
    search_fields = ('section_key', 'report_month', 'region__name', 'majlis__name')
    readonly_fields = ('id', 'created_at', 'updated_at')
