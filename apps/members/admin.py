from django.contrib import admin

from .models import Region, Majlis, Member, Contribution, TarbiyyatReport
from .services.registration import save_new_member


# ! Organisation structure

class MajlisInline(admin.TabularInline):
    model = Majlis
    extra = 0
    fields = ('name', 'code')
    readonly_fields = ('code',)


@admin.register(Region)
class RegionAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'created_at')
    search_fields = ('name', 'code')
    ordering = ('name',)
    readonly_fields = ('id', 'code', 'created_at')
    inlines = [MajlisInline]


@admin.register(Majlis)
class MajlisAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'region')
    list_filter = ('region',)
    search_fields = ('name', 'code', 'region__name')
    ordering = ('region__name', 'name')
    autocomplete_fields = ('region',)
    readonly_fields = ('id', 'code', 'created_at')


# ! Members and their monthly records

@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'full_name', 'region', 'majlis', 'display_category', 'status')
    list_filter = ('status', 'baiat_type', 'region')
    search_fields = ('registration_number', 'full_name', 'islamic_names', 'mobile_number')
    ordering = ('registration_number',)
    autocomplete_fields = ('region', 'majlis')
    readonly_fields = ('id', 'registration_number', 'age', 'nau_mobaeen', 'created_at', 'updated_at')

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
        else:
            save_new_member(obj)

    @admin.display(description='category')
    def display_category(self, obj):
        return obj.current_category()

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('region', 'majlis')


@admin.register(Contribution)
class ContributionAdmin(admin.ModelAdmin):
    list_display = ('member', 'month', 'year', 'total')
    list_filter = ('year', 'month')
    search_fields = ('member__full_name', 'member__registration_number')
    autocomplete_fields = ('member',)


@admin.register(TarbiyyatReport)
class TarbiyyatReportAdmin(admin.ModelAdmin):
    list_display = ('member', 'report_month', 'report_year', 'avg_prayers_per_day', 'days_tilawat_done')
    list_filter = ('report_year', 'report_month')
    search_fields = ('member__full_name', 'member__registration_number')
    autocomplete_fields = ('member',)
