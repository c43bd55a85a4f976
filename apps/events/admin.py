from django.contrib import admin

from .models import Event, EventAttendance


class EventAttendanceInline(admin.TabularInline):
    model = EventAttendance
    extra = 0
    autocomplete_fields = ('member',)
    readonly_fields = ('created_at',)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('name', 'location', 'start_date', 'total_days', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'location')
    ordering = ('-created_at',)
    inlines = [EventAttendanceInline]


@admin.register(EventAttendance)
class EventAttendanceAdmin(admin.ModelAdmin):
    list_display = ('event', 'member', 'present', 'created_at')
    list_filter = ('present', 'event')
    search_fields = ('member__full_name', 'member__registration_number', 'event__name')
    autocomplete_fields = ('event', 'member')
