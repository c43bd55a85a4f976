from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import BaseUserCreationForm, UserChangeForm
from django.utils.translation import gettext_lazy as _

from .models import PortalUser


class PortalUserCreationForm(BaseUserCreationForm):
    class Meta:
        model = PortalUser
        fields = ("username", "name", "role")


class PortalUserChangeForm(UserChangeForm):
    class Meta:
        model = PortalUser
        fields = "__all__"


@admin.register(PortalUser)
class PortalUserAdmin(UserAdmin):
    form = PortalUserChangeForm
    add_form = PortalUserCreationForm

    list_display = ("username", "name", "role", "display_dashboard", "is_active", "is_staff")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("username", "name")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "last_login")

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (_("Account"), {"fields": ("name", "role")}),
        (_("Permissions"), {"fields": (
            "is_active", "is_staff", "is_superuser",
            "groups", "user_permissions"
        )}),
        (_("Important dates"), {"fields": ("created_at", "last_login")}),
    )

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("username", "name", "role", "password1", "password2"),
        }),
    )

    @admin.display(description=_("dashboard"))
    def display_dashboard(self, obj):
        return obj.dashboard
