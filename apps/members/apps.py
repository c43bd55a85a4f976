from django.apps import AppConfig


class MembersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.members"
    label = "members"
    verbose_name = "Members (Tajneed, Maal, Tarbiyyat)"
