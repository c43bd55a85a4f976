import uuid

import apps.users.models.user_manager
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="PortalUser",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150, verbose_name="name")),
                ("username", models.CharField(max_length=100, unique=True, verbose_name="username")),
                ("role", models.CharField(blank=True, choices=[("Tajneed", "Tajneed"), ("Maal", "Maal"), ("Tarbiyyat", "Tarbiyyat"), ("Ijtemas", "Ijtemas"), ("Tabligh", "Tabligh"), ("Umumi", "Umumi"), ("Talim-ul-Quran", "Talim-ul-Quran"), ("Talim", "Talim"), ("Isaar", "Isaar"), ("Dhahanat & Sihat-e-Jismani", "Dhahanat & Sihat-e-Jismani")], help_text="department role for sub-users; empty for administrators", max_length=40, null=True, verbose_name="role")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("is_staff", models.BooleanField(default=False, verbose_name="staff status")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "portal user",
                "verbose_name_plural": "portal users",
                "ordering": ["-created_at"],
            },
            managers=[
                ("objects", apps.users.models.user_manager.PortalUserManager()),
            ],
        ),
    ]
