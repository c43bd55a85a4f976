import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def amount(label):
    return models.DecimalField(
        blank=True, decimal_places=2, max_digits=12, null=True,
        validators=[django.core.validators.MinValueValidator(Decimal("0"))], verbose_name=label,
    )


def counter(label):
    return models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=label)


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Region",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150, unique=True, verbose_name="region name")),
                ("code", models.CharField(blank=True, max_length=10, unique=True, verbose_name="region code")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Majlis",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150, verbose_name="majlis name")),
                ("code", models.CharField(blank=True, max_length=10, unique=True, verbose_name="majlis code")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("region", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="majlis", to="members.region")),
            ],
            options={
                "verbose_name_plural": "majlis",
                "ordering": ["region__name", "name"],
                "unique_together": {("name", "region")},
            },
        ),
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("registration_number", models.CharField(editable=False, max_length=20, unique=True, verbose_name="registration number")),
                ("full_name", models.CharField(max_length=200, verbose_name="full name")),
                ("islamic_names", models.CharField(blank=True, max_length=200, null=True, verbose_name="islamic names")),
                ("date_of_birth", models.DateField(blank=True, help_text="Format: YYYY-MM-DD", null=True, verbose_name="date of birth")),
                ("age", models.IntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)], verbose_name="age at last save")),
                ("category", models.CharField(blank=True, choices=[("Saf Awwal", "Saf Awwal"), ("Saf Dom", "Saf Dom"), ("General", "General")], max_length=20, null=True, verbose_name="stored category")),
                ("mobile_number", models.CharField(blank=True, max_length=20, null=True, verbose_name="mobile number")),
                ("region_name", models.CharField(blank=True, max_length=150, null=True, verbose_name="region name")),
                ("majlis_name", models.CharField(blank=True, max_length=150, null=True, verbose_name="majlis name")),
                ("baiat_type", models.CharField(blank=True, choices=[("By Birth", "By Birth"), ("By Baiat", "By Baiat")], max_length=10, null=True, verbose_name="baiat type")),
                ("baiat_date", models.DateField(blank=True, null=True, verbose_name="baiat date")),
                ("nau_mobaeen", models.BooleanField(blank=True, null=True, verbose_name="nau-mobaeen at last save")),
                ("knows_prayer_full", models.BooleanField(blank=True, null=True)),
                ("knows_prayer_meaning", models.BooleanField(blank=True, null=True)),
                ("can_read_quran", models.BooleanField(blank=True, null=True)),
                ("owns_bicycle", models.BooleanField(blank=True, null=True)),
                ("emergency_contact_name", models.CharField(blank=True, max_length=150, null=True)),
                ("emergency_contact_phone", models.CharField(blank=True, max_length=20, null=True)),
                ("dietary_requirements", models.TextField(blank=True, null=True)),
                ("medical_conditions", models.TextField(blank=True, null=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive")], default="active", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("region", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="members", to="members.region")),
                ("majlis", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="members", to="members.majlis")),
            ],
            options={
                "ordering": ["registration_number"],
                "indexes": [
                    models.Index(fields=["region", "majlis"], name="members_mem_region__4a1c2e_idx"),
                    models.Index(fields=["date_of_birth"], name="members_mem_date_of_7d3b9f_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("age__isnull", True), ("age__gt", 0), _connector="OR"), name="member_age_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Contribution",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("month", models.CharField(max_length=12, verbose_name="month")),
                ("year", models.PositiveIntegerField(verbose_name="year")),
                ("chanda_majlis", amount("chanda majlis")),
                ("chanda_ijtema", amount("chanda ijtema")),
                ("tehrik_e_jadid", amount("tehrik-e-jadid")),
                ("waqf_e_jadid", amount("waqf-e-jadid")),
                ("publication", amount("publication")),
                ("khidmat_e_khalq", amount("khidmat-e-khalq")),
                ("ansar_project", amount("ansar project")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contributions", to="members.member")),
            ],
            options={
                "ordering": ["-year", "-created_at"],
                "indexes": [models.Index(fields=["member", "year", "month"], name="members_con_member__5e8f10_idx")],
            },
        ),
        migrations.CreateModel(
            name="TarbiyyatReport",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("report_month", models.CharField(max_length=12, verbose_name="report month")),
                ("report_year", models.PositiveIntegerField(verbose_name="report year")),
                ("avg_prayers_per_day", counter("average prayers per day")),
                ("days_tilawat_done", counter("days tilawat done")),
                ("tahajjud_days", counter("tahajjud days")),
                ("quran_classes_attended", counter("quran classes attended")),
                ("friday_prayers_attended", counter("friday prayers attended")),
                ("huzur_sermons_listened", counter("huzur sermons listened")),
                ("nafli_fasts", counter("nafli fasts")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="tarbiyyat_reports", to="members.member")),
            ],
            options={
                "ordering": ["-report_year", "-created_at"],
                "indexes": [models.Index(fields=["member", "report_year", "report_month"], name="members_tar_member__9c2d41_idx")],
            },
        ),
    ]
