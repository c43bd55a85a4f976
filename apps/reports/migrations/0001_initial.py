import uuid

import django.db.models.deletion
from django.db import migrations, models


SECTION_CHOICES = [
    ("tabligh", "Tabligh"),
    ("tabligh_digital", "Tabligh (Digital)"),
    ("umumi", "Umumi"),
    ("talim_ul_quran", "Talim-ul-Quran"),
    ("talim", "Talim"),
    ("isaar", "Isaar"),
    ("sihat", "Dhahanat & Sihat-e-Jismani"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("members", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DepartmentalReport",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("part", models.CharField(choices=SECTION_CHOICES, max_length=30, verbose_name="section")),
                ("region_name", models.CharField(blank=True, max_length=150, null=True)),
                ("majlis_name", models.CharField(blank=True, max_length=150, null=True)),
                ("month", models.CharField(max_length=12, verbose_name="report month")),
                ("year", models.PositiveIntegerField(verbose_name="report year")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("region", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="departmental_reports", to="members.region")),
                ("majlis", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="departmental_reports", to="members.majlis")),
            ],
            options={
                "db_table": "other_reports",
                "ordering": ["-year", "-created_at"],
                "indexes": [models.Index(fields=["part", "year", "month"], name="other_reports_part_period_idx")],
            },
        ),
        migrations.CreateModel(
            name="ReportData",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("report_month", models.CharField(max_length=12)),
                ("report_year", models.PositiveIntegerField()),
                ("section_key", models.CharField(max_length=30)),
                ("section_title", models.CharField(blank=True, max_length=100, null=True)),
                ("details", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("region", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="members.region")),
                ("majlis", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="members.majlis")),
            ],
            options={
                "db_table": "report_data",
                "verbose_name_plural": "report data",
                "ordering": ["-report_year", "section_key"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("region", "majlis", "report_month", "report_year", "section_key"),
                        name="report_data_natural_key",
                        nulls_distinct=False,
                    ),
                ],
            },
        ),
    ]
