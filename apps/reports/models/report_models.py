from django.db import models
from django.utils.translation import gettext_lazy as _

import uuid

from apps.reports import sections


def count_field(label):
    return models.PositiveIntegerField(blank=True, null=True, verbose_name=label)


def yes_no_field(label):
    return models.BooleanField(blank=True, null=True, verbose_name=label)


class SectionType(models.TextChoices):
    TABLIGH = sections.TABLIGH, _("Tabligh")
    TABLIGH_DIGITAL = sections.TABLIGH_DIGITAL, _("Tabligh (Digital)")
    UMUMI = sections.UMUMI, _("Umumi")
    TALIM_UL_QURAN = sections.TALIM_UL_QURAN, _("Talim-ul-Quran")
    TALIM = sections.TALIM, _("Talim")
    ISAAR = sections.ISAAR, _("Isaar")
    SIHAT = sections.SIHAT, _("Dhahanat & Sihat-e-Jismani")


class DepartmentalReport (models.Model):
    '''
    Normalized monthly report of one department for one majlis.

    Only the base columns are guaranteed to exist: the typed per-field columns
    arrive in a later migration, so every read and write goes through
    ``apps.reports.services.report_sync`` which checks the live schema first.
    '''
    BASE_FIELDS = (
        "id", "part", "region", "majlis", "region_name", "majlis_name",
        "month", "year", "created_at", "updated_at",
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    part = models.CharField(max_length=30, choices=SectionType.choices, verbose_name=_("section"))
    region = models.ForeignKey("members.Region", on_delete=models.SET_NULL, blank=True, null=True, related_name="departmental_reports")
    majlis = models.ForeignKey("members.Majlis", on_delete=models.SET_NULL, blank=True, null=True, related_name="departmental_reports")
    region_name = models.CharField(max_length=150, blank=True, null=True)
    majlis_name = models.CharField(max_length=150, blank=True, null=True)
    month = models.CharField(max_length=12, verbose_name=_("report month"))
    year = models.PositiveIntegerField(verbose_name=_("report year"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # tabligh
    one_to_one_meeting = count_field(_("1 to 1 meetings"))
    under_tabligh = count_field(_("people under tabligh"))
    book_stall = count_field(_("book stalls"))
    literature_distributed = count_field(_("literature distributed"))
    new_contacts = count_field(_("new contacts"))
    exhibitions = count_field(_("exhibitions"))
    dain_e_ilallah = count_field(_("dain-e-ilallah"))
    baiats = count_field(_("baiats"))
    tabligh_days_held = count_field(_("tabligh days held"))

    # tabligh (digital)
    digital_content_created = count_field(_("digital content created"))
    merch_reflector_jackets = count_field(_("reflector jackets"))
    merch_tshirts = count_field(_("t-shirts"))
    merch_caps = count_field(_("caps"))
    merch_stickers = count_field(_("stickers"))

    # umumi
    monthly_report = yes_no_field(_("monthly report sent"))
    amila_meeting = count_field(_("amila meetings"))
    general_meeting = count_field(_("general meetings"))
    visited_nazm_e_ala = yes_no_field(_("visited by nazm-e-ala"))

    # talim-ul-quran
    talim_ul_quran_held = count_field(_("talim-ul-quran classes held"))
    ansar_attending = count_field(_("ansar attending"))
    avg_ansar_joining_weekly_quran = models.DecimalField(
        max_digits=8, decimal_places=2, blank=True, null=True,
        verbose_name=_("average ansar joining the weekly quran class"),
    )

    # talim
    ansar_reading_book = count_field(_("ansar reading the book"))
    ansar_participated_exam = count_field(_("ansar in the exam"))

    # isaar
    ansar_visiting_sick = count_field(_("ansar visiting the sick"))
    ansar_visiting_elderly = count_field(_("ansar visiting the elderly"))
    feed_hungry_program_held = count_field(_("feed the hungry programmes"))
    ansar_participated_feed_hungry = count_field(_("ansar in feed the hungry"))

    # dhahanat & sihat-e-jismani
    ansar_regular_exercise = count_field(_("ansar exercising regularly"))
    ansar_owns_bicycle = count_field(_("ansar owning a bicycle"))

    class Meta:
        db_table = "other_reports"
        ordering = ["-year", "-created_at"]
        indexes = [models.Index(fields=["part", "year", "month"], name="other_reports_part_period_idx")]

    def natural_key(self):
        return (self.region_id, self.majlis_id, self.month, self.year, self.part)

    def __str__(self):
        scope = self.majlis_name or self.region_name or "national"
        return f"{self.get_part_display()} {self.month} {self.year} ({scope})"


class ReportData (models.Model):
    '''
    Section values of a departmental report as a JSON ``details`` blob, one row
    per (region, majlis, month, year, section). Written on every report save
    so it holds the values even where the typed columns are missing.
    '''
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    region = models.ForeignKey("members.Region", on_delete=models.SET_NULL, blank=True, null=True, related_name="+")
    majlis = models.ForeignKey("members.Majlis", on_delete=models.SET_NULL, blank=True, null=True, related_name="+")
    report_month = models.CharField(max_length=12)
    report_year = models.PositiveIntegerField()
    section_key = models.CharField(max_length=30)
    section_title = models.CharField(max_length=100, blank=True, null=True)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "report_data"
        verbose_name_plural = "report data"
        ordering = ["-report_year", "section_key"]
        constraints = [
            models.UniqueConstraint(
                fields=["region", "majlis", "report_month", "report_year", "section_key"],
                name="report_data_natural_key",
                nulls_distinct=False,
            ),
        ]

    def __str__(self):
        return f"{self.section_key} {self.report_month} {self.report_year}"
