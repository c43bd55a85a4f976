from django.db import models
from django.utils.translation import gettext_lazy as _

import uuid


class TarbiyyatReport (models.Model):
    '''
    Monthly spiritual report of one member; every counter is optional
    '''
    COUNTER_FIELDS = (
        "avg_prayers_per_day", "days_tilawat_done", "tahajjud_days", "quran_classes_attended",
        "friday_prayers_attended", "huzur_sermons_listened", "nafli_fasts",
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey("members.Member", on_delete=models.CASCADE, related_name="tarbiyyat_reports")
    report_month = models.CharField(max_length=12, verbose_name=_("report month"))
    report_year = models.PositiveIntegerField(verbose_name=_("report year"))

    avg_prayers_per_day = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("average prayers per day"))
    days_tilawat_done = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("days tilawat done"))
    tahajjud_days = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("tahajjud days"))
    quran_classes_attended = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("quran classes attended"))
    friday_prayers_attended = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("friday prayers attended"))
    huzur_sermons_listened = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("huzur sermons listened"))
    nafli_fasts = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name=_("nafli fasts"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-report_year", "-created_at"]
        indexes = [models.Index(fields=["member", "report_year", "report_month"], name="members_tar_member__9c2d41_idx")]

    def __str__(self):
        return f"{self.member} {self.report_month} {self.report_year}"
