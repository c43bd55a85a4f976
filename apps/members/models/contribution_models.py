from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _

import uuid


def amount_field(label):
    return models.DecimalField(
        verbose_name=label, max_digits=12, decimal_places=2, blank=True, null=True,
        validators=[MinValueValidator(Decimal("0"))],
    )


class Contribution (models.Model):
    '''
    Monthly financial contribution (Maal) of one member. Each amount is optional
    and the total only counts the ones that were given.
    '''
    AMOUNT_FIELDS = (
        "chanda_majlis", "chanda_ijtema", "tehrik_e_jadid", "waqf_e_jadid",
        "publication", "khidmat_e_khalq", "ansar_project",
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey("members.Member", on_delete=models.CASCADE, related_name="contributions")
    month = models.CharField(max_length=12, verbose_name=_("month"))
    year = models.PositiveIntegerField(verbose_name=_("year"))

    chanda_majlis = amount_field(_("chanda majlis"))
    chanda_ijtema = amount_field(_("chanda ijtema"))
    tehrik_e_jadid = amount_field(_("tehrik-e-jadid"))
    waqf_e_jadid = amount_field(_("waqf-e-jadid"))
    publication = amount_field(_("publication"))
    khidmat_e_khalq = amount_field(_("khidmat-e-khalq"))
    ansar_project = amount_field(_("ansar project"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-created_at"]
        indexes = [models.Index(fields=["member", "year", "month"], name="members_con_member__5e8f10_idx")]

    @property
    def total(self):
        return sum(
            (getattr(self, field) for field in self.AMOUNT_FIELDS if getattr(self, field) is not None),
            Decimal("0"),
        )

    def __str__(self):
        return f"{self.member} {self.month} {self.year}: {self.total}"
