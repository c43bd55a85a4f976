from django.db import models
from django.utils.translation import gettext_lazy as _

import uuid

MAX_LOCATION_CODE_LENGTH = 10


def unique_location_code(model, source, fallback):
    '''
    First three letters of ``source`` uppercased, with a numeric suffix appended
    until no other row of ``model`` uses it. E.g. NAI, NAI1, NAI2
    '''
    base = (str(source or "").strip().upper()[:3]) or fallback
    candidate = base
    suffix = 0
    while model.objects.filter(code=candidate).exists():
        suffix += 1
        candidate = f"{base}{suffix}"[:MAX_LOCATION_CODE_LENGTH]
    return candidate


class Region (models.Model):
    '''
    Top level of the organisation, e.g. Nairobi, Coast
    '''
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(verbose_name=_("region name"), max_length=150, unique=True)
    code = models.CharField(verbose_name=_("region code"), max_length=MAX_LOCATION_CODE_LENGTH, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def save(self, *args, **kwargs):
        self.name = self.name.strip()
        if self._state.adding:
            self.code = unique_location_code(Region, self.code or self.name, "REG")
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class Majlis (models.Model):
    '''
    Local unit of a region; every majlis belongs to exactly one region
    '''
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(verbose_name=_("majlis name"), max_length=150)
    code = models.CharField(verbose_name=_("majlis code"), max_length=MAX_LOCATION_CODE_LENGTH, unique=True, blank=True)
    region = models.ForeignKey(Region, on_delete=models.PROTECT, related_name="majlis")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = _("majlis")
        unique_together = ("name", "region")
        ordering = ["region__name", "name"]

    def save(self, *args, **kwargs):
        self.name = self.name.strip()
        if self._state.adding:
            self.code = unique_location_code(Majlis, self.code or self.name, "MAJ")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.region} -> {self.name}"
