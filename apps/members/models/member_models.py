from django.db import models
from django.db.models import Q
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _

import uuid

from apps.members.services import attributes


class MemberQuerySet(models.QuerySet):

    def in_category(self, category, as_of=None):
        '''
        Members whose category, derived from their birth date on ``as_of``, is
        ``category``. Members without a birth date fall back to the stored label.
        '''
        after, on_or_before = attributes.category_birth_date_bounds(category, as_of)
        by_birth_date = Q(date_of_birth__isnull=False)
        if after is not None:
            by_birth_date &= Q(date_of_birth__gt=after)
        if on_or_before is not None:
            by_birth_date &= Q(date_of_birth__lte=on_or_before)
        return self.filter(by_birth_date | Q(date_of_birth__isnull=True, category__iexact=category))

    def active(self):
        return self.filter(status=Member.StatusType.ACTIVE)


class Member (models.Model):
    '''
    A registered participant (Tajneed record). Age, category and Nau-Mobaeen
    status are derived at read time; the stored copies are fallbacks only.
    '''
    class CategoryType(models.TextChoices):
        SAF_AWWAL = attributes.SAF_AWWAL, _("Saf Awwal")
        SAF_DOM = attributes.SAF_DOM, _("Saf Dom")
        GENERAL = attributes.GENERAL, _("General")

    class BaiatType(models.TextChoices):
        BY_BIRTH = "By Birth", _("By Birth")
        BY_BAIAT = "By Baiat", _("By Baiat")

    class StatusType(models.TextChoices):
        ACTIVE = "active", _("Active")
        INACTIVE = "inactive", _("Inactive")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    registration_number = models.CharField(max_length=20, unique=True, editable=False, verbose_name=_("registration number"))

    # identity
    full_name = models.CharField(max_length=200, verbose_name=_("full name"))
    islamic_names = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("islamic names"))
    date_of_birth = models.DateField(blank=True, null=True, verbose_name=_("date of birth"), help_text=_("Format: YYYY-MM-DD"))
    age = models.IntegerField(blank=True, null=True, validators=[MinValueValidator(1)], verbose_name=_("age at last save"))
    category = models.CharField(max_length=20, choices=CategoryType.choices, blank=True, null=True, verbose_name=_("stored category"))
    mobile_number = models.CharField(max_length=20, blank=True, null=True, verbose_name=_("mobile number"))

    # location - legacy rows may only carry the names
    region = models.ForeignKey("members.Region", on_delete=models.SET_NULL, blank=True, null=True, related_name="members")
    region_name = models.CharField(max_length=150, blank=True, null=True, verbose_name=_("region name"))
    majlis = models.ForeignKey("members.Majlis", on_delete=models.SET_NULL, blank=True, null=True, related_name="members")
    majlis_name = models.CharField(max_length=150, blank=True, null=True, verbose_name=_("majlis name"))

    # baiat
    baiat_type = models.CharField(max_length=10, choices=BaiatType.choices, blank=True, null=True, verbose_name=_("baiat type"))
    baiat_date = models.DateField(blank=True, null=True, verbose_name=_("baiat date"))
    nau_mobaeen = models.BooleanField(blank=True, null=True, verbose_name=_("nau-mobaeen at last save"))

    # capabilities, null when unknown
    knows_prayer_full = models.BooleanField(blank=True, null=True)
    knows_prayer_meaning = models.BooleanField(blank=True, null=True)
    can_read_quran = models.BooleanField(blank=True, null=True)
    owns_bicycle = models.BooleanField(blank=True, null=True)

    # welfare
    emergency_contact_name = models.CharField(max_length=150, blank=True, null=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True, null=True)
    dietary_requirements = models.TextField(blank=True, null=True)
    medical_conditions = models.TextField(blank=True, null=True)

    status = models.CharField(max_length=10, choices=StatusType.choices, default=StatusType.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MemberQuerySet.as_manager()

    class Meta:
        ordering = ["registration_number"]
        constraints = [
            models.CheckConstraint(condition=Q(age__isnull=True) | Q(age__gt=0), name="member_age_positive"),
        ]
        indexes = [
            models.Index(fields=["region", "majlis"], name="members_mem_region__4a1c2e_idx"),
            models.Index(fields=["date_of_birth"], name="members_mem_date_of_7d3b9f_idx"),
        ]

    def save(self, *args, **kwargs):
        self.full_name = self.full_name.strip()
        if self.region_id and self.region:
            self.region_name = self.region.name
        if self.majlis_id and self.majlis:
            self.majlis_name = self.majlis.name
        if self.baiat_type != self.BaiatType.BY_BAIAT:
            self.baiat_date = None
        if self.date_of_birth:
            self.age = attributes.calculate_age(self.date_of_birth)
        self.nau_mobaeen = attributes.is_nau_mobaeen(self.baiat_type, self.baiat_date)
        super().save(*args, **kwargs)

    def current_age(self, as_of=None):
        return attributes.calculate_age(self.date_of_birth, as_of)

    def current_category(self, as_of=None):
        return attributes.derive_category(self.date_of_birth, self.category, as_of)

    def current_nau_mobaeen(self, as_of=None):
        return attributes.is_nau_mobaeen(self.baiat_type, self.baiat_date, as_of)

    def __str__(self):
        return f"{self.registration_number} - {self.full_name}"
