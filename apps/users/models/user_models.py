from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.utils.translation import gettext_lazy as _

import uuid

from .user_manager import PortalUserManager


class PortalUser(AbstractBaseUser, PermissionsMixin):
    '''
    Account used to sign in to the records portal. Admins are staff users; sub-users
    carry a single department role which decides what they can reach.
    '''
    class RoleType(models.TextChoices):
        TAJNEED = "Tajneed", _("Tajneed")
        MAAL = "Maal", _("Maal")
        TARBIYYAT = "Tarbiyyat", _("Tarbiyyat")
        IJTEMAS = "Ijtemas", _("Ijtemas")
        TABLIGH = "Tabligh", _("Tabligh")
        UMUMI = "Umumi", _("Umumi")
        TALIM_UL_QURAN = "Talim-ul-Quran", _("Talim-ul-Quran")
        TALIM = "Talim", _("Talim")
        ISAAR = "Isaar", _("Isaar")
        SIHAT = "Dhahanat & Sihat-e-Jismani", _("Dhahanat & Sihat-e-Jismani")

    # department keys unlocked by each role; report section keys double as departments
    ROLE_DEPARTMENTS = {
        RoleType.TAJNEED.value: ("tajneed",),
        RoleType.MAAL.value: ("maal",),
        RoleType.TARBIYYAT.value: ("tarbiyyat",),
        RoleType.IJTEMAS.value: ("ijtemas",),
        RoleType.TABLIGH.value: ("tabligh", "tabligh_digital"),
        RoleType.UMUMI.value: ("umumi",),
        RoleType.TALIM_UL_QURAN.value: ("talim_ul_quran",),
        RoleType.TALIM.value: ("talim",),
        RoleType.ISAAR.value: ("isaar",),
        RoleType.SIHAT.value: ("sihat",),
    }

    ROLE_DASHBOARDS = {
        RoleType.TAJNEED.value: "/tajneed-dashboard",
        RoleType.MAAL.value: "/maal-dashboard",
        RoleType.TARBIYYAT.value: "/tarbiyyat-dashboard",
        RoleType.IJTEMAS.value: "/ijtemas-dashboard",
        RoleType.TABLIGH.value: "/tabligh-dashboard",
        RoleType.UMUMI.value: "/umumi-dashboard",
        RoleType.TALIM_UL_QURAN.value: "/talim-ul-quran-dashboard",
        RoleType.TALIM.value: "/talim-dashboard",
        RoleType.ISAAR.value: "/isaar-dashboard",
        RoleType.SIHAT.value: "/sihat-dashboard",
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150, verbose_name=_("name"))
    username = models.CharField(max_length=100, unique=True, verbose_name=_("username"))
    role = models.CharField(
        max_length=40,
        choices=RoleType.choices,
        blank=True,
        null=True,
        verbose_name=_("role"),
        help_text=_("department role for sub-users; empty for administrators"),
    )

    is_active = models.BooleanField(default=True, verbose_name=_("active"))
    is_staff = models.BooleanField(default=False, verbose_name=_("staff status"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    objects = PortalUserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        verbose_name = _("portal user")
        verbose_name_plural = _("portal users")
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        self.username = self.username.strip()
        self.name = self.name.strip()
        super().save(*args, **kwargs)

    @property
    def departments(self):
        if not self.role:
            return ()
        return self.ROLE_DEPARTMENTS.get(self.role, ())

    @property
    def dashboard(self):
        if self.is_staff:
            return "/dashboard"
        return self.ROLE_DASHBOARDS.get(self.role)

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.username

    def __str__(self):
        return f"{self.username} ({self.role or 'admin'})"
