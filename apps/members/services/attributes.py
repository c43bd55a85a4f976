"""
Derived member attributes: age, category (saf) and Nau-Mobaeen status.

These are recomputed from the birth/baiat dates every time they are read so
dashboards move members between categories as they age, without any job
rewriting stored values. Stored ``category`` is only a fallback for members
without a birth date.
"""

import datetime
from typing import Optional

from django.utils import timezone

SAF_AWWAL = "Saf Awwal"
SAF_DOM = "Saf Dom"
GENERAL = "General"

SAF_AWWAL_MIN_AGE = 56
SAF_DOM_MIN_AGE = 40
NAU_MOBAEEN_DAYS = 3 * 365


def today() -> datetime.date:
    return timezone.localdate()


def calculate_age(birth_date: Optional[datetime.date], as_of: Optional[datetime.date] = None) -> Optional[int]:
    """
    Whole years between ``birth_date`` and ``as_of``; one less while this
    year's birthday has not been reached yet.
    """
    if not birth_date:
        return None
    as_of = as_of or today()
    return as_of.year - birth_date.year - (
        (as_of.month, as_of.day) < (birth_date.month, birth_date.day)
    )


def category_for_age(age: Optional[int]) -> Optional[str]:
    if age is None:
        return None
    if age >= SAF_AWWAL_MIN_AGE:
        return SAF_AWWAL
    if age >= SAF_DOM_MIN_AGE:
        return SAF_DOM
    return GENERAL


def derive_category(birth_date, stored: Optional[str] = None, as_of=None) -> str:
    computed = category_for_age(calculate_age(birth_date, as_of))
    return computed or stored or ""


def years_before(as_of: datetime.date, years: int) -> datetime.date:
    """
    The same calendar day ``years`` earlier; 29 February falls back to the 28th.
    """
    try:
        return as_of.replace(year=as_of.year - years)
    except ValueError:
        return as_of.replace(year=as_of.year - years, day=28)


def category_birth_date_bounds(category: str, as_of=None):
    """
    Birth dates that fall in ``category`` on ``as_of`` as ``(after, on_or_before)``;
    either side may be None for an open interval. Someone is at least N years old
    exactly when they were born on or before ``years_before(as_of, N)``.
    """
    as_of = as_of or today()
    awwal_cutoff = years_before(as_of, SAF_AWWAL_MIN_AGE)
    dom_cutoff = years_before(as_of, SAF_DOM_MIN_AGE)

    if category == SAF_AWWAL:
        return None, awwal_cutoff
    if category == SAF_DOM:
        return awwal_cutoff, dom_cutoff
    if category == GENERAL:
        return dom_cutoff, None
    raise ValueError(f"Unknown category: {category}")


def is_nau_mobaeen(baiat_type: Optional[str], baiat_date: Optional[datetime.date], as_of=None) -> Optional[bool]:
    """
    Members who joined by baiat less than three years ago are Nau-Mobaeen
    (new converts). None when the member did not join by baiat or the date
    is unknown.
    """
    if baiat_type != "By Baiat" or not baiat_date:
        return None
    as_of = as_of or today()
    return (as_of - baiat_date).days < NAU_MOBAEEN_DAYS
