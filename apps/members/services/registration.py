"""
Registration number allocation and natural ordering.

Registration numbers are a text prefix plus a zero padded sequence (MA001,
MA002, ... MA1000). There is no database sequence behind them: the next
number is one more than the largest numeric suffix already issued.

Scanning then inserting is racy on its own, two concurrent registrations
can compute the same number. ``register_member`` closes the race with the
UNIQUE constraint on ``registration_number``: a conflict on the allocated
number rolls the attempt back, rescans and tries again.
"""

import logging
import re

from django.conf import settings
from django.db import IntegrityError, transaction

from core.paging import fetch_in_pages

logger = logging.getLogger(__name__)

NON_DIGITS = re.compile(r"[^0-9]")
PREFIX_PATTERN = re.compile(r"^[^0-9]+")
SUFFIX_PATTERN = re.compile(r"(\d+)$")


class RegistrationConflict(Exception):
    """
    Raised when no free registration number could be claimed.
    """


def extract_sequence(identifier):
    """
    Numeric part of an identifier with every non-digit removed, or None.
    """
    if not isinstance(identifier, str):
        return None
    digits = NON_DIGITS.sub("", identifier)
    if not digits:
        return None
    return int(digits)


def format_registration_number(number, prefix=None, width=None):
    prefix = settings.MEMBER_REGISTRATION_PREFIX if prefix is None else prefix
    width = settings.MEMBER_REGISTRATION_WIDTH if width is None else width
    return f"{prefix}{str(number).zfill(width)}"


def next_registration_number(existing, prefix=None, width=None):
    """
    One past the largest sequence found in ``existing``. Identifiers without
    digits are skipped.
    """
    highest = 0
    for identifier in existing:
        number = extract_sequence(identifier)
        if number is not None and number > highest:
            highest = number
    return format_registration_number(highest + 1, prefix, width)


def natural_sort_key(identifier):
    '''
    (prefix, number) so MA999 sorts before MA1000. Identifiers without a
    numeric suffix go after the numbered ones of the same prefix and missing
    values go last.
    '''
    if not identifier or not isinstance(identifier, str):
        return ("~", float("inf"))
    prefix_match = PREFIX_PATTERN.match(identifier)
    suffix_match = SUFFIX_PATTERN.search(identifier)
    prefix = prefix_match.group(0) if prefix_match else ""
    number = int(suffix_match.group(1)) if suffix_match else float("inf")
    return (prefix, number)


def sort_naturally(items, key=lambda item: item):
    return sorted(items, key=lambda item: natural_sort_key(key(item)))


def issued_registration_numbers():
    from apps.members.models import Member

    queryset = Member.objects.order_by("pk").values_list("registration_number", flat=True)
    return fetch_in_pages(queryset)


def register_member(**fields):
    """
    Create a member under the next free registration number.
    """
    from apps.members.models import Member

    return save_new_member(Member(**fields))


def save_new_member(member):
    """
    Insert an unsaved member, allocating its registration number.

    Each attempt scans and inserts inside one transaction; if another
    registration claimed the same number first the insert hits the unique
    constraint and the attempt is retried with a fresh scan.
    """
    from apps.members.models import Member

    attempts = settings.MEMBER_REGISTRATION_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                member.registration_number = next_registration_number(issued_registration_numbers())
                member.save(force_insert=True)
            logger.info(f"Registered member {member.registration_number} ({member.full_name})")
            return member
        except IntegrityError:
            if not Member.objects.filter(registration_number=member.registration_number).exists():
                raise
            logger.warning(
                f"Registration number {member.registration_number} was taken concurrently "
                f"(attempt {attempt}/{attempts}), retrying"
            )

    raise RegistrationConflict(
        f"Could not allocate a registration number after {attempts} attempts"
    )
