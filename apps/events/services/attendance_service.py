"""
Attendance marking against the current event.

The current event is the most recently created active one. Marking someone
present when no event is active creates a placeholder "Active Event" so
attendance taken at the door is never lost; it can be renamed later.
"""

import logging

from django.db import transaction

from apps.events.models import Event, EventAttendance
from apps.members.services.attributes import today

logger = logging.getLogger(__name__)

DEFAULT_EVENT_NAME = "Active Event"
DEFAULT_EVENT_LOCATION = "N/A"


def current_event():
    return Event.objects.current()


def ensure_current_event():
    event = current_event()
    if event is None:
        event = Event.objects.create(
            name=DEFAULT_EVENT_NAME,
            location=DEFAULT_EVENT_LOCATION,
            start_date=today(),
            total_days=1,
            is_active=True,
        )
        logger.info(f"No active event, created placeholder event {event.pk}")
    return event


def mark_present(member, event=None):
    '''
    Record ``member`` as present at ``event`` (default: the current event).
    Marking twice keeps a single row. Returns ``(attendance, created)``.
    '''
    with transaction.atomic():
        event = event or ensure_current_event()
        attendance, created = EventAttendance.objects.update_or_create(
            event=event, member=member, defaults={"present": True}
        )
    logger.info(f"Marked {member.registration_number} present at {event.name}")
    return attendance, created


def remove_attendance(member, event=None):
    '''
    Delete the attendance of ``member`` at ``event`` (default: the current
    event). Nothing to remove is not an error. Returns the number deleted.
    '''
    event = event or current_event()
    if event is None:
        return 0
    deleted, _ = EventAttendance.objects.filter(event=event, member=member).delete()
    return deleted
