from django.db import models
from django.core import validators
from django.utils.translation import gettext_lazy as _

import uuid


class EventQuerySet(models.QuerySet):

    def current(self):
        '''
        The most recently created active event, or None.
        '''
        return self.filter(is_active=True).order_by("-created_at").first()


class Event(models.Model):
    '''
    An Ijtema or other gathering members can be marked present at
    '''
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(verbose_name=_("event name"), max_length=200)
    location = models.CharField(verbose_name=_("event location"), max_length=200, blank=True, null=True)
    start_date = models.DateField(verbose_name=_("start date"))
    total_days = models.PositiveSmallIntegerField(
        verbose_name=_("total days"), default=1, validators=[validators.MinValueValidator(1)]
    )
    is_active = models.BooleanField(verbose_name=_("active"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.start_date})"


class EventAttendance(models.Model):
    '''
    A member's presence at an event; at most one row per member and event
    '''
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendance_records")
    member = models.ForeignKey("members.Member", on_delete=models.CASCADE, related_name="attendance_records")
    present = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "member"], name="unique_event_attendance"),
        ]

    def __str__(self):
        return f"{self.member} @ {self.event.name}: {'present' if self.present else 'absent'}"
