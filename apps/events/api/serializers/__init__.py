from .event_serializers import (
    EventSerializer,
    EventAttendanceSerializer,
    MarkAttendanceSerializer,
)
