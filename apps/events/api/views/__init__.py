from .event_viewsets import (
    EventViewSet,
    EventAttendanceViewSet,
)
