from rest_framework import mixins, viewsets, response, status, filters
from rest_framework.decorators import action
from django_filters.rest_framework import DjangoFilterBackend

from apps.events.models import Event, EventAttendance
from apps.events.api.serializers import EventSerializer, EventAttendanceSerializer, MarkAttendanceSerializer
from apps.events.services import attendance_service
from core.permissions import DepartmentPermission


class EventViewSet(viewsets.ModelViewSet):
    """
    Ijtemas: events that attendance is taken for.
    """
    queryset = Event.objects.all()
    serializer_class = EventSerializer
    permission_classes = [DepartmentPermission]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_active']
    search_fields = ['name', 'location']
    ordering_fields = ['created_at', 'start_date', 'name']
    ordering = ['-created_at']
    department = "ijtemas"

    @action(detail=False, methods=['get'], url_name="active", url_path="active")
    def active(self, request):
        '''
        The current event (latest active one); ``event`` is null when none is active.
        '''
        event = attendance_service.current_event()
        return response.Response({"event": EventSerializer(event).data if event else None})


class EventAttendanceViewSet(mixins.ListModelMixin,
                             mixins.RetrieveModelMixin,
                             viewsets.GenericViewSet):
    """
    Attendance of members at events.

    GET lists the attendees of ``?event=`` or of the current event, POST marks
    a member present (one row per member and event) and ``remove/`` deletes
    the mark again.
    """
    queryset = EventAttendance.objects.all().select_related('event', 'member')
    serializer_class = EventAttendanceSerializer
    permission_classes = [DepartmentPermission]
    department = "ijtemas"

    def list(self, request, *args, **kwargs):
        event_id = request.query_params.get('event')
        if event_id:
            event = MarkAttendanceSerializer().fields['event'].to_internal_value(event_id)
        else:
            event = attendance_service.current_event()
        if event is None:
            return response.Response({"event": None, "attendees": []})

        attendees = self.get_queryset().filter(event=event)
        return response.Response({
            "event": EventSerializer(event).data,
            "attendees": EventAttendanceSerializer(attendees, many=True).data,
        })

    def create(self, request, *args, **kwargs):
        serializer = MarkAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attendance, created = attendance_service.mark_present(
            serializer.validated_data['member'], serializer.validated_data.get('event')
        )
        return response.Response(
            {"attendance": EventAttendanceSerializer(attendance).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @action(detail=False, methods=['delete'], url_name="remove", url_path="remove")
    def remove(self, request):
        '''
        Remove ``?member=`` from ``?event=`` (default: the current event).
        '''
        serializer = MarkAttendanceSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        deleted = attendance_service.remove_attendance(
            serializer.validated_data['member'], serializer.validated_data.get('event')
        )
        return response.Response({"success": True, "removed": deleted})
