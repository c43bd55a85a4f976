from rest_framework import serializers

from apps.events.models import Event, EventAttendance
from apps.members.models import Member
from apps.members.api.serializers import SimplifiedMemberSerializer


class EventSerializer(serializers.ModelSerializer):
    attendee_count = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = ('id', 'name', 'location', 'start_date', 'total_days', 'is_active', 'attendee_count', 'created_at')
        read_only_fields = ('id', 'created_at')

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Event name is required.")
        return value.strip()

    def get_attendee_count(self, obj):
        return obj.attendance_records.filter(present=True).count()


class EventAttendanceSerializer(serializers.ModelSerializer):
    member_details = SimplifiedMemberSerializer(source='member', read_only=True)
    event_name = serializers.CharField(source='event.name', read_only=True)

    class Meta:
        model = EventAttendance
        fields = ('id', 'event', 'event_name', 'member', 'member_details', 'present', 'created_at')
        read_only_fields = ('id', 'present', 'created_at')


class MarkAttendanceSerializer(serializers.Serializer):
    '''
    Input of the attendance endpoints; ``event`` falls back to the current event.
    '''
    member = serializers.PrimaryKeyRelatedField(queryset=Member.objects.all())
    event = serializers.PrimaryKeyRelatedField(queryset=Event.objects.all(), required=False, allow_null=True)
