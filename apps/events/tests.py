import datetime

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from apps.events.models import Event, EventAttendance
from apps.events.services import attendance_service
from apps.members.services.registration import register_member
from apps.users.models import PortalUser


def create_member(name="Ahmad"):
    return register_member(full_name=name, date_of_birth=datetime.date(1970, 1, 1))


class AttendanceServiceTests(TestCase):

    def setUp(self):
        self.member = create_member()

    def test_marking_without_an_active_event_creates_one(self):
        Event.objects.create(name="Last Year", start_date=datetime.date(2024, 8, 1), is_active=False)

        attendance, created = attendance_service.mark_present(self.member)

        self.assertTrue(created)
        self.assertEqual(attendance.event.name, attendance_service.DEFAULT_EVENT_NAME)
        self.assertEqual(attendance.event.location, attendance_service.DEFAULT_EVENT_LOCATION)
        self.assertTrue(attendance.event.is_active)
        self.assertEqual(Event.objects.filter(is_active=True).count(), 1)

    def test_marking_twice_keeps_one_row(self):
        event = Event.objects.create(name="Ijtema", start_date=datetime.date(2025, 9, 1), total_days=3)
        attendance_service.mark_present(self.member)
        attendance, created = attendance_service.mark_present(self.member)
        self.assertFalse(created)
        self.assertEqual(attendance.event, event)
        self.assertEqual(EventAttendance.objects.count(), 1)

    def test_remove_without_event_is_a_no_op(self):
        self.assertEqual(attendance_service.remove_attendance(self.member), 0)

    def test_current_event_ignores_inactive_events(self):
        active = Event.objects.create(name="Ijtema", start_date=datetime.date(2025, 9, 1))
        Event.objects.create(name="Closed", start_date=datetime.date(2025, 10, 1), is_active=False)
        self.assertEqual(attendance_service.current_event(), active)


class EventAPITests(APITestCase):

    def setUp(self):
        self.user = PortalUser.objects.create_user(
            username="ijtemas", password="ijtemas-pass-1", name="Ijtemas Secretary", role="Ijtemas"
        )
        self.client.force_authenticate(self.user)
        self.member = create_member()

    def test_create_event_and_read_active(self):
        response = self.client.post("/api/events/manage/", {
            "name": " National Ijtema ", "location": "Nairobi", "start_date": "2025-09-12", "total_days": 3,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["name"], "National Ijtema")

        active = self.client.get("/api/events/manage/active/")
        self.assertEqual(active.data["event"]["id"], response.data["id"])

    def test_active_is_null_without_events(self):
        self.assertIsNone(self.client.get("/api/events/manage/active/").data["event"])

    def test_total_days_must_be_positive(self):
        response = self.client.post("/api/events/manage/", {
            "name": "Ijtema", "start_date": "2025-09-12", "total_days": 0,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mark_list_and_remove_attendance(self):
        first = self.client.post("/api/events/attendance/", {"member": str(self.member.pk)}, format="json")
        again = self.client.post("/api/events/attendance/", {"member": str(self.member.pk)}, format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["attendance"]["member_details"]["registration_number"], "MA001")

        listed = self.client.get("/api/events/attendance/")
        self.assertEqual(listed.data["event"]["name"], attendance_service.DEFAULT_EVENT_NAME)
        self.assertEqual(listed.data["event"]["attendee_count"], 1)
        self.assertEqual(len(listed.data["attendees"]), 1)

        removed = self.client.delete(f"/api/events/attendance/remove/?member={self.member.pk}")
        self.assertEqual(removed.data, {"success": True, "removed": 1})
        self.assertFalse(EventAttendance.objects.exists())

    def test_attendance_for_a_given_event(self):
        closed = Event.objects.create(name="Regional", start_date=datetime.date(2025, 5, 1), is_active=False)
        self.client.post("/api/events/attendance/", {
            "member": str(self.member.pk), "event": str(closed.pk),
        }, format="json")

        listed = self.client.get("/api/events/attendance/", {"event": str(closed.pk)})
        self.assertEqual(listed.data["event"]["name"], "Regional")
        self.assertEqual(len(listed.data["attendees"]), 1)

    def test_list_without_events(self):
        response = self.client.get("/api/events/attendance/")
        self.assertEqual(response.data, {"event": None, "attendees": []})

    def test_unknown_member_is_rejected(self):
        response = self.client.post("/api/events/attendance/", {
            "member": "00000000-0000-0000-0000-000000000000",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_departments_cannot_mark_attendance(self):
        self.client.force_authenticate(PortalUser.objects.create_user(
            username="maal", password="maal-pass-123", name="Maal", role="Maal"
        ))
        response = self.client.post("/api/events/attendance/", {"member": str(self.member.pk)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get("/api/events/attendance/").status_code, status.HTTP_200_OK)
