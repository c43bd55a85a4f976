from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase
from django_celery_beat.models import PeriodicTask
from rest_framework import status
from rest_framework.test import APITestCase

from apps.members.models import Region, Majlis
from apps.reports import sections
from apps.reports.models import DepartmentalReport, ReportData
from apps.reports.services.report_sync import (
    NormalizedReportStore,
    ReportConflict,
    ReportDataStore,
    ReportKey,
    ReportSynchronizer,
    SchemaMismatch,
    is_schema_mismatch,
)
from apps.reports.tasks import reconcile_report_data
from apps.users.models import PortalUser

REPORTS_URL = "/api/reports/other/"
BASE_COLUMNS = {
    "id", "part", "region_id", "majlis_id", "region_name", "majlis_name",
    "month", "year", "created_at", "updated_at",
}


class CodedDatabaseError(DatabaseError):

    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


class SchemaMismatchDetectionTests(TestCase):

    def test_own_mismatch(self):
        self.assertTrue(is_schema_mismatch(SchemaMismatch({"baiats"})))

    def test_undefined_column_code(self):
        self.assertTrue(is_schema_mismatch(CodedDatabaseError("boom", "42703")))

    def test_code_on_the_cause(self):
        exc = DatabaseError("wrapped")
        exc.__cause__ = CodedDatabaseError("boom", "42703")
        self.assertTrue(is_schema_mismatch(exc))

    def test_other_codes_win_over_the_message(self):
        self.assertFalse(is_schema_mismatch(CodedDatabaseError("not in the schema cache", "23505")))

    def test_message_without_code(self):
        self.assertTrue(is_schema_mismatch(DatabaseError("column \"baiats\" does not exist")))
        self.assertTrue(is_schema_mismatch(DatabaseError("Could not find the 'baiats' column in the schema cache")))
        self.assertFalse(is_schema_mismatch(DatabaseError("connection reset by peer")))


class SectionFieldTests(TestCase):

    def test_clean_details_keeps_only_section_keys(self):
        details = sections.clean_details(sections.TALIM, {
            "no_of_ansar_reading_book": "4", "no_of_baiats": 9,
        })
        self.assertEqual(details, {"no_of_ansar_reading_book": 4, "no_of_ansar_participated_in_exam": None})

    def test_yes_no_spellings(self):
        details = sections.clean_details(sections.UMUMI, {
            "monthly_report_yes_no": "true", "visited_by_nazm_e_ala_yes_no": 0,
        })
        self.assertEqual(details["monthly_report_yes_no"], "Yes")
        self.assertEqual(details["visited_by_nazm_e_ala_yes_no"], "No")
        self.assertIsNone(sections.as_yes_no("maybe"))

    def test_bad_number_names_the_key(self):
        with self.assertRaisesMessage(ValueError, "no_of_baiats"):
            sections.clean_details(sections.TABLIGH, {"no_of_baiats": "two"})

    def test_fractional_count_is_rejected(self):
        with self.assertRaises(ValueError):
            sections.parse_number("2.5", sections.INTEGER)

    def test_decimal_field(self):
        details = sections.clean_details(sections.TALIM_UL_QURAN, {
            "avg_no_of_ansar_joining_weekly_quran_class": "2.5",
        })
        self.assertEqual(details["avg_no_of_ansar_joining_weekly_quran_class"], 2.5)
        columns = sections.details_to_columns(sections.TALIM_UL_QURAN, details)
        self.assertEqual(columns["avg_ansar_joining_weekly_quran"], Decimal("2.5"))

    def test_section_view_ignores_foreign_keys(self):
        view = sections.section_view(sections.SIHAT, {"no_of_ansar_who_owns_bicycle": 3, "no_of_baiats": 1})
        self.assertEqual(view, {"no_of_ansar_regular_in_exercise": None, "no_of_ansar_who_owns_bicycle": 3})


class ReportTestMixin:

    def create_user(self, username, role=None, is_staff=False):
        return PortalUser.objects.create_user(
            username=username, password=f"{username}-pass-123", name=username.title(),
            role=role, is_staff=is_staff,
        )

    def create_locations(self):
        self.region = Region.objects.create(name="Nairobi")
        self.majlis = Majlis.objects.create(name="Kibera", region=self.region)
        self.other_majlis = Majlis.objects.create(name="Eastleigh", region=self.region)

    def tabligh_payload(self, **values):
        payload = {
            "part": "tabligh",
            "region": str(self.region.pk),
            "majlis": str(self.majlis.pk),
            "month": "March",
            "year": 2025,
        }
        payload.update(values)
        return payload


class DepartmentalReportAPITests(ReportTestMixin, APITestCase):

    def setUp(self):
        self.create_locations()
        self.client.force_authenticate(self.create_user("admin", is_staff=True))

    def test_create_writes_both_representations(self):
        response = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=2, no_of_book_stall="1"), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["details_source"], "columns")
        self.assertEqual(response.data["details"]["no_of_baiats"], 2)
        self.assertEqual(response.data["details"]["no_of_book_stall"], 1)
        self.assertIsNone(response.data["details"]["no_of_exhibitions"])
        self.assertEqual(response.data["region_name"], "Nairobi")
        self.assertEqual(response.data["majlis_name"], "Kibera")

        report = DepartmentalReport.objects.get(pk=response.data["id"])
        self.assertEqual(report.baiats, 2)
        blob = ReportData.objects.get(section_key="tabligh")
        self.assertEqual(blob.details, response.data["details"])
        self.assertEqual(blob.section_title, "Tabligh")

    def test_saving_twice_does_not_duplicate(self):
        first = self.client.post(REPORTS_URL, self.tabligh_payload(details={"no_of_baiats": 2}), format="json")
        second = self.client.post(REPORTS_URL, self.tabligh_payload(month="mar", details={"no_of_baiats": 2}), format="json")
        self.assertEqual(first.data["id"], second.data["id"])
        self.assertEqual(DepartmentalReport.objects.count(), 1)
        self.assertEqual(ReportData.objects.count(), 1)
        self.assertEqual(first.data["details"], second.data["details"])

    def test_key_fields_are_required(self):
        response = self.client.post(REPORTS_URL, {"part": "tabligh"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Missing required fields: part, month, year")

    def test_location_is_required_for_scoped_sections(self):
        response = self.client.post(REPORTS_URL, self.tabligh_payload(majlis=None), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Missing required fields: region, majlis")

    def test_digital_section_is_keyed_by_period_only(self):
        payload = {"part": "tabligh_digital", "month": "April", "year": 2025, "merch_caps": 10}
        first = self.client.post(REPORTS_URL, payload, format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(first.data["region_id"])

        payload.update(region=str(self.region.pk), majlis=str(self.majlis.pk), merch_caps=12)
        second = self.client.post(REPORTS_URL, payload, format="json")
        self.assertEqual(second.data["id"], first.data["id"])
        self.assertEqual(second.data["details"]["merch_caps"], 12)
        self.assertEqual(ReportData.objects.filter(section_key="tabligh_digital").count(), 1)

    def test_unknown_section_and_bad_values(self):
        response = self.client.post(REPORTS_URL, self.tabligh_payload(part="sports"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats="lots"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("no_of_baiats", response.data["error"])

    def test_majlis_must_belong_to_region(self):
        coast = Region.objects.create(name="Coast")
        response = self.client.post(REPORTS_URL, self.tabligh_payload(region=str(coast.pk)), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_yes_no_fields_in_columns(self):
        response = self.client.post(REPORTS_URL, self.tabligh_payload(
            part="umumi", monthly_report_yes_no="No", visited_by_nazm_e_ala_yes_no="yes", no_of_amila_meeting=1,
        ), format="json")
        self.assertEqual(response.data["details"], {
            "monthly_report_yes_no": "No",
            "no_of_amila_meeting": 1,
            "no_of_general_meeting": None,
            "visited_by_nazm_e_ala_yes_no": "Yes",
        })
        report = DepartmentalReport.objects.get(pk=response.data["id"])
        self.assertIs(report.monthly_report, False)
        self.assertIs(report.visited_nazm_e_ala, True)

    def test_schema_cache_error_falls_back_to_base_columns(self):
        error = DatabaseError("Could not find the 'baiats' column of 'other_reports' in the schema cache")
        with mock.patch.object(NormalizedReportStore, "write_full", side_effect=error):
            response = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=3, no_of_new_contacts=7), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["details_source"], "report_data")
        self.assertEqual(response.data["details"]["no_of_baiats"], 3)
        self.assertEqual(response.data["details"]["no_of_new_contacts"], 7)

        report = DepartmentalReport.objects.get(pk=response.data["id"])
        self.assertIsNone(report.baiats)
        self.assertEqual(report.month, "March")
        blob = ReportData.objects.get(section_key="tabligh")
        self.assertEqual(set(blob.details), {field.key for field in sections.fields_for("tabligh")})
        self.assertEqual(blob.details["no_of_baiats"], 3)

    def test_partially_migrated_table_round_trips_yes_no(self):
        with mock.patch.object(NormalizedReportStore, "available_columns", return_value=set(BASE_COLUMNS)):
            response = self.client.post(REPORTS_URL, self.tabligh_payload(
                part="umumi", monthly_report_yes_no="yes", visited_by_nazm_e_ala_yes_no=None,
            ), format="json")
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
            listed = self.client.get(REPORTS_URL, {"part": "umumi"})

        expected = {
            "monthly_report_yes_no": "Yes",
            "no_of_amila_meeting": None,
            "no_of_general_meeting": None,
            "visited_by_nazm_e_ala_yes_no": None,
        }
        self.assertEqual(response.data["details"], expected)
        self.assertEqual(response.data["details_source"], "report_data")
        self.assertEqual(listed.data[0]["details"], expected)
        self.assertIsNone(DepartmentalReport.objects.get().monthly_report)

    def test_both_writes_failing_returns_500(self):
        with mock.patch.object(NormalizedReportStore, "write_full", side_effect=DatabaseError("column \"baiats\" does not exist")), \
                mock.patch.object(NormalizedReportStore, "write_base", side_effect=DatabaseError("connection refused")):
            response = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=1), format="json")
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn("connection refused", response.data["error"])
        self.assertFalse(ReportData.objects.exists())

    def test_other_database_errors_are_not_downgraded(self):
        error = CodedDatabaseError("duplicate key value violates unique constraint", "23505")
        with mock.patch.object(NormalizedReportStore, "write_full", side_effect=error), \
                mock.patch.object(NormalizedReportStore, "write_base") as write_base:
            response = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=1), format="json")
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        write_base.assert_not_called()

    def test_mirror_failure_is_only_logged(self):
        with mock.patch.object(ReportDataStore, "upsert", side_effect=DatabaseError("report_data unavailable")):
            with self.assertLogs("apps.reports.services.report_sync", level="ERROR"):
                response = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=4), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["details"]["no_of_baiats"], 4)
        self.assertFalse(ReportData.objects.exists())

    def test_patch_merges_and_put_replaces(self):
        created = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=2), format="json")
        url = f"{REPORTS_URL}{created.data['id']}/"

        patched = self.client.patch(url, {"details": {"no_of_book_stall": 5}}, format="json")
        self.assertEqual(patched.status_code, status.HTTP_200_OK)
        self.assertEqual(patched.data["details"]["no_of_baiats"], 2)
        self.assertEqual(patched.data["details"]["no_of_book_stall"], 5)

        replaced = self.client.put(url, self.tabligh_payload(details={"no_of_exhibitions": 1}), format="json")
        self.assertEqual(replaced.data["details"]["no_of_exhibitions"], 1)
        self.assertIsNone(replaced.data["details"]["no_of_baiats"])
        self.assertEqual(ReportData.objects.get().details, replaced.data["details"])

    def test_moving_a_report_moves_its_blob(self):
        created = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=2), format="json")
        response = self.client.patch(
            f"{REPORTS_URL}{created.data['id']}/", {"month": "April", "majlis": str(self.other_majlis.pk)}, format="json"
        )
        self.assertEqual(response.data["report_month"], "April")
        self.assertEqual(response.data["majlis_name"], "Eastleigh")
        self.assertEqual(response.data["details"]["no_of_baiats"], 2)
        blob = ReportData.objects.get()
        self.assertEqual((blob.report_month, blob.majlis_id), ("April", self.other_majlis.pk))

    def test_moving_onto_another_reports_key_is_rejected(self):
        march = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=2), format="json")
        april = self.client.post(REPORTS_URL, self.tabligh_payload(month="April", no_of_baiats=5), format="json")

        response = self.client.patch(f"{REPORTS_URL}{april.data['id']}/", {"month": "March"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn(march.data["id"], response.data["error"])
        self.assertEqual(DepartmentalReport.objects.filter(part="tabligh", month="March").count(), 1)
        blobs = {blob.report_month: blob.details["no_of_baiats"] for blob in ReportData.objects.all()}
        self.assertEqual(blobs, {"March": 2, "April": 5})

        self.client.delete(f"{REPORTS_URL}{april.data['id']}/")
        self.assertEqual(ReportData.objects.get().report_month, "March")

    def test_saving_a_report_under_its_own_key_is_not_a_conflict(self):
        created = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=2), format="json")
        response = self.client.put(
            f"{REPORTS_URL}{created.data['id']}/", self.tabligh_payload(month="march", no_of_baiats=3), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["details"]["no_of_baiats"], 3)

    def test_synchronizer_refuses_a_key_taken_by_another_report(self):
        synchronizer = ReportSynchronizer()
        march = ReportKey.build("tabligh", "March", 2025, self.region, self.majlis)
        april = ReportKey.build("tabligh", "April", 2025, self.region, self.majlis)
        taken = synchronizer.save(march, {"no_of_baiats": 2})
        moving = synchronizer.save(april, {"no_of_baiats": 5})

        with self.assertRaises(ReportConflict) as caught:
            synchronizer.save(march, {"no_of_baiats": 5}, pk=moving, previous_key=april)
        self.assertEqual(caught.exception.existing_pk, taken)
        self.assertEqual(DepartmentalReport.objects.get(pk=moving).month, "April")

    def test_delete_removes_both_representations(self):
        created = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=2), format="json")
        response = self.client.delete(f"{REPORTS_URL}{created.data['id']}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(DepartmentalReport.objects.exists())
        self.assertFalse(ReportData.objects.exists())

    def test_list_filters(self):
        self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=1), format="json")
        self.client.post(REPORTS_URL, self.tabligh_payload(month="April", no_of_baiats=2), format="json")
        self.client.post(REPORTS_URL, self.tabligh_payload(part="talim", no_of_ansar_reading_book=3), format="json")

        self.assertEqual(len(self.client.get(REPORTS_URL).data), 3)
        self.assertEqual(len(self.client.get(REPORTS_URL, {"part": "tabligh", "month": "3"}).data), 1)
        self.assertEqual(len(self.client.get(REPORTS_URL, {"region": "nairobi", "year": "2025"}).data), 3)
        self.assertEqual(len(self.client.get(REPORTS_URL, {"majlis": str(self.other_majlis.pk)}).data), 0)
        self.assertEqual(len(self.client.get(REPORTS_URL, {"part": "all", "majlis": "all"}).data), 3)

    def test_missing_report_returns_404(self):
        response = self.client.get(f"{REPORTS_URL}00000000-0000-0000-0000-000000000000/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ReportSectionPermissionTests(ReportTestMixin, APITestCase):

    def setUp(self):
        self.create_locations()
        self.tabligh_user = self.create_user("tabligh", role="Tabligh")
        self.umumi_user = self.create_user("umumi", role="Umumi")

    def test_anonymous_requests_are_rejected(self):
        response = self.client.get(REPORTS_URL)
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_sub_user_writes_only_own_sections(self):
        self.client.force_authenticate(self.tabligh_user)
        own = self.client.post(REPORTS_URL, self.tabligh_payload(no_of_baiats=1), format="json")
        digital = self.client.post(REPORTS_URL, {"part": "tabligh_digital", "month": "May", "year": 2025}, format="json")
        other = self.client.post(REPORTS_URL, self.tabligh_payload(part="umumi"), format="json")
        self.assertEqual(own.status_code, status.HTTP_201_CREATED)
        self.assertEqual(digital.status_code, status.HTTP_201_CREATED)
        self.assertEqual(other.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(DepartmentalReport.objects.filter(part="umumi").exists())

    def test_sub_user_only_sees_own_sections(self):
        synchronizer = ReportSynchronizer()
        tabligh = synchronizer.save(ReportKey.build("tabligh", "March", 2025, self.region, self.majlis), {"no_of_baiats": 1})
        umumi = synchronizer.save(ReportKey.build("umumi", "March", 2025, self.region, self.majlis), {"no_of_amila_meeting": 1})

        self.client.force_authenticate(self.tabligh_user)
        listed = self.client.get(REPORTS_URL)
        self.assertEqual([row["id"] for row in listed.data], [str(tabligh)])
        self.assertEqual(self.client.get(f"{REPORTS_URL}{umumi}/").status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(f"{REPORTS_URL}{umumi}/").status_code, status.HTTP_404_NOT_FOUND)

    def test_sub_user_cannot_move_a_report_into_another_section(self):
        pk = ReportSynchronizer().save(ReportKey.build("tabligh", "March", 2025, self.region, self.majlis), {})
        self.client.force_authenticate(self.tabligh_user)
        response = self.client.patch(f"{REPORTS_URL}{pk}/", {"part": "umumi"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(DepartmentalReport.objects.get(pk=pk).part, "tabligh")


class ReportDataAPITests(ReportTestMixin, APITestCase):

    def setUp(self):
        self.create_locations()
        self.client.force_authenticate(self.create_user("umumi", role="Umumi"))

    def payload(self, **details):
        return {
            "region_id": str(self.region.pk),
            "majlis_id": str(self.majlis.pk),
            "report_month": "6",
            "report_year": 2025,
            "section_key": "umumi",
            "details": details,
        }

    def test_post_upserts_by_natural_key(self):
        first = self.client.post("/api/reports/data/", self.payload(no_of_amila_meeting=1), format="json")
        second = self.client.post("/api/reports/data/", self.payload(no_of_amila_meeting=2), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.data["id"], first.data["id"])
        self.assertEqual(second.data["report_month"], "June")
        self.assertEqual(ReportData.objects.get().details["no_of_amila_meeting"], 2)

    def test_key_fields_are_required(self):
        payload = self.payload()
        del payload["section_key"]
        response = self.client.post("/api/reports/data/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_sections_are_forbidden(self):
        payload = self.payload()
        payload["section_key"] = "talim"
        response = self.client.post("/api/reports/data/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_region_and_majlis_are_required_for_scoped_sections(self):
        payload = self.payload()
        del payload["majlis_id"]
        response = self.client.post("/api/reports/data/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(ReportData.objects.exists())

    def test_majlis_must_belong_to_region(self):
        coast = Region.objects.create(name="Coast")
        payload = self.payload()
        payload["region_id"] = str(coast.pk)
        response = self.client.post("/api/reports/data/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(ReportData.objects.exists())

    def test_tabligh_digital_blob_is_national(self):
        self.client.force_authenticate(self.create_user("tabligh", role="Tabligh"))
        self.client.post(REPORTS_URL, {"part": "tabligh_digital", "month": "May", "year": 2025}, format="json")

        payload = self.payload()
        payload.update({"section_key": "tabligh_digital", "report_month": "May", "details": {}})
        response = self.client.post("/api/reports/data/", payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data["region_id"])
        self.assertIsNone(response.data["majlis_id"])
        self.assertEqual(ReportData.objects.filter(section_key="tabligh_digital").count(), 1)

    def test_filters(self):
        self.client.post("/api/reports/data/", self.payload(no_of_amila_meeting=1), format="json")
        self.assertEqual(len(self.client.get("/api/reports/data/", {"region": "Nairobi", "month": "june"}).data), 1)
        self.assertEqual(len(self.client.get("/api/reports/data/", {"year": "2024"}).data), 0)


class ReconcileTests(ReportTestMixin, TestCase):

    def setUp(self):
        self.create_locations()
        self.key = ReportKey.build("tabligh", "March", 2025, self.region, self.majlis)

    def test_empty_columns_are_backfilled_from_blob(self):
        report = DepartmentalReport.objects.create(**NormalizedReportStore().base_values(self.key))
        ReportDataStore().upsert(self.key, sections.clean_details("tabligh", {"no_of_baiats": 5}))

        counts = ReportSynchronizer().reconcile()

        self.assertEqual(counts, {"columns_backfilled": 1, "blobs_restored": 0})
        report.refresh_from_db()
        self.assertEqual(report.baiats, 5)

    def test_missing_blob_is_restored(self):
        DepartmentalReport.objects.create(**NormalizedReportStore().base_values(self.key), baiats=6)

        counts = ReportSynchronizer().reconcile()

        self.assertEqual(counts, {"columns_backfilled": 0, "blobs_restored": 1})
        self.assertEqual(ReportData.objects.get().details["no_of_baiats"], 6)

    def test_consistent_reports_are_left_alone(self):
        ReportSynchronizer().save(self.key, {"no_of_baiats": 1})
        self.assertEqual(ReportSynchronizer().reconcile(), {"columns_backfilled": 0, "blobs_restored": 0})

    def test_skipped_while_typed_columns_are_missing(self):
        DepartmentalReport.objects.create(**NormalizedReportStore().base_values(self.key), baiats=6)
        with mock.patch.object(NormalizedReportStore, "available_columns", return_value=set(BASE_COLUMNS)):
            counts = ReportSynchronizer().reconcile()
        self.assertEqual(counts, {"columns_backfilled": 0, "blobs_restored": 0})
        self.assertFalse(ReportData.objects.exists())

    def test_task_runs_reconciliation(self):
        DepartmentalReport.objects.create(**NormalizedReportStore().base_values(self.key), baiats=6)
        self.assertEqual(reconcile_report_data(), {"columns_backfilled": 0, "blobs_restored": 1})

    def test_management_commands(self):
        out = StringIO()
        call_command("reconcile_reports", stdout=out)
        self.assertIn("Reconciliation complete", out.getvalue())

        call_command("setup_report_tasks", hours=3, stdout=StringIO())
        call_command("setup_report_tasks", hours=3, stdout=StringIO())
        task = PeriodicTask.objects.get(task="reports.reconcile_report_data")
        self.assertEqual(task.interval.every, 3)


class DepartmentalReportAdminTests(ReportTestMixin, TestCase):

    def setUp(self):
        self.create_locations()
        self.client.force_login(PortalUser.objects.create_superuser(username="root", password="root-pass-123"))
        self.pk = ReportSynchronizer().save(
            ReportKey.build("tabligh", "March", 2025, self.region, self.majlis), {"no_of_baiats": 2}
        )

    def test_reports_can_be_viewed(self):
        self.assertEqual(self.client.get("/admin/reports/departmentalreport/").status_code, status.HTTP_200_OK)
        self.assertEqual(
            self.client.get(f"/admin/reports/departmentalreport/{self.pk}/change/").status_code, status.HTTP_200_OK
        )

    def test_reports_cannot_be_written_outside_the_synchronizer(self):
        self.assertEqual(self.client.get("/admin/reports/departmentalreport/add/").status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(f"/admin/reports/departmentalreport/{self.pk}/change/", {"month": "April"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(DepartmentalReport.objects.get(pk=self.pk).month, "March")
        self.assertEqual(ReportData.objects.get().report_month, "March")
