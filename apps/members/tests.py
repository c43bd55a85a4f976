import datetime
from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.members.models import Member, Region, Majlis, Contribution
from apps.members.services import attributes
from apps.members.services.registration import (
    RegistrationConflict,
    extract_sequence,
    natural_sort_key,
    next_registration_number,
    register_member,
    sort_naturally,
)
from apps.users.models import PortalUser


FIXED_TODAY = datetime.date(2025, 3, 10)


class RegistrationNumberTests(TestCase):

    def test_first_number_when_nothing_issued(self):
        self.assertEqual(next_registration_number([]), "MA001")

    def test_next_number_is_one_past_the_largest_suffix(self):
        self.assertEqual(next_registration_number(["MA001", "MA010", "MA002"]), "MA011")

    def test_identifiers_without_digits_are_skipped(self):
        self.assertEqual(next_registration_number(["ADMIN", None, "", "MA004"]), "MA005")

    def test_width_is_a_minimum_not_a_maximum(self):
        self.assertEqual(next_registration_number(["MA999"]), "MA1000")

    def test_explicit_prefix_and_width(self):
        self.assertEqual(next_registration_number(["X7"], prefix="KE", width=5), "KE00008")

    def test_extract_sequence(self):
        self.assertEqual(extract_sequence("MA042"), 42)
        self.assertIsNone(extract_sequence("MA"))
        self.assertIsNone(extract_sequence(None))


class NaturalSortTests(TestCase):

    def test_numeric_suffixes_sort_by_value(self):
        self.assertEqual(sort_naturally(["MA2", "MA10", "MA1"]), ["MA1", "MA2", "MA10"])

    def test_thousand_sorts_after_nine_hundred_ninety_nine(self):
        self.assertEqual(sort_naturally(["MA1000", "MA999"]), ["MA999", "MA1000"])

    def test_missing_values_go_last(self):
        self.assertEqual(sort_naturally([None, "MA3", "MA1"]), ["MA1", "MA3", None])

    def test_identifier_without_suffix_follows_its_prefix(self):
        self.assertLess(natural_sort_key("MA5"), natural_sort_key("MA"))

    def test_sort_with_key(self):
        rows = [{"n": "MA10"}, {"n": "MA9"}]
        self.assertEqual([row["n"] for row in sort_naturally(rows, key=lambda row: row["n"])], ["MA9", "MA10"])


class DerivedAttributeTests(TestCase):

    def test_age_before_birthday(self):
        self.assertEqual(attributes.calculate_age(datetime.date(2000, 6, 15), datetime.date(2025, 6, 14)), 24)

    def test_age_on_birthday(self):
        self.assertEqual(attributes.calculate_age(datetime.date(2000, 6, 15), datetime.date(2025, 6, 15)), 25)

    def test_age_without_birth_date(self):
        self.assertIsNone(attributes.calculate_age(None))

    def test_category_thresholds(self):
        self.assertEqual(attributes.category_for_age(56), attributes.SAF_AWWAL)
        self.assertEqual(attributes.category_for_age(55), attributes.SAF_DOM)
        self.assertEqual(attributes.category_for_age(45), attributes.SAF_DOM)
        self.assertEqual(attributes.category_for_age(40), attributes.SAF_DOM)
        self.assertEqual(attributes.category_for_age(39), attributes.GENERAL)
        self.assertEqual(attributes.category_for_age(30), attributes.GENERAL)

    def test_stored_category_is_only_a_fallback(self):
        self.assertEqual(attributes.derive_category(None, attributes.SAF_DOM), attributes.SAF_DOM)
        self.assertEqual(attributes.derive_category(None, None), "")
        self.assertEqual(
            attributes.derive_category(datetime.date(1990, 1, 1), attributes.SAF_AWWAL, datetime.date(2025, 1, 1)),
            attributes.GENERAL,
        )

    def test_nau_mobaeen(self):
        as_of = datetime.date(2025, 1, 1)
        self.assertTrue(attributes.is_nau_mobaeen("By Baiat", datetime.date(2024, 1, 1), as_of))
        self.assertFalse(attributes.is_nau_mobaeen("By Baiat", datetime.date(2020, 1, 1), as_of))
        self.assertIsNone(attributes.is_nau_mobaeen("By Birth", datetime.date(2024, 1, 1), as_of))

    def test_category_bounds_match_category_for_age(self):
        after, on_or_before = attributes.category_birth_date_bounds(attributes.SAF_DOM, FIXED_TODAY)
        self.assertEqual(attributes.category_for_age(attributes.calculate_age(on_or_before, FIXED_TODAY)), attributes.SAF_DOM)
        self.assertEqual(
            attributes.category_for_age(attributes.calculate_age(after + datetime.timedelta(days=1), FIXED_TODAY)),
            attributes.SAF_DOM,
        )
        self.assertEqual(attributes.category_for_age(attributes.calculate_age(after, FIXED_TODAY)), attributes.SAF_AWWAL)


class RegisterMemberTests(TestCase):

    def test_numbers_follow_creation_order(self):
        numbers = [
            register_member(full_name=name, date_of_birth=datetime.date(1970, 1, 1)).registration_number
            for name in ("Ahmad", "Bashir", "Karim")
        ]
        self.assertEqual(numbers, ["MA001", "MA002", "MA003"])

    def test_conflict_is_retried_with_a_fresh_number(self):
        register_member(full_name="Ahmad", date_of_birth=datetime.date(1970, 1, 1))
        stale = iter(["MA001"])

        def allocate(existing):
            return next(stale, None) or next_registration_number(existing)

        with mock.patch("apps.members.services.registration.next_registration_number", side_effect=allocate):
            member = register_member(full_name="Bashir", date_of_birth=datetime.date(1970, 1, 1))
        self.assertEqual(member.registration_number, "MA002")

    @override_settings(MEMBER_REGISTRATION_MAX_ATTEMPTS=2)
    def test_gives_up_after_max_attempts(self):
        register_member(full_name="Ahmad", date_of_birth=datetime.date(1970, 1, 1))
        with mock.patch("apps.members.services.registration.next_registration_number", return_value="MA001"):
            with self.assertRaises(RegistrationConflict):
                register_member(full_name="Bashir", date_of_birth=datetime.date(1970, 1, 1))
        self.assertEqual(Member.objects.count(), 1)


class MemberAPITests(APITestCase):

    def setUp(self):
        self.admin = PortalUser.objects.create_user(
            username="admin", password="admin-pass-123", name="Admin", is_staff=True
        )
        self.client.force_authenticate(self.admin)
        self.nairobi = Region.objects.create(name="Nairobi")
        self.coast = Region.objects.create(name="Coast")
        self.kibera = Majlis.objects.create(name="Kibera", region=self.nairobi)
        self.mombasa = Majlis.objects.create(name="Mombasa", region=self.coast)

    def register(self, **payload):
        payload.setdefault("full_name", "Ahmad Ali")
        payload.setdefault("date_of_birth", "1970-05-01")
        return self.client.post("/api/members/manage/", payload, format="json")

    def test_registration_allocates_sequential_numbers(self):
        numbers = [self.register(full_name=name).data["registration_number"] for name in ("A", "B", "C")]
        self.assertEqual(numbers, ["MA001", "MA002", "MA003"])

    def test_registration_number_sent_by_client_is_ignored(self):
        response = self.register(registration_number="MA999")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["registration_number"], "MA001")

    def test_birth_date_is_required(self):
        response = self.client.post("/api/members/manage/", {"full_name": "No Date"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Date of birth is required", response.data["error"])

    def test_non_positive_age_is_rejected(self):
        future = (attributes.today() + datetime.timedelta(days=30)).isoformat()
        response = self.register(date_of_birth=future)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("non-positive age", response.data["error"])
        self.assertEqual(Member.objects.count(), 0)

    def test_majlis_outside_region_is_rejected(self):
        response = self.register(region=str(self.nairobi.pk), majlis=str(self.mombasa.pk))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_region_is_taken_from_majlis(self):
        response = self.register(majlis=str(self.kibera.pk))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        member = Member.objects.get(pk=response.data["id"])
        self.assertEqual(member.region, self.nairobi)
        self.assertEqual(member.region_name, "Nairobi")
        self.assertEqual(member.majlis_name, "Kibera")

    def test_conflict_returns_409(self):
        self.register(full_name="First")
        with mock.patch("apps.members.services.registration.next_registration_number", return_value="MA001"):
            response = self.register(full_name="Second")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("error", response.data)

    def test_list_is_naturally_ordered_across_pages(self):
        for number in ("MA10", "MA2", "MA1000", "MA999", "MA1"):
            Member.objects.create(registration_number=number, full_name=number, date_of_birth=datetime.date(1970, 1, 1))
        with override_settings(RECORD_PAGE_SIZE=2):
            response = self.client.get("/api/members/manage/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [row["registration_number"] for row in response.data],
            ["MA1", "MA2", "MA10", "MA999", "MA1000"],
        )

    def test_region_filter_matches_id_or_name(self):
        linked = register_member(full_name="Linked", date_of_birth=datetime.date(1970, 1, 1), region=self.nairobi)
        legacy = register_member(full_name="Legacy", date_of_birth=datetime.date(1970, 1, 1), region_name="nairobi")
        register_member(full_name="Elsewhere", date_of_birth=datetime.date(1970, 1, 1), region=self.coast)
        expected = {str(linked.pk), str(legacy.pk)}

        by_id = self.client.get("/api/members/manage/", {"region": str(self.nairobi.pk)})
        by_name = self.client.get("/api/members/manage/", {"region": "NAIROBI"})
        self.assertEqual({row["id"] for row in by_id.data}, expected)
        self.assertEqual({row["id"] for row in by_name.data}, expected)

    def test_all_filter_value_passes_through(self):
        register_member(full_name="One", date_of_birth=datetime.date(1970, 1, 1), region=self.nairobi)
        register_member(full_name="Two", date_of_birth=datetime.date(1970, 1, 1), region=self.coast)
        response = self.client.get("/api/members/manage/", {"region": "all", "majlis": "all"})
        self.assertEqual(len(response.data), 2)

    def test_majlis_filter_by_name(self):
        member = register_member(full_name="One", date_of_birth=datetime.date(1970, 1, 1), majlis=self.kibera)
        register_member(full_name="Two", date_of_birth=datetime.date(1970, 1, 1), majlis=self.mombasa)
        response = self.client.get("/api/members/manage/", {"majlis": "kibera"})
        self.assertEqual([row["id"] for row in response.data], [str(member.pk)])

    def test_category_is_reclassified_as_time_passes(self):
        # 55 on FIXED_TODAY, 56 a year later
        with mock.patch("apps.members.services.attributes.today", return_value=FIXED_TODAY):
            response = self.register(full_name="Turning", date_of_birth="1969-03-11", category="Saf Dom")
            self.assertEqual(response.data["category"], attributes.SAF_DOM)
            awwal = self.client.get("/api/members/manage/", {"category": "Saf Awwal"})
            self.assertEqual(awwal.data, [])

        member = Member.objects.get(pk=response.data["id"])
        updated_at = member.updated_at

        next_year = FIXED_TODAY.replace(year=FIXED_TODAY.year + 1)
        with mock.patch("apps.members.services.attributes.today", return_value=next_year):
            awwal = self.client.get("/api/members/manage/", {"category": "saf awwal"})
            dom = self.client.get("/api/members/manage/", {"category": "Saf Dom"})

        self.assertEqual([row["id"] for row in awwal.data], [str(member.pk)])
        self.assertEqual(awwal.data[0]["category"], attributes.SAF_AWWAL)
        self.assertEqual(awwal.data[0]["age"], 56)
        self.assertEqual(dom.data, [])

        member.refresh_from_db()
        self.assertEqual(member.category, attributes.SAF_DOM)
        self.assertEqual(member.updated_at, updated_at)

    def test_unknown_category_matches_nothing(self):
        self.register()
        response = self.client.get("/api/members/manage/", {"category": "Elders"})
        self.assertEqual(response.data, [])

    def test_members_without_birth_date_filter_by_stored_category(self):
        member = Member.objects.create(registration_number="MA050", full_name="Old Record", category="Saf Awwal")
        response = self.client.get("/api/members/manage/", {"category": "Saf Awwal"})
        self.assertEqual([row["id"] for row in response.data], [str(member.pk)])

    def test_statistics(self):
        with mock.patch("apps.members.services.attributes.today", return_value=FIXED_TODAY):
            self.register(date_of_birth="1950-01-01", region=str(self.nairobi.pk))
            self.register(date_of_birth="1980-01-01", region=str(self.coast.pk))
            self.register(date_of_birth="1990-01-01", baiat_type="By Baiat", baiat_date="2024-06-01")
            response = self.client.get("/api/members/manage/statistics/")
        self.assertEqual(response.data["total"], 3)
        self.assertEqual(response.data["by_category"][attributes.SAF_AWWAL], 1)
        self.assertEqual(response.data["by_category"][attributes.SAF_DOM], 1)
        self.assertEqual(response.data["by_category"][attributes.GENERAL], 1)
        self.assertEqual(response.data["by_region"], {"Coast": 1, "Nairobi": 1, "Unassigned": 1})
        self.assertEqual(response.data["nau_mobaeen"], 1)

    def test_missing_member_returns_404(self):
        response = self.client.get("/api/members/manage/00000000-0000-0000-0000-000000000000/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class MemberPermissionTests(APITestCase):

    def setUp(self):
        self.maal = PortalUser.objects.create_user(
            username="maal", password="maal-pass-123", name="Maal Secretary", role="Maal"
        )
        self.tajneed = PortalUser.objects.create_user(
            username="tajneed", password="tajneed-pass-123", name="Tajneed Secretary", role="Tajneed"
        )
        self.member = register_member(full_name="Ahmad", date_of_birth=datetime.date(1970, 1, 1))

    def test_anonymous_requests_are_rejected(self):
        response = self.client.get("/api/members/manage/")
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_other_departments_may_read(self):
        self.client.force_authenticate(self.maal)
        self.assertEqual(self.client.get("/api/members/manage/").status_code, status.HTTP_200_OK)

    def test_other_departments_may_not_write(self):
        self.client.force_authenticate(self.maal)
        response = self.client.post(
            "/api/members/manage/", {"full_name": "X", "date_of_birth": "1970-01-01"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_own_department_may_write(self):
        self.client.force_authenticate(self.tajneed)
        response = self.client.patch(
            f"/api/members/manage/{self.member.pk}/", {"mobile_number": "0700000000"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["mobile_number"], "0700000000")


class RegionAPITests(APITestCase):

    def setUp(self):
        self.admin = PortalUser.objects.create_user(
            username="admin", password="admin-pass-123", name="Admin", is_staff=True
        )
        self.client.force_authenticate(self.admin)

    def test_region_code_is_generated(self):
        first = self.client.post("/api/regions/manage/", {"name": "Nairobi"}, format="json")
        second = self.client.post("/api/regions/manage/", {"name": "Nairobi West"}, format="json")
        self.assertEqual(first.data["code"], "NAI")
        self.assertEqual(second.data["code"], "NAI1")

    def test_region_lists_its_majlis(self):
        region = Region.objects.create(name="Coast")
        Majlis.objects.create(name="Mombasa", region=region)
        response = self.client.get(f"/api/regions/manage/{region.pk}/")
        self.assertEqual(response.data["majlis_count"], 1)
        self.assertEqual(response.data["majlis"][0]["name"], "Mombasa")

    def test_majlis_filter_by_region_name(self):
        coast = Region.objects.create(name="Coast")
        Majlis.objects.create(name="Mombasa", region=coast)
        Majlis.objects.create(name="Kibera", region=Region.objects.create(name="Nairobi"))
        response = self.client.get("/api/regions/majlis/", {"region": "coast"})
        self.assertEqual([row["name"] for row in response.data], ["Mombasa"])

    def test_region_with_majlis_cannot_be_deleted(self):
        region = Region.objects.create(name="Coast")
        Majlis.objects.create(name="Mombasa", region=region)
        response = self.client.delete(f"/api/regions/manage/{region.pk}/")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Region.objects.filter(pk=region.pk).exists())

    def test_sub_users_cannot_change_regions(self):
        user = PortalUser.objects.create_user(
            username="sub", password="sub-pass-1234", name="Sub", role="Tajneed"
        )
        self.client.force_authenticate(user)
        self.assertEqual(self.client.get("/api/regions/manage/").status_code, status.HTTP_200_OK)
        response = self.client.post("/api/regions/manage/", {"name": "Western"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class RecordAPITests(APITestCase):

    def setUp(self):
        self.user = PortalUser.objects.create_user(
            username="maal", password="maal-pass-123", name="Maal Secretary", role="Maal"
        )
        self.client.force_authenticate(self.user)
        self.region = Region.objects.create(name="Nairobi")
        self.member = register_member(full_name="Ahmad", date_of_birth=datetime.date(1970, 1, 1), region=self.region)

    def test_contribution_month_is_normalized(self):
        response = self.client.post("/api/members/contributions/", {
            "member": str(self.member.pk), "month": "jan", "year": 2025, "chanda_majlis": "100.00",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["month"], "January")
        self.assertEqual(Decimal(response.data["total"]), Decimal("100.00"))

    def test_invalid_month_is_rejected(self):
        response = self.client.post("/api/members/contributions/", {
            "member": str(self.member.pk), "month": "13", "year": 2025,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_contribution_filters_and_summary(self):
        Contribution.objects.create(member=self.member, month="January", year=2025, chanda_majlis=Decimal("100"))
        Contribution.objects.create(member=self.member, month="February", year=2025, tehrik_e_jadid=Decimal("50"))
        Contribution.objects.create(member=self.member, month="January", year=2024, chanda_majlis=Decimal("10"))

        january = self.client.get("/api/members/contributions/", {"month": "1", "year": "2025"})
        self.assertEqual(len(january.data), 1)

        by_region = self.client.get("/api/members/contributions/", {"region": "Nairobi"})
        self.assertEqual(len(by_region.data), 3)

        summary = self.client.get("/api/members/contributions/summary/", {"year": "2025"})
        self.assertEqual(summary.data["count"], 2)
        self.assertEqual(Decimal(summary.data["grand_total"]), Decimal("150"))
        self.assertEqual(Decimal(summary.data["totals"]["waqf_e_jadid"]), Decimal("0"))

    def test_tarbiyyat_write_needs_tarbiyyat_role(self):
        response = self.client.post("/api/members/tarbiyyat/", {
            "member": str(self.member.pk), "report_month": "March", "report_year": 2025,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_tarbiyyat_prayer_count_is_bounded(self):
        self.client.force_authenticate(PortalUser.objects.create_user(
            username="tarbiyyat", password="tarbiyyat-pass-1", name="Tarbiyyat", role="Tarbiyyat"
        ))
        response = self.client.post("/api/members/tarbiyyat/", {
            "member": str(self.member.pk), "report_month": "mar", "report_year": 2025, "avg_prayers_per_day": 6,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post("/api/members/tarbiyyat/", {
            "member": str(self.member.pk), "report_month": "mar", "report_year": 2025, "avg_prayers_per_day": 5,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["report_month"], "March")
