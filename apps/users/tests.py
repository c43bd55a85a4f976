from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import PortalUser
from core.authentication import ACCESS_COOKIE, REFRESH_COOKIE


class SimpleTest(TestCase):

    def test_documentation_status_code(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)

    def test_health_check(self):
        response = self.client.get('/api/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


class PortalUserModelTests(TestCase):

    def test_role_unlocks_departments_and_dashboard(self):
        user = PortalUser.objects.create_user(username="tabligh", password="tabligh-pass-1", name="Tabligh", role="Tabligh")
        self.assertEqual(user.departments, ("tabligh", "tabligh_digital"))
        self.assertEqual(user.dashboard, "/tabligh-dashboard")

    def test_staff_dashboard(self):
        admin = PortalUser.objects.create_superuser(username="root", password="root-pass-123")
        self.assertTrue(admin.is_staff)
        self.assertEqual(admin.departments, ())
        self.assertEqual(admin.dashboard, "/dashboard")

    def test_password_is_hashed(self):
        user = PortalUser.objects.create_user(username="maal", password="maal-pass-123", name="Maal", role="Maal")
        self.assertNotEqual(user.password, "maal-pass-123")
        self.assertTrue(user.check_password("maal-pass-123"))


class AuthenticationTests(APITestCase):

    def setUp(self):
        self.user = PortalUser.objects.create_user(
            username="tajneed", password="tajneed-pass-1", name="Tajneed Secretary", role="Tajneed"
        )

    def login(self, username="tajneed", password="tajneed-pass-1"):
        return self.client.post('/api/auth/login/', {"username": username, "password": password}, format="json")

    def test_login_sets_cookies_and_returns_role(self):
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(ACCESS_COOKIE, response.cookies)
        self.assertIn(REFRESH_COOKIE, response.cookies)
        self.assertTrue(response.cookies[ACCESS_COOKIE]["httponly"])
        self.assertNotIn("access", response.data)
        self.assertEqual(response.data["user"]["role"], "Tajneed")
        self.assertEqual(response.data["user"]["departments"], ["tajneed"])
        self.assertEqual(response.data["user"]["dashboard"], "/tajneed-dashboard")

    def test_cookie_authenticates_later_requests(self):
        self.login()
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["username"], "tajneed")

    def test_invalid_credentials(self):
        response = self.login(password="wrong-password")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "Invalid credentials")

    def test_missing_credentials(self):
        response = self.client.post('/api/auth/login/', {"username": "tajneed"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_without_cookie(self):
        response = self.client.post('/api/auth/refresh/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_with_cookie(self):
        self.login()
        response = self.client.post('/api/auth/refresh/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(ACCESS_COOKIE, response.cookies)

    def test_logout_expires_cookies(self):
        self.login()
        response = self.client.post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies[ACCESS_COOKIE].value, "")
        self.assertEqual(response.cookies[REFRESH_COOKIE].value, "")

    def test_invalid_access_cookie_is_rejected(self):
        self.client.cookies[ACCESS_COOKIE] = "not-a-token"
        response = self.client.get('/api/auth/me/')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))


class PortalUserAPITests(APITestCase):

    def setUp(self):
        self.admin = PortalUser.objects.create_user(
            username="admin", password="admin-pass-123", name="Admin", is_staff=True
        )
        self.client.force_authenticate(self.admin)

    def test_create_sub_user(self):
        response = self.client.post('/api/users/manage/', {
            "name": "Maal Secretary", "username": "maal", "password": "maal-pass-123", "role": "Maal",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn("password", response.data)
        self.assertEqual(response.data["departments"], ["maal"])
        self.assertTrue(PortalUser.objects.get(username="maal").check_password("maal-pass-123"))

    def test_username_is_unique_ignoring_case(self):
        response = self.client.post('/api/users/manage/', {
            "name": "Other", "username": "ADMIN", "password": "other-pass-123", "role": "Maal",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Username already exists", response.data["error"])

    def test_sub_user_needs_role_and_password(self):
        no_role = self.client.post('/api/users/manage/', {
            "name": "No Role", "username": "norole", "password": "norole-pass-1",
        }, format="json")
        no_password = self.client.post('/api/users/manage/', {
            "name": "No Password", "username": "nopass", "role": "Maal",
        }, format="json")
        self.assertEqual(no_role.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(no_password.status_code, status.HTTP_400_BAD_REQUEST)

    def test_password_change(self):
        user = PortalUser.objects.create_user(username="isaar", password="isaar-pass-123", name="Isaar", role="Isaar")
        response = self.client.patch(f'/api/users/manage/{user.pk}/', {"password": "new-isaar-pass"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password("new-isaar-pass"))

    def test_admin_cannot_delete_self(self):
        response = self.client.delete(f'/api/users/manage/{self.admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(PortalUser.objects.filter(pk=self.admin.pk).exists())

    def test_sub_users_cannot_manage_users(self):
        user = PortalUser.objects.create_user(username="talim", password="talim-pass-123", name="Talim", role="Talim")
        self.client.force_authenticate(user)
        self.assertEqual(self.client.get('/api/users/manage/').status_code, status.HTTP_403_FORBIDDEN)

    def test_roles(self):
        response = self.client.get('/api/users/roles/')
        roles = {role["role"]: role for role in response.data["roles"]}
        self.assertEqual(len(roles), len(PortalUser.RoleType.choices))
        self.assertEqual(roles["Tabligh"]["departments"], ["tabligh", "tabligh_digital"])
        self.assertEqual(roles["Maal"]["dashboard"], "/maal-dashboard")
