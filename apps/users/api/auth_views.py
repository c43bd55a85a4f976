"""
Secure Authentication Views with HTTPOnly Cookies

Sub-users and administrators sign in here. JWTs are set in HTTPOnly cookies
rather than returned to the client, and the role that decides what a user may
reach is read from the user row on every request (``core.permissions``), not
from anything the client stores.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from django.contrib.auth import authenticate
from django.middleware.csrf import get_token
from django.conf import settings
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator

from .serializers import SimplifiedPortalUserSerializer
from core.authentication import ACCESS_COOKIE, REFRESH_COOKIE

logger = logging.getLogger(__name__)

CSRF_COOKIE = 'csrftoken'
CSRF_COOKIE_MAX_AGE = 31449600  # 1 year


def cookie_options(httponly=True):
    return {
        'httponly': httponly,
        'secure': not settings.DEBUG,  # HTTPS only in production
        'samesite': 'None' if not settings.DEBUG else 'Lax',  # 'None' required for cross-origin with credentials
        'path': '/',
    }


def set_access_cookie(response, token):
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=token,
        max_age=int(settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].total_seconds()),
        **cookie_options(),
    )


def set_refresh_cookie(response, token):
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=token,
        max_age=int(settings.SIMPLE_JWT['REFRESH_TOKEN_LIFETIME'].total_seconds()),
        **cookie_options(),
    )


def set_csrf_cookie(request, response):
    response.set_cookie(
        key=CSRF_COOKIE,
        value=get_token(request),
        max_age=CSRF_COOKIE_MAX_AGE,
        **cookie_options(httponly=False),  # Must be readable by JavaScript
    )


@method_decorator(csrf_exempt, name='dispatch')
class SecureTokenObtainView(APIView):
    """
    Login endpoint that sets JWT tokens in HTTPOnly cookies instead of
    returning them in the response body. The body carries the user with the
    departments and dashboard their role unlocks.
    CSRF exempt because no session exists yet at login time.
    """
    permission_classes = [AllowAny]

    def post(self, request):
        username = request.data.get('username')
        password = request.data.get('password')

        if not username or not password:
            return Response({
                'error': 'Username and password are required'
            }, status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(request, username=username.strip(), password=password)

        if user is None:
            logger.info(f"Failed login for {username}")
            return Response({
                'error': 'Invalid credentials'
            }, status=status.HTTP_401_UNAUTHORIZED)

        if not user.is_active:
            return Response({
                'error': 'Account is disabled'
            }, status=status.HTTP_401_UNAUTHORIZED)

        refresh = RefreshToken.for_user(user)

        response = Response({
            'user': SimplifiedPortalUserSerializer(user).data,
            'message': 'Login successful'
        }, status=status.HTTP_200_OK)

        set_access_cookie(response, str(refresh.access_token))
        set_refresh_cookie(response, str(refresh))
        set_csrf_cookie(request, response)
        logger.info(f"User {user.username} logged in")
        return response


@method_decorator(csrf_exempt, name='dispatch')
class SecureTokenRefreshView(APIView):
    """
    Reads the refresh token from its HTTPOnly cookie and sets a new access
    token cookie.
    CSRF exempt because refresh uses HTTPOnly cookie which cannot be stolen via XSS.
    """
    permission_classes = [AllowAny]

    def post(self, request):
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)

        if not refresh_token:
            return Response({
                'error': 'Refresh token not found'
            }, status=status.HTTP_401_UNAUTHORIZED)

        try:
            refresh = RefreshToken(refresh_token)
            access_token = str(refresh.access_token)
        except TokenError:
            return Response({
                'error': 'Invalid or expired refresh token'
            }, status=status.HTTP_401_UNAUTHORIZED)

        response = Response({
            'message': 'Token refreshed successfully'
        }, status=status.HTTP_200_OK)
        set_access_cookie(response, access_token)

        if settings.SIMPLE_JWT.get('ROTATE_REFRESH_TOKENS', False):
            refresh.set_jti()
            refresh.set_exp()
            set_refresh_cookie(response, str(refresh))

        return response


@method_decorator(csrf_exempt, name='dispatch')
class SecureLogoutView(APIView):
    """
    Clears the auth cookies.
    AllowAny because user might have expired access token but still needs to logout.
    """
    permission_classes = [AllowAny]

    def post(self, request):
        response = Response({
            'message': 'Logout successful'
        }, status=status.HTTP_200_OK)

        # set_cookie with max_age=0 is more reliable than delete_cookie() in some browsers
        expired = {
            'value': '',
            'max_age': 0,
            'expires': 'Thu, 01 Jan 1970 00:00:00 GMT',
        }
        response.set_cookie(ACCESS_COOKIE, **expired, **cookie_options())
        response.set_cookie(REFRESH_COOKIE, **expired, **cookie_options())
        response.set_cookie(CSRF_COOKIE, **expired, **cookie_options(httponly=False))
        response.set_cookie('sessionid', **expired, **cookie_options())
        return response


class CurrentUserView(APIView):
    """
    The signed-in user, with the departments and dashboard their role unlocks.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = SimplifiedPortalUserSerializer(request.user)
        return Response({
            'user': serializer.data
        }, status=status.HTTP_200_OK)


class CSRFTokenView(APIView):
    """
    Get CSRF token for making authenticated requests.
    This is useful for the client to get a CSRF token on initial load.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        response = Response({
            'message': 'CSRF token generated'
        }, status=status.HTTP_200_OK)
        set_csrf_cookie(request, response)
        return response
