"""
JWT authentication for sub-user sessions.

Tokens are issued by the login view into HTTPOnly cookies; this class reads
them back. The role carried by the user row is then checked server-side by
``core.permissions``, never taken from client storage.
"""

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, AuthenticationFailed


ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


class JWTCookieAuthentication(JWTAuthentication):
    """
    Reads the access token from the ``access_token`` HTTPOnly cookie.

    Returns None when no cookie is present so the next authentication class
    (bearer header, session) gets a chance, and never asks the browser for a
    WWW-Authenticate challenge.
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(ACCESS_COOKIE)

        if raw_token is None:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, AuthenticationFailed):
            raise AuthenticationFailed('Invalid or expired token')

        return self.get_user(validated_token), validated_token

    def authenticate_header(self, request):
        return None
