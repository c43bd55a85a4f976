from rest_framework.routers import DefaultRouter
from django.urls import path
from apps.users.api.views import *
from apps.users.api.auth_views import *


user_router = DefaultRouter()
user_router.register(r'manage', PortalUserViewSet)

auth_urlpatterns = [
    path('login/', SecureTokenObtainView.as_view(), name='auth_login'),
    path('refresh/', SecureTokenRefreshView.as_view(), name='auth_refresh'),
    path('logout/', SecureLogoutView.as_view(), name='auth_logout'),
    path('csrf/', CSRFTokenView.as_view(), name='auth_csrf'),
    path('me/', CurrentUserView.as_view(), name='current-user'),
]

# Health check endpoint for container monitoring
health_urlpatterns = [
    path('health/', HealthCheckView.as_view(), name='health-check'),
]
