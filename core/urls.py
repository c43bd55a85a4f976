from django.contrib import admin

from django.urls import path, include
from django.conf.urls.static import static
from django.conf import settings

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

from apps.users.api.urls import *
from apps.members.api.urls import *
from apps.reports.api.urls import *
from apps.events.api.urls import *

'''
SCHEMA
'''

# Swagger schema view
schema_view = get_schema_view(
    openapi.Info(
        title="Ansarullah Records API",
        default_version='v1',
        description="Membership, contribution, departmental report and event attendance records for Majlis Ansarullah Kenya",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

'''
MAIN URL PATTERNS
'''

urlpatterns = [
    path("admin/", admin.site.urls),

    # Secure Authentication Endpoints (HTTPOnly Cookie-based)
    path('api/auth/', include(auth_urlpatterns)),
    path('api/', include(health_urlpatterns)),

    path('api/users/roles/', RoleListView.as_view(), name='role-list'),
    path('api/users/', include(user_router.urls)),
    path('api/regions/', include(region_router.urls)),
    path('api/members/', include(member_router.urls)),
    path('api/reports/', include(report_router.urls)),
    path('api/events/', include(event_router.urls)),

    # Swagger and ReDoc documentation
    path('', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
