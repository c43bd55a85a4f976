from rest_framework.routers import DefaultRouter
from apps.events.api.views import *

event_router = DefaultRouter()
event_router.register(r'manage', EventViewSet)
event_router.register(r'attendance', EventAttendanceViewSet)
