from rest_framework.routers import DefaultRouter
from apps.members.api.views import *

region_router = DefaultRouter()
region_router.register(r'manage', RegionViewSet)
region_router.register(r'majlis', MajlisViewSet)

member_router = DefaultRouter()
member_router.register(r'manage', MemberViewSet)
member_router.register(r'contributions', ContributionViewSet)
member_router.register(r'tarbiyyat', TarbiyyatReportViewSet)
