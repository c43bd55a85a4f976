from rest_framework import viewsets, filters, response, status
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import ProtectedError

from apps.members.models import Region, Majlis
from apps.members.api.serializers import RegionSerializer, MajlisSerializer
from apps.members.api.filters import MajlisFilter
from core.permissions import IsPortalAdminOrReadOnly


class RegionViewSet(viewsets.ModelViewSet):
    """
    Regions with their majlis nested. Only admins may change the structure.
    """
    queryset = Region.objects.all().prefetch_related('majlis')
    serializer_class = RegionSerializer
    permission_classes = [IsPortalAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'code']
    ordering_fields = ['name', 'code', 'created_at']
    ordering = ['name']

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return response.Response(
                {"error": "Region still has majlis; delete or move them first."},
                status=status.HTTP_409_CONFLICT,
            )


class MajlisViewSet(viewsets.ModelViewSet):
    """
    Majlis (local units). ``?region=`` accepts a region id or name.
    """
    queryset = Majlis.objects.all().select_related('region')
    serializer_class = MajlisSerializer
    permission_classes = [IsPortalAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = MajlisFilter
    search_fields = ['name', 'code', 'region__name']
    ordering_fields = ['name', 'code', 'region__name']
    ordering = ['region__name', 'name']
