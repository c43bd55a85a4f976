import logging
from collections import Counter

from rest_framework import viewsets, response, status
from rest_framework.decorators import action
from django_filters.rest_framework import DjangoFilterBackend

from apps.members.models import Member
from apps.members.api.serializers import MemberSerializer
from apps.members.api.filters import MemberFilter
from apps.members.services.registration import RegistrationConflict, sort_naturally
from core.paging import fetch_in_pages
from core.permissions import DepartmentPermission

logger = logging.getLogger(__name__)


class MemberViewSet(viewsets.ModelViewSet):
    """
    Tajneed: member registration and records.

    The list is read in pages and ordered naturally by registration number
    (MA999 before MA1000). Registration allocates the next number itself;
    clients never send one.
    """
    queryset = Member.objects.all().select_related('region', 'majlis')
    serializer_class = MemberSerializer
    permission_classes = [DepartmentPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = MemberFilter
    department = "tajneed"

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset()).order_by('registration_number', 'pk')
        members = sort_naturally(fetch_in_pages(queryset), key=lambda member: member.registration_number)
        serializer = self.get_serializer(members, many=True)
        return response.Response(serializer.data)

    def create(self, request, *args, **kwargs):
        try:
            return super().create(request, *args, **kwargs)
        except RegistrationConflict as exc:
            logger.error(f"Member registration failed: {exc}")
            return response.Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)

    @action(detail=False, methods=['get'], url_path='statistics', url_name='statistics')
    def statistics(self, request):
        '''
        Member counts for the dashboards, honouring the list filters.
        Categories are derived from today's date, never read from storage.
        '''
        queryset = self.filter_queryset(self.get_queryset()).order_by('pk')
        members = fetch_in_pages(queryset)

        by_category = Counter({category: 0 for category in Member.CategoryType.values})
        by_status = Counter({status_type: 0 for status_type in Member.StatusType.values})
        by_region = Counter()
        nau_mobaeen = 0
        for member in members:
            by_category[member.current_category() or "Unknown"] += 1
            by_status[member.status] += 1
            by_region[member.region.name if member.region else (member.region_name or "Unassigned")] += 1
            if member.current_nau_mobaeen():
                nau_mobaeen += 1

        return response.Response({
            "total": len(members),
            "by_category": dict(by_category),
            "by_status": dict(by_status),
            "by_region": dict(sorted(by_region.items())),
            "nau_mobaeen": nau_mobaeen,
        })
