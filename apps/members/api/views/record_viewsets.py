from decimal import Decimal

from rest_framework import viewsets, response
from rest_framework.decorators import action
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import Sum

from apps.members.models import Contribution, TarbiyyatReport
from apps.members.api.serializers import ContributionSerializer, TarbiyyatReportSerializer
from apps.members.api.filters import ContributionFilter, TarbiyyatReportFilter
from core.permissions import DepartmentPermission


class ContributionViewSet(viewsets.ModelViewSet):
    """
    Maal: monthly contributions per member.
    """
    queryset = Contribution.objects.all().select_related('member')
    serializer_class = ContributionSerializer
    permission_classes = [DepartmentPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ContributionFilter
    department = "maal"

    @action(detail=False, methods=['get'], url_path='summary', url_name='summary')
    def summary(self, request):
        '''
        Per-field totals over the filtered contributions; missing amounts count as zero.
        '''
        queryset = self.filter_queryset(self.get_queryset())
        sums = queryset.aggregate(**{field: Sum(field) for field in Contribution.AMOUNT_FIELDS})
        totals = {field: sums[field] or Decimal("0") for field in Contribution.AMOUNT_FIELDS}
        return response.Response({
            "count": queryset.count(),
            "totals": {field: str(amount) for field, amount in totals.items()},
            "grand_total": str(sum(totals.values(), Decimal("0"))),
        })


class TarbiyyatReportViewSet(viewsets.ModelViewSet):
    """
    Tarbiyyat: monthly spiritual reports per member.
    """
    queryset = TarbiyyatReport.objects.all().select_related('member')
    serializer_class = TarbiyyatReportSerializer
    permission_classes = [DepartmentPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = TarbiyyatReportFilter
    department = "tarbiyyat"
