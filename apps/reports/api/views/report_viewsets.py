import logging

from rest_framework import mixins, viewsets, response, status
from rest_framework.exceptions import PermissionDenied
from django_filters.rest_framework import DjangoFilterBackend

from apps.reports.models import DepartmentalReport, ReportData
from apps.reports.api.serializers import DepartmentalReportSerializer, ReportWriteSerializer, ReportDataSerializer
from apps.reports.api.filters import DepartmentalReportFilter, ReportDataFilter
from apps.reports.services.report_sync import ReportConflict, ReportKey, ReportSynchronizer
from core.permissions import SectionPermission

logger = logging.getLogger(__name__)


class SectionScopedMixin:
    section_field = "part"

    def get_sections(self):
        '''
        Sections the current user may reach; None means all of them.
        '''
        user = self.request.user
        if user.is_staff:
            return None
        return user.departments

    def scope_queryset(self, queryset):
        if getattr(self, 'swagger_fake_view', False):
            return queryset.none()
        allowed = self.get_sections()
        if allowed is None:
            return queryset
        return queryset.filter(**{f"{self.section_field}__in": allowed})

    def check_section(self, section):
        allowed = self.get_sections()
        if allowed is not None and section not in allowed:
            raise PermissionDenied(f"Your role does not give access to the {section} section.")


class DepartmentalReportViewSet(SectionScopedMixin, viewsets.GenericViewSet):
    """
    Departmental reports (Tabligh, Umumi, Talim, ...).

    Every write goes through ``ReportSynchronizer``: the normalized row is
    written with whatever columns the live table has and the values are
    mirrored into ``report_data``. POST with the natural key of an existing
    report updates it.
    """
    queryset = DepartmentalReport.objects.all()
    serializer_class = DepartmentalReportSerializer
    permission_classes = [SectionPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = DepartmentalReportFilter
    synchronizer_class = ReportSynchronizer

    def get_synchronizer(self):
        if not hasattr(self, '_synchronizer'):
            self._synchronizer = self.synchronizer_class()
        return self._synchronizer

    def get_available_columns(self):
        if not hasattr(self, '_available_columns'):
            self._available_columns = self.get_synchronizer().normalized.available_columns()
        return self._available_columns

    def get_queryset(self):
        queryset = self.get_synchronizer().queryset(self.get_available_columns())
        return self.scope_queryset(queryset)

    def get_report(self):
        report = self.get_object()
        self.get_synchronizer().attach_details([report], self.get_available_columns())
        return report

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        reports = self.get_synchronizer().attach_details(list(queryset), self.get_available_columns())
        serializer = self.get_serializer(reports, many=True)
        return response.Response(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_report())
        return response.Response(serializer.data)

    def create(self, request, *args, **kwargs):
        writer = ReportWriteSerializer(data=request.data, context=self.get_serializer_context())
        writer.is_valid(raise_exception=True)
        key = writer.validated_data['key']
        self.check_section(key.part)

        synchronizer = self.get_synchronizer()
        pk = synchronizer.save(key, writer.validated_data['values'])
        logger.info(f"Saved departmental report {pk} ({key}) by {request.user}")
        serializer = self.get_serializer(synchronizer.get(pk))
        return response.Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        report = self.get_report()
        writer = ReportWriteSerializer(
            report, data=request.data, partial=partial, context=self.get_serializer_context()
        )
        writer.is_valid(raise_exception=True)
        key = writer.validated_data['key']
        self.check_section(key.part)

        synchronizer = self.get_synchronizer()
        try:
            pk = synchronizer.save(
                key, writer.validated_data['values'], pk=report.pk, previous_key=ReportKey.for_row(report)
            )
        except ReportConflict as exc:
            logger.warning(f"Rejected update of departmental report {report.pk}: {exc}")
            return response.Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)
        logger.info(f"Updated departmental report {pk} ({key}) by {request.user}")
        serializer = self.get_serializer(synchronizer.get(pk))
        return response.Response(serializer.data)

    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        report = self.get_object()
        self.get_synchronizer().delete(report)
        return response.Response(status=status.HTTP_204_NO_CONTENT)


class ReportDataViewSet(SectionScopedMixin,
                        mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.CreateModelMixin,
                        viewsets.GenericViewSet):
    """
    The ``report_data`` blob table. POST upserts by
    (region, majlis, month, year, section) and never duplicates.
    """
    queryset = ReportData.objects.all()
    serializer_class = ReportDataSerializer
    permission_classes = [SectionPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ReportDataFilter
    section_field = "section_key"

    def get_queryset(self):
        return self.scope_queryset(super().get_queryset())

    def perform_create(self, serializer):
        self.check_section(serializer.validated_data['section_key'])
        serializer.save()
