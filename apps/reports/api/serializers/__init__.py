from .report_serializers import (
    DepartmentalReportSerializer,
    ReportWriteSerializer,
    ReportDataSerializer,
)
