from .report_viewsets import (
    DepartmentalReportViewSet,
    ReportDataViewSet,
)
