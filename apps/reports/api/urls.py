from rest_framework.routers import DefaultRouter
from apps.reports.api.views import *

report_router = DefaultRouter()
report_router.register(r'other', DepartmentalReportViewSet, basename='departmental-report')
report_router.register(r'data', ReportDataViewSet, basename='report-data')
