import django_filters

from apps.members.models import Region, Majlis
from apps.reports.models import DepartmentalReport, ReportData
from core.filtering import is_pass_through, name_or_id_q, month_q, year_q


class DepartmentalReportFilter(django_filters.FilterSet):
    '''
    ``part``, ``region``, ``majlis``, ``month`` and ``year``; each one is
    ignored when empty or "all". Region and majlis match ids or names.
    '''
    part = django_filters.CharFilter(method='filter_part')
    region = django_filters.CharFilter(method='filter_region')
    majlis = django_filters.CharFilter(method='filter_majlis')
    month = django_filters.CharFilter(method='filter_month')
    year = django_filters.CharFilter(method='filter_year')

    def filter_part(self, queryset, name, value):
        if is_pass_through(value):
            return queryset
        return queryset.filter(part=value.strip())

    def filter_region(self, queryset, name, value):
        return queryset.filter(name_or_id_q(value, Region, "region", "region_name"))

    def filter_majlis(self, queryset, name, value):
        return queryset.filter(name_or_id_q(value, Majlis, "majlis", "majlis_name"))

    def filter_month(self, queryset, name, value):
        return queryset.filter(month_q(value, "month"))

    def filter_year(self, queryset, name, value):
        return queryset.filter(year_q(value, "year"))

    class Meta:
        model = DepartmentalReport
        fields = ["part", "region", "majlis", "month", "year"]


class ReportDataFilter(django_filters.FilterSet):
    section = django_filters.CharFilter(method='filter_section')
    region = django_filters.CharFilter(method='filter_region')
    majlis = django_filters.CharFilter(method='filter_majlis')
    month = django_filters.CharFilter(method='filter_month')
    year = django_filters.CharFilter(method='filter_year')

    def filter_section(self, queryset, name, value):
        if is_pass_through(value):
            return queryset
        return queryset.filter(section_key=value.strip())

    def filter_region(self, queryset, name, value):
        return queryset.filter(name_or_id_q(value, Region, "region", "region__name"))

    def filter_majlis(self, queryset, name, value):
        return queryset.filter(name_or_id_q(value, Majlis, "majlis", "majlis__name"))

    def filter_month(self, queryset, name, value):
        return queryset.filter(month_q(value, "report_month"))

    def filter_year(self, queryset, name, value):
        return queryset.filter(year_q(value, "report_year"))

    class Meta:
        model = ReportData
        fields = ["section", "region", "majlis", "month", "year"]
