import django_filters
from django.db.models import Q

from apps.members.models import Member, Majlis, Region, Contribution, TarbiyyatReport
from core.filtering import is_pass_through, name_or_id_q, month_q, year_q


class LocationFilterMixin(django_filters.FilterSet):
    '''
    Region/majlis filters matching either the foreign key id or the stored
    name, so legacy rows that only carry names are still found. "all" or an
    empty value leaves the queryset untouched.
    '''
    region_path = "region"
    majlis_path = "majlis"

    region = django_filters.CharFilter(method='filter_region')
    majlis = django_filters.CharFilter(method='filter_majlis')

    def filter_region(self, queryset, name, value):
        return queryset.filter(
            name_or_id_q(value, Region, self.region_path, f"{self.region_path}_name")
        )

    def filter_majlis(self, queryset, name, value):
        return queryset.filter(
            name_or_id_q(value, Majlis, self.majlis_path, f"{self.majlis_path}_name")
        )


class MajlisFilter(django_filters.FilterSet):
    region = django_filters.CharFilter(method='filter_region')
    name = django_filters.CharFilter(lookup_expr="icontains")

    def filter_region(self, queryset, name, value):
        return queryset.filter(name_or_id_q(value, Region, "region", "region__name"))

    class Meta:
        model = Majlis
        fields = ["region", "name"]


class MemberFilter(LocationFilterMixin):
    '''
    Category is matched against the category derived from the birth date
    today, not the stored label.
    '''
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.CharFilter(method='filter_category')
    status = django_filters.CharFilter(method='filter_status')
    baiat_type = django_filters.CharFilter(field_name="baiat_type", lookup_expr="iexact")

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(full_name__icontains=value) |
            Q(islamic_names__icontains=value) |
            Q(registration_number__icontains=value) |
            Q(mobile_number__icontains=value)
        )

    def filter_category(self, queryset, name, value):
        if is_pass_through(value):
            return queryset
        for category in Member.CategoryType.values:
            if category.lower() == value.strip().lower():
                return queryset.in_category(category)
        return queryset.none()

    def filter_status(self, queryset, name, value):
        if is_pass_through(value):
            return queryset
        return queryset.filter(status__iexact=value.strip())

    class Meta:
        model = Member
        fields = ["search", "category", "region", "majlis", "status", "baiat_type"]


class MemberRecordFilter(LocationFilterMixin):
    region_path = "member__region"
    majlis_path = "member__majlis"
    month_field = "month"
    year_field = "year"

    member = django_filters.UUIDFilter(field_name="member")
    search = django_filters.CharFilter(method='filter_search')
    month = django_filters.CharFilter(method='filter_month')
    year = django_filters.CharFilter(method='filter_year')

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(member__full_name__icontains=value) |
            Q(member__registration_number__icontains=value)
        )

    def filter_month(self, queryset, name, value):
        return queryset.filter(month_q(value, self.month_field))

    def filter_year(self, queryset, name, value):
        return queryset.filter(year_q(value, self.year_field))


class ContributionFilter(MemberRecordFilter):

    class Meta:
        model = Contribution
        fields = ["member", "search", "region", "majlis", "month", "year"]


class TarbiyyatReportFilter(MemberRecordFilter):
    month_field = "report_month"
    year_field = "report_year"

    class Meta:
        model = TarbiyyatReport
        fields = ["member", "search", "region", "majlis", "month", "year"]
