from rest_framework import serializers

from apps.members.models import Region, Majlis
from apps.reports import sections
from apps.reports.models import ReportData
from apps.reports.services.report_sync import ReportKey
from core.periods import normalize_month

REQUIRED_KEY_MESSAGE = "Missing required fields: part, month, year"
REQUIRED_LOCATION_MESSAGE = "Missing required fields: region, majlis"


class DepartmentalReportSerializer(serializers.Serializer):
    '''
    Read shape of a departmental report. ``details`` holds the section's
    values whichever table they were read from; ``details_source`` says which.
    '''
    id = serializers.UUIDField(read_only=True)
    part = serializers.CharField(read_only=True)
    region_id = serializers.UUIDField(read_only=True, allow_null=True)
    majlis_id = serializers.UUIDField(read_only=True, allow_null=True)
    region_name = serializers.CharField(read_only=True, allow_null=True)
    majlis_name = serializers.CharField(read_only=True, allow_null=True)
    report_month = serializers.CharField(source='month', read_only=True)
    report_year = serializers.IntegerField(source='year', read_only=True)
    details = serializers.JSONField(read_only=True)
    details_source = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ReportWriteSerializer(serializers.Serializer):
    '''
    Validates a report submission into a ``ReportKey`` and the section values.

    Field values may come inside ``details`` or flat beside the key fields
    ({"part": "tabligh", "no_of_baiats": 2, ...}). On PATCH the submitted
    values are merged over the stored ones; on PUT they replace them.
    '''
    part = serializers.CharField(required=False, allow_blank=True)
    region = serializers.PrimaryKeyRelatedField(queryset=Region.objects.all(), required=False, allow_null=True)
    majlis = serializers.PrimaryKeyRelatedField(queryset=Majlis.objects.all(), required=False, allow_null=True)
    month = serializers.CharField(required=False, allow_blank=True)
    year = serializers.IntegerField(required=False, allow_null=True, min_value=1900, max_value=2999)
    details = serializers.DictField(required=False)

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        flat = {field.key: data[field.key] for field in sections.ALL_FIELDS if field.key in data}
        if flat or 'details' in values:
            values['details'] = {**flat, **values.get('details', {})}
        return values

    def current(self, name, default=None):
        return getattr(self.instance, name, default) if self.instance is not None else default

    def validate(self, attrs):
        part = attrs.get('part', self.current('part'))
        month = attrs.get('month', self.current('month'))
        year = attrs.get('year', self.current('year'))
        if not part or not month or not year:
            raise serializers.ValidationError(REQUIRED_KEY_MESSAGE)
        if part not in sections.SECTIONS:
            raise serializers.ValidationError({'part': f"Unknown report section: {part}"})
        try:
            month = normalize_month(month)
        except ValueError as exc:
            raise serializers.ValidationError({'month': str(exc)})

        region = majlis = None
        if not sections.is_unscoped(part):
            region = attrs['region'] if 'region' in attrs else self.current('region')
            majlis = attrs['majlis'] if 'majlis' in attrs else self.current('majlis')
            if region is None or majlis is None:
                raise serializers.ValidationError(REQUIRED_LOCATION_MESSAGE)
            if majlis.region_id != region.pk:
                raise serializers.ValidationError({'majlis': f"{majlis.name} is not in {region.name}."})

        submitted = attrs.get('details')
        stored = self.current('details') if self.current('part') == part else None
        if self.partial and stored:
            values = {**stored, **(submitted or {})}
        elif submitted is None:
            values = stored or {}
        else:
            values = submitted

        try:
            values = sections.clean_details(part, values)
        except ValueError as exc:
            raise serializers.ValidationError({'details': str(exc)})

        return {
            'key': ReportKey.build(part, month, year, region, majlis),
            'values': values,
        }


class ReportDataSerializer(serializers.ModelSerializer):
    '''
    Direct access to the ``report_data`` blob table.
    '''
    region_id = serializers.PrimaryKeyRelatedField(
        source='region', queryset=Region.objects.all(), required=False, allow_null=True
    )
    majlis_id = serializers.PrimaryKeyRelatedField(
        source='majlis', queryset=Majlis.objects.all(), required=False, allow_null=True
    )
    section_key = serializers.CharField(required=False, allow_blank=True)
    report_month = serializers.CharField(required=False, allow_blank=True)
    report_year = serializers.IntegerField(required=False, allow_null=True, min_value=1900, max_value=2999)

    class Meta:
        model = ReportData
        fields = (
            'id', 'region_id', 'majlis_id', 'report_month', 'report_year',
            'section_key', 'section_title', 'details', 'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'created_at', 'updated_at')
        validators = []

    def validate(self, attrs):
        section = attrs.get('section_key')
        month = attrs.get('report_month')
        year = attrs.get('report_year')
        if not section or not month or not year:
            raise serializers.ValidationError("Missing required fields: section_key, report_month, report_year")
        try:
            attrs['report_month'] = normalize_month(month)
        except ValueError as exc:
            raise serializers.ValidationError({'report_month': str(exc)})

        if sections.is_unscoped(section):
            attrs['region'] = attrs['majlis'] = None
        else:
            region = attrs.get('region')
            majlis = attrs.get('majlis')
            if region is None or majlis is None:
                raise serializers.ValidationError(REQUIRED_LOCATION_MESSAGE)
            if majlis.region_id != region.pk:
                raise serializers.ValidationError({'majlis_id': f"{majlis.name} is not in {region.name}."})

        if section in sections.SECTIONS:
            try:
                attrs['details'] = sections.clean_details(section, attrs.get('details') or {})
            except ValueError as exc:
                raise serializers.ValidationError({'details': str(exc)})
            attrs.setdefault('section_title', sections.SECTION_TITLES[section])
        return attrs

    def create(self, validated_data):
        lookup = {
            name: validated_data.pop(name)
            for name in ('region', 'majlis', 'report_month', 'report_year', 'section_key')
            if name in validated_data
        }
        lookup.setdefault('region', None)
        lookup.setdefault('majlis', None)
        report, created = ReportData.objects.update_or_create(**lookup, defaults=validated_data)
        return report
