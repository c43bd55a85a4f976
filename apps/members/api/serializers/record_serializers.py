from rest_framework import serializers

from apps.members.models import Contribution, TarbiyyatReport
from core.periods import normalize_month


def validated_month(value):
    try:
        return normalize_month(value)
    except ValueError as exc:
        raise serializers.ValidationError(str(exc))


class ContributionSerializer(serializers.ModelSerializer):
    member_name = serializers.CharField(source='member.full_name', read_only=True)
    registration_number = serializers.CharField(source='member.registration_number', read_only=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Contribution
        fields = '__all__'
        read_only_fields = ('id', 'created_at', 'updated_at')

    def validate_month(self, value):
        return validated_month(value)


class TarbiyyatReportSerializer(serializers.ModelSerializer):
    member_name = serializers.CharField(source='member.full_name', read_only=True)
    registration_number = serializers.CharField(source='member.registration_number', read_only=True)

    class Meta:
        model = TarbiyyatReport
        fields = '__all__'
        read_only_fields = ('id', 'created_at')

    def validate_report_month(self, value):
        return validated_month(value)

    def validate_avg_prayers_per_day(self, value):
        if value is not None and value > 5:
            raise serializers.ValidationError("There are at most 5 daily prayers.")
        return value
