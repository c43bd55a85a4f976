from rest_framework import serializers
from apps.members.models import Region, Majlis


class LocationCodeMixin:
    '''
    Codes are generated on create (see ``unique_location_code``); a code sent on
    create only seeds the generator. Changing it later must not collide.
    '''

    def validate_code(self, value):
        if self.instance is not None and value:
            model = self.Meta.model
            if model.objects.filter(code=value).exclude(pk=self.instance.pk).exists():
                raise serializers.ValidationError(f"Code {value} is already in use.")
        return value


class NestedMajlisSerializer(serializers.ModelSerializer):
    class Meta:
        model = Majlis
        fields = ('id', 'name', 'code')


class RegionSerializer(LocationCodeMixin, serializers.ModelSerializer):
    majlis = NestedMajlisSerializer(many=True, read_only=True)
    majlis_count = serializers.SerializerMethodField()

    class Meta:
        model = Region
        fields = ('id', 'name', 'code', 'majlis', 'majlis_count', 'created_at')
        read_only_fields = ('id', 'created_at')
        extra_kwargs = {'code': {'required': False, 'validators': []}}

    def get_majlis_count(self, obj):
        return len(obj.majlis.all())


class MajlisSerializer(LocationCodeMixin, serializers.ModelSerializer):
    region_name = serializers.CharField(source='region.name', read_only=True)

    class Meta:
        model = Majlis
        fields = ('id', 'name', 'code', 'region', 'region_name', 'created_at')
        read_only_fields = ('id', 'created_at')
        extra_kwargs = {'code': {'required': False, 'validators': []}}
