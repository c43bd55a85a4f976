from rest_framework import serializers

from apps.members.models import Member
from apps.members.services import attributes
from apps.members.services.registration import register_member


class MemberSerializer(serializers.ModelSerializer):
    '''
    Tajneed record. ``age``, ``category`` and ``nau_mobaeen`` in responses are
    recomputed from the dates on every read; ``category`` sent on write is only
    kept as the fallback for members without a birth date.
    '''
    category = serializers.ChoiceField(
        choices=Member.CategoryType.choices, required=False, allow_null=True, allow_blank=True
    )

    class Meta:
        model = Member
        fields = '__all__'
        read_only_fields = (
            'id', 'registration_number', 'age', 'nau_mobaeen', 'created_at', 'updated_at',
        )

    def validate_full_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Full name is required.")
        return value

    def validate(self, attrs):
        instance = self.instance
        birth_date = attrs.get('date_of_birth', getattr(instance, 'date_of_birth', None))

        if instance is None and not birth_date:
            raise serializers.ValidationError({'date_of_birth': "Date of birth is required."})
        if birth_date:
            age = attributes.calculate_age(birth_date)
            if age is None or age <= 0:
                raise serializers.ValidationError(
                    {'date_of_birth': "Invalid date of birth resulting in non-positive age."}
                )

        region = attrs.get('region', getattr(instance, 'region', None))
        majlis = attrs.get('majlis', getattr(instance, 'majlis', None))
        if majlis is not None:
            if region is None:
                attrs['region'] = majlis.region
            elif majlis.region_id != region.pk:
                raise serializers.ValidationError({'majlis': f"{majlis.name} is not in {region.name}."})
        return attrs

    def create(self, validated_data):
        return register_member(**validated_data)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['age'] = instance.current_age()
        data['category'] = instance.current_category()
        data['nau_mobaeen'] = instance.current_nau_mobaeen()
        return data


class SimplifiedMemberSerializer(serializers.ModelSerializer):
    category = serializers.SerializerMethodField()

    class Meta:
        model = Member
        fields = ('id', 'registration_number', 'full_name', 'region_name', 'majlis_name', 'category')

    def get_category(self, obj):
        return obj.current_category()
