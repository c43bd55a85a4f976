from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from apps.users.models import PortalUser


class PortalUserSerializer(serializers.ModelSerializer):
    '''
    Sub-user accounts. The password is write-only and stored hashed; the
    departments and dashboard a role unlocks are included for the client.
    '''
    password = serializers.CharField(write_only=True, required=False, style={"input_type": "password"})
    departments = serializers.ListField(child=serializers.CharField(), read_only=True)
    dashboard = serializers.CharField(read_only=True)

    class Meta:
        model = PortalUser
        fields = (
            'id', 'name', 'username', 'role', 'password', 'is_active', 'is_staff',
            'departments', 'dashboard', 'last_login', 'created_at',
        )
        read_only_fields = ('id', 'last_login', 'created_at')
        extra_kwargs = {
            'username': {'validators': []},
        }

    def validate_username(self, value):
        value = value.strip()
        existing = PortalUser.objects.filter(username__iexact=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Username already exists")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': "Password is required."})

        is_staff = attrs.get('is_staff', getattr(self.instance, 'is_staff', False))
        role = attrs.get('role', getattr(self.instance, 'role', None))
        if not is_staff and not role:
            raise serializers.ValidationError({'role': "Sub-users need a role."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        return PortalUser.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=['password'])
        return instance


class SimplifiedPortalUserSerializer(serializers.ModelSerializer):
    departments = serializers.ListField(child=serializers.CharField(), read_only=True)
    dashboard = serializers.CharField(read_only=True)

    class Meta:
        model = PortalUser
        fields = ('id', 'name', 'username', 'role', 'is_staff', 'departments', 'dashboard')
