"""
Serializers for authentication endpoints.
"""

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for login request."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class RefreshRequestSerializer(serializers.Serializer):
    """Serializer for refresh request."""

    refresh_token = serializers.CharField()


class UserDTOSerializer(serializers.Serializer):
    """Serializer for UserDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField(allow_null=True)
    company_id = serializers.UUIDField(allow_null=True)


class TokenPairSerializer(serializers.Serializer):
    """Serializer for TokenPairDTO."""

    access_token = serializers.CharField()
    refresh_token = serializers.CharField()
    token_type = serializers.CharField()
    expires_in = serializers.IntegerField()
    user = UserDTOSerializer()


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for change password request."""

    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=6)
