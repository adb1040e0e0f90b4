from rest_framework import serializers

from apps.users.validators import (
    validate_password as validate_password_rules,
    validate_username as validate_username_rules,
)


class RegisterRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    first_name = serializers.CharField(required=False, allow_blank=True, default="")
    last_name = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_username(self, value: str) -> str:
        return validate_username_rules(value)

    def validate_password(self, value: str) -> str:
        return validate_password_rules(value)


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class RefreshRequestSerializer(serializers.Serializer):
    # Browsers send the refresh cookie; API tooling may post it instead.
    refresh = serializers.CharField(required=False, allow_blank=True)


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    username = serializers.CharField()
    firstName = serializers.CharField(source="first_name", allow_blank=True)
    lastName = serializers.CharField(source="last_name", allow_blank=True)
    name = serializers.CharField(source="display_name")
    phone = serializers.CharField(allow_null=True, required=False)
    isStaff = serializers.BooleanField(source="is_staff")
    dateJoined = serializers.CharField(source="date_joined", allow_null=True)


class UserEnvelopeSerializer(serializers.Serializer):
    user = UserSerializer()


class SessionUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class SessionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["authenticated", "unauthenticated"])
    user = SessionUserSerializer(allow_null=True)


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
