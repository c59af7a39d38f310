"""
Serializers for the shop owner account.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from rest_framework import serializers

User = get_user_model()


class OwnerSerializer(serializers.ModelSerializer):
    """
    Serializer for the owner profile.
    """

    name = serializers.CharField(source="first_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "date_joined", "last_login"]
        read_only_fields = fields


class OwnerRegistrationSerializer(serializers.Serializer):
    """
    Serializer for the one-time owner setup.

    The email doubles as the username, so the owner signs in at
    ``/api/auth/token/`` with ``{"username": <email>, "password": ...}``.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_email(self, value):
        return value.strip().lower()

    def create(self, validated_data):
        email = validated_data["email"]
        return User.objects.create_user(
            username=email,
            email=email,
            password=validated_data["password"],
            first_name=validated_data["name"],
            is_staff=True,
        )
