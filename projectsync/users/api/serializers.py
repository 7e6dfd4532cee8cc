from django.core.validators import RegexValidator
from rest_framework import serializers

from projectsync.users.models import User


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=3,
        max_length=30,
        validators=[
            RegexValidator(
                r"^[a-zA-Z0-9]+$",
                message="Username must contain only alphanumeric characters",
            ),
        ],
        error_messages={
            "required": "Username is required",
            "blank": "Username is required",
            "null": "Username is required",
            "min_length": "Username must be at least 3 characters long",
            "max_length": "Username cannot exceed 30 characters",
        },
    )
    password = serializers.CharField(
        min_length=6,
        max_length=100,
        trim_whitespace=False,
        write_only=True,
        error_messages={
            "required": "Password is required",
            "blank": "Password is required",
            "null": "Password is required",
            "min_length": "Password must be at least 6 characters long",
            "max_length": "Password cannot exceed 100 characters",
        },
    )
    role = serializers.ChoiceField(
        choices=User.Role.choices,
        error_messages={
            "required": "Role is required",
            "null": "Role is required",
            "invalid_choice": "Role must be either admin or viewer",
        },
    )


class PublicUserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    role = serializers.CharField(read_only=True)


class LoginResponseSerializer(serializers.Serializer):
    token = serializers.CharField(read_only=True)
    user = PublicUserSerializer(read_only=True)
