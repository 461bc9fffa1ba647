"""
Serializers for User authentication and profile management.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for viewing (and renaming) a user.
    """

    class Meta:
        model = User
        fields = ["id", "email", "name", "role"]
        read_only_fields = ["id", "email", "role"]

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Please provide a name")
        return value


class RegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for registering a new user (role 'user').
    """

    password = serializers.CharField(write_only=True, min_length=6, style={"input_type": "password"})

    class Meta:
        model = User
        fields = ["id", "email", "password", "name", "role"]
        read_only_fields = ["id", "role"]

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Please provide name")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data["name"],
        )

    def to_representation(self, instance):
        """
        Customize response to include JWT tokens immediately after registration.
        """
        data = super().to_representation(instance)

        # Generate tokens manually
        refresh = RefreshToken.for_user(instance)

        data["access"] = str(refresh.access_token)
        data["refresh"] = str(refresh)

        return data


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True, style={"input_type": "password"})
    new_password = serializers.CharField(write_only=True, min_length=6, style={"input_type": "password"})

    def validate_old_password(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Your old password is incorrect")
        return value

    def save(self, **kwargs):
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user


class LogoutSerializer(serializers.Serializer):
    """
    Invalidates a refresh token by putting it on the blacklist.
    """

    refresh = serializers.CharField()

    def save(self, **kwargs):
        try:
            RefreshToken(self.validated_data["refresh"]).blacklist()
        except TokenError as e:
            raise serializers.ValidationError({"refresh": str(e)}) from e
