"""
Authentication and account Views.
"""

from django.contrib.auth import get_user_model
from rest_framework import generics, status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsAdminRole
from users.serializers import ChangePasswordSerializer, LogoutSerializer, RegistrationSerializer, UserDetailSerializer

User = get_user_model()


class RegisterView(generics.CreateAPIView):
    """
    POST /api/auth/register/
    Public endpoint to register a new user.
    """

    permission_classes = [AllowAny]
    serializer_class = RegistrationSerializer


class LogoutView(APIView):
    """
    POST /api/auth/logout/
    Blacklists the given refresh token.
    """

    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(status=status.HTTP_205_RESET_CONTENT)


class ChangePasswordView(APIView):
    """
    PUT /api/auth/change-password/
    """

    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"success": True})


class UserProfileView(generics.RetrieveUpdateAPIView):
    """
    GET /api/me/
    PUT /api/me/
    Returns (or renames) the currently logged-in user.
    """

    serializer_class = UserDetailSerializer

    def get_object(self):
        return self.request.user


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/users/[<id>/]
    Admin only.
    """

    permission_classes = [IsAdminRole]
    serializer_class = UserDetailSerializer

    def get_queryset(self):
        return User.objects.order_by("id")
