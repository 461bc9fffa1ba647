"""
URL configuration for the users application API.
"""

from django.urls import path
from rest_framework.permissions import AllowAny
from rest_framework.routers import SimpleRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)

from users.views import ChangePasswordView, LogoutView, RegisterView, UserProfileView, UserViewSet

# Mounted under /api/auth/
urlpatterns = [
    path("register/", RegisterView.as_view(), name="auth_register"),
    # Standard JWT Login (returns access + refresh tokens)
    path("login/", TokenObtainPairView.as_view(permission_classes=[AllowAny]), name="auth_login"),
    # Standard JWT Refresh (returns new access token)
    path("refresh/", TokenRefreshView.as_view(permission_classes=[AllowAny]), name="auth_refresh"),
    path("logout/", LogoutView.as_view(), name="auth_logout"),
    path("change-password/", ChangePasswordView.as_view(), name="auth_change_password"),
]

router = SimpleRouter()
router.register(r"users", UserViewSet, basename="users")

# Mounted under /api/
account_urlpatterns = [
    path("me/", UserProfileView.as_view(), name="me"),
] + router.urls
