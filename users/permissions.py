"""
Role based permissions.
"""

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """
    Allows access only to users with the admin role.
    """

    message = "Admin role required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)


class IsMerchantRole(BasePermission):
    """
    Allows access to users with the merchant or admin role.
    """

    message = "Merchant role required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_merchant_role)
