"""
Models for the users application (Auth and Roles)
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from users.managers import CustomUserManager


class User(AbstractUser):
    """
    Custom User model supporting Email login.

    Every user collects points; users with the merchant role may also run
    merchants, and admins see everything.
    """

    ROLE_USER = "user"
    ROLE_MERCHANT = "merchant"
    ROLE_ADMIN = "admin"

    ROLES = [
        (ROLE_USER, "User"),
        (ROLE_MERCHANT, "Merchant"),
        (ROLE_ADMIN, "Admin"),
    ]

    username = None
    email = models.EmailField("email address", unique=True)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLES, default=ROLE_USER)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    def __str__(self):
        return self.email

    @property
    def is_admin_role(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_merchant_role(self):
        # Admins may do everything a merchant can
        return self.role in (self.ROLE_MERCHANT, self.ROLE_ADMIN)
