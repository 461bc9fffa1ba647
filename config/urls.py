"""
Root URL configuration.
"""

from django.urls import include, path

from users.urls import account_urlpatterns

urlpatterns = [
    path("api/auth/", include("users.urls")),
    path("api/", include(account_urlpatterns)),
    path("api/", include("loyalty.urls")),
    path("api/", include("core.urls")),
]
