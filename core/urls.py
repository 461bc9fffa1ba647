"""
URL routing for the request log API.
"""

from django.urls import path

from core.views import RequestLogByMethodView, RequestLogListView

urlpatterns = [
    path("logs/", RequestLogListView.as_view(), name="logs-list"),
    path("logs/<str:method>/", RequestLogByMethodView.as_view(), name="logs-by-method"),
]
