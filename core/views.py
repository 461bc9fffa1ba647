"""
Admin views over the request log.
"""

from rest_framework import generics

from core.models import RequestLog
from core.serializers import RequestLogSerializer
from users.permissions import IsAdminRole


class RequestLogListView(generics.ListAPIView):
    """
    GET /api/logs/
    Every recorded request, newest first.
    """

    permission_classes = [IsAdminRole]
    serializer_class = RequestLogSerializer

    def get_queryset(self):
        return RequestLog.objects.all()


class RequestLogByMethodView(generics.ListAPIView):
    """
    GET /api/logs/<method>/
    Recorded requests of one HTTP method (e.g. POST), newest first.
    """

    permission_classes = [IsAdminRole]
    serializer_class = RequestLogSerializer

    def get_queryset(self):
        return RequestLog.objects.filter(method=self.kwargs["method"].upper())
