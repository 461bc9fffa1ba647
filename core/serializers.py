from rest_framework import serializers

from core.models import RequestLog


class RequestLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequestLog
        fields = ["id", "ip", "method", "path", "created_at"]
