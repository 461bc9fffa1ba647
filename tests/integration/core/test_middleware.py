"""
Integration tests for RequestLogMiddleware and the request log API.
"""

from django.http import HttpResponse
from django.test import RequestFactory
from rest_framework import status
from rest_framework.test import APIClient

from core.context import get_current_request_id
from core.middleware import RequestLogMiddleware, get_client_ip
from core.models import RequestLog
from tests.factories.users import UserFactory


class TestRequestLogMiddleware:
    def test_api_request_is_recorded(self):
        seen = {}

        def view(request):
            seen["request_id"] = get_current_request_id()
            return HttpResponse("OK")

        request = RequestFactory().post("/api/transactions/", REMOTE_ADDR="10.0.0.1", HTTP_X_REQUEST_ID="abc123")
        response = RequestLogMiddleware(view)(request)

        log = RequestLog.objects.get()
        assert (log.ip, log.method, log.path) == ("10.0.0.1", "POST", "/api/transactions/")
        assert seen["request_id"] == "abc123"
        assert response["X-Request-ID"] == "abc123"
        # Context is cleaned up after the request
        assert get_current_request_id() is None

    def test_request_id_is_generated_when_missing(self):
        request = RequestFactory().get("/api/me/")
        response = RequestLogMiddleware(lambda r: HttpResponse("OK"))(request)

        assert len(response["X-Request-ID"]) == 32

    def test_non_api_paths_are_not_recorded(self):
        request = RequestFactory().get("/admin/")
        RequestLogMiddleware(lambda r: HttpResponse("OK"))(request)

        assert not RequestLog.objects.exists()

    def test_forwarded_for_wins(self):
        request = RequestFactory().get("/api/me/", HTTP_X_FORWARDED_FOR="1.2.3.4, 10.0.0.1", REMOTE_ADDR="10.0.0.1")

        assert get_client_ip(request) == "1.2.3.4"


class TestRequestLogAPI:
    def setup_method(self):
        self.client = APIClient()

    def test_logs_are_admin_only(self):
        self.client.force_authenticate(user=UserFactory())

        assert self.client.get("/api/logs/").status_code == status.HTTP_403_FORBIDDEN

    def test_logs_list_and_filter_by_method(self):
        self.client.force_authenticate(user=UserFactory(admin=True))
        self.client.post("/api/transactions/", {}, format="json")

        everything = self.client.get("/api/logs/")
        posts = self.client.get("/api/logs/post/")

        assert everything.status_code == status.HTTP_200_OK
        # The POST above plus this GET, newest first
        assert [row["method"] for row in everything.data] == ["GET", "POST"]
        assert [row["path"] for row in posts.data] == ["/api/transactions/"]
