"""
Middleware for request logging and request id propagation.
"""

import logging
import uuid

from core.context import reset_current_request_id, set_current_request_id
from core.models import RequestLog

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def get_client_ip(request):
    """
    Returns the caller's address, preferring the first X-Forwarded-For hop.
    """
    forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")


class RequestLogMiddleware:
    """
    Records every API call in the RequestLog table and tags the request with an id.

    The id is taken from the 'X-Request-ID' header when the caller sends one,
    otherwise generated. It is exposed to log records through core.context and
    echoed back on the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # 1. Always reset context at the start of the request
        reset_current_request_id()

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_current_request_id(request_id)
        request.request_id = request_id

        # 2. Only API traffic is recorded (admin, static and favicon are not)
        if request.path.startswith("/api/"):
            ip = get_client_ip(request)
            RequestLog.objects.create(ip=ip, method=request.method, path=request.path[:512])
            logger.info("%s %s from %s", request.method, request.path, ip)

        try:
            response = self.get_response(request)
        finally:
            # Cleanup context after request
            reset_current_request_id()

        response[REQUEST_ID_HEADER] = request_id
        return response
