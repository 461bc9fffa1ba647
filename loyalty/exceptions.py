"""
Errors raised by the loyalty core, and their translation into API responses.

Every failure of a settlement is one of these; the view layer never has to
guess what went wrong.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler


class LoyaltyError(Exception):
    """
    Base class. Carries a human readable reason in `message`.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code = "loyalty_error"
    default_message = "The loyalty operation could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(LoyaltyError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found."


class InvalidArgumentError(LoyaltyError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_argument"
    default_message = "Invalid argument."


class InvalidStateError(LoyaltyError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_state"
    default_message = "The operation is not allowed in the current state."


class StorageError(LoyaltyError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_error"
    default_message = "The transaction could not be stored. Please try again."


class PermissionDeniedError(LoyaltyError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"
    default_message = "You do not have permission to perform this action."


def api_exception_handler(exc, context):
    """
    DRF exception handler: renders LoyaltyError subclasses, defers everything else.
    """
    if isinstance(exc, LoyaltyError):
        return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)

    return exception_handler(exc, context)
