"""
Logging helpers.
"""

import logging

from core.context import get_current_request_id


class RequestIdFilter(logging.Filter):
    """
    Attaches the current request id to every record so formatters can use {request_id}.
    """

    def filter(self, record):
        record.request_id = get_current_request_id() or "-"
        return True
