"""
Offset pagination helpers for the read side.

The API uses `?amount=<page size>&page=<zero based page number>`.
"""

from rest_framework import serializers


def page_window(page_size: int, page_number: int) -> tuple[int, int]:
    """
    Returns (offset, limit) for a zero based page.

    Example: page_size=8, page_number=2 -> (16, 8), i.e. items 17-24.
    """
    if page_size < 0 or page_number < 0:
        raise ValueError("Page size and page number must be non-negative.")
    return page_size * page_number, page_size


def paginate(queryset, page_size: int, page_number: int):
    """
    Slices an (already ordered) queryset to the requested page.
    """
    offset, limit = page_window(page_size, page_number)
    return queryset[offset : offset + limit]


class PageQuerySerializer(serializers.Serializer):
    """
    Validates the pagination query parameters.
    """

    amount = serializers.IntegerField(min_value=0)
    page = serializers.IntegerField(min_value=0)
