"""Offset pagination shared by every listing.

A page is a zero-indexed slice: skip = page * page_size, limit = page_size.
"""

from typing import TypeVar

from sqlalchemy import Select

from resourcehub.settings import get_settings

SelectT = TypeVar("SelectT", bound=Select)


def resolve_page_size(page_size: int | None = None) -> int:
    """Return the explicit page size, or the configured one."""
    size = page_size if page_size is not None else get_settings().page_size
    if size < 1:
        raise ValueError(f"page_size must be positive, got {size}")
    return size


def paginate(query: SelectT, page: int, page_size: int) -> SelectT:
    """Apply offset/limit for a zero-indexed page."""
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    return query.offset(page * page_size).limit(page_size)
