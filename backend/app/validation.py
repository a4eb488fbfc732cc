"""
Request validation for transaction endpoints.

Invalid input is rejected with 400 before any call to YaYa Wallet is made.
"""

from fastapi import HTTPException, status
from typing import Any, Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_page(value: Any = None) -> int:
    if value is None:
        return DEFAULT_PAGE

    page = _parse_int(value)
    if page is None or page < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid page parameter"
        )
    return page


def parse_limit(value: Any = None) -> int:
    if value is None:
        return DEFAULT_LIMIT

    limit = _parse_int(value)
    if limit is None or limit < 1 or limit > MAX_LIMIT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid limit parameter (1-{MAX_LIMIT})"
        )
    return limit


def require_query(value: Any) -> str:
    """Return the search query unchanged, or raise 400 when it is missing, blank or not encodable."""
    if not isinstance(value, str) or not value.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required"
        )

    # Signed and sent as UTF-8; lone surrogates cannot be encoded
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid search query"
        )
    return value
