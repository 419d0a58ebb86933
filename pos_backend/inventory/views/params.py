# inventory/views/params.py

"""
Query-string parsing shared by inventory and sales views.

Bad values are rejected with a 400 (DRF ValidationError) instead of
being dropped silently or crashing the request.
"""

from __future__ import annotations

from datetime import date, datetime

from rest_framework.exceptions import ValidationError

DATE_FORMAT = "%Y-%m-%d"


def query_date(params, name: str, *, default: date | None = None) -> date | None:
    """
    Accepts YYYY-MM-DD.
    Returns `default` when the parameter is missing or blank.
    """
    raw = (params.get(name) or "").strip()
    if not raw:
        return default

    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError as exc:
        # covers malformed text and impossible days (2024-02-30)
        raise ValidationError(
            {name: "Invalid date. Use YYYY-MM-DD."}, code="invalid_date"
        ) from exc
