# sales/services/business_time.py

"""
Store-local time for orders.

Orders are stamped in POS_BUSINESS_TIME_ZONE (not UTC) so a sale made
at 23:30 local lands on that local day in every report.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def business_tz() -> ZoneInfo:
    return ZoneInfo(settings.POS_BUSINESS_TIME_ZONE)


def business_now() -> datetime:
    return timezone.now().astimezone(business_tz())


def business_today() -> date:
    return business_now().date()


def to_business_time(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if timezone.is_naive(value):
        value = timezone.make_aware(value, business_tz())
    return value.astimezone(business_tz())
