# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory SQLite
- Fast password hashing
- Throttling off (API tests hit endpoints repeatedly)
- Fixed business time zone so day-boundary tests are deterministic
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

TIME_ZONE = "Asia/Manila"
POS_BUSINESS_TIME_ZONE = "Asia/Manila"
POS_DINE_IN_SERVICE_RATE = "0.02"
POS_CASH_METHODS = ["cash"]
POS_PRICE_TOLERANCE = "0.00"

for _name in ("inventory", "sales", "products"):
    LOGGING["loggers"][_name]["level"] = "CRITICAL"
