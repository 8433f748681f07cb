"""Well-known activity tags.

Producers may mint new tags at any time; these are the ones the app itself
emits, not a closed set.
"""

from __future__ import annotations

ACTIVITY_SIGN_IN = "sign_in"
ACTIVITY_PAGE_VISIT = "page_visit"
ACTIVITY_RETURN_VISIT = "return_visit"
ACTIVITY_ACTION = "action"

DEFAULT_WINDOW_DAYS = 30
DEFAULT_ACTIVITY_LIMIT = 100

__all__ = [
    "ACTIVITY_SIGN_IN",
    "ACTIVITY_PAGE_VISIT",
    "ACTIVITY_RETURN_VISIT",
    "ACTIVITY_ACTION",
    "DEFAULT_WINDOW_DAYS",
    "DEFAULT_ACTIVITY_LIMIT",
]
