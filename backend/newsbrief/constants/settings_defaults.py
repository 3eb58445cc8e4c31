"""System setting keys and their defaults shared by the API and the pipeline."""

from typing import Any

# Keys in the system_settings table
CRON_SCHEDULE = "CRON_SCHEDULE"
CRON_ENABLED = "CRON_ENABLED"
SEARCH_RECENCY_FILTER = "SEARCH_RECENCY_FILTER"
NEWS_FILTER_OFF = "NEWS_FILTER_OFF"
SEARCH_TYPE_EXTENSION_LIMIT = "SEARCH_TYPE_EXTENSION_LIMIT"

DEFAULT_SCHEDULE = "0 */6 * * *"
DEFAULT_RECENCY_FILTER = "1day"
DEFAULT_EXTENSION_LIMIT = "Complex"

# Values used when a key has no stored row
DEFAULT_SETTINGS: dict[str, Any] = {
    "schedule": DEFAULT_SCHEDULE,
    "enabled": False,
    "recency_filter": DEFAULT_RECENCY_FILTER,
    "news_filter_off": True,
    "search_type_extension_limit": DEFAULT_EXTENSION_LIMIT,
}


def resolve_settings(stored: dict[str, str]) -> dict[str, Any]:
    """
    Apply the default table to raw stored values.

    The enabled flag is on only when stored as "true"; the content filter
    stays off unless explicitly stored as "false".
    """
    return {
        "schedule": stored.get(CRON_SCHEDULE) or DEFAULT_SCHEDULE,
        "enabled": stored.get(CRON_ENABLED) == "true",
        "recency_filter": stored.get(SEARCH_RECENCY_FILTER) or DEFAULT_RECENCY_FILTER,
        "news_filter_off": stored.get(NEWS_FILTER_OFF, "true") != "false",
        "search_type_extension_limit": (
            stored.get(SEARCH_TYPE_EXTENSION_LIMIT) or DEFAULT_EXTENSION_LIMIT
        ),
    }
