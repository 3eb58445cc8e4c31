"""Models package - SQLModel database models."""

from newsbrief.models.call_logs import SearchApiLog, SummaryLog
from newsbrief.models.category import DEFAULT_CATEGORIES, Category
from newsbrief.models.fetch_log import FetchLog
from newsbrief.models.news import News, validate_news
from newsbrief.models.system_setting import SystemSetting

__all__ = [
    "News",
    "validate_news",
    "Category",
    "DEFAULT_CATEGORIES",
    "FetchLog",
    "SearchApiLog",
    "SummaryLog",
    "SystemSetting",
]
