"""Repositories package - async stores over the SQLite database."""

from newsbrief.repositories.call_log_repository import SearchApiLogRepository, SummaryLogRepository
from newsbrief.repositories.category_repository import CategoryRepository
from newsbrief.repositories.fetch_log_repository import FetchLogRepository
from newsbrief.repositories.news_repository import NewsRepository
from newsbrief.repositories.pagination import PaginatedResult
from newsbrief.repositories.setting_repository import SystemSettingRepository

__all__ = [
    "NewsRepository",
    "CategoryRepository",
    "SystemSettingRepository",
    "FetchLogRepository",
    "SearchApiLogRepository",
    "SummaryLogRepository",
    "PaginatedResult",
]
