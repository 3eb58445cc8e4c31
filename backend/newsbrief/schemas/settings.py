"""System settings and scheduler schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from newsbrief.constants.settings_defaults import DEFAULT_SETTINGS


class SystemSettings(BaseModel):
    """Effective settings after defaults are applied."""

    schedule: str = Field(default=DEFAULT_SETTINGS["schedule"], description="5-field cron expression")
    enabled: bool = Field(default=DEFAULT_SETTINGS["enabled"])
    recency_filter: str = Field(
        default=DEFAULT_SETTINGS["recency_filter"],
        description="Recency window for searches: 1day, 1week or 1month",
    )
    news_filter_off: bool = Field(default=DEFAULT_SETTINGS["news_filter_off"])
    search_type_extension_limit: str = Field(default=DEFAULT_SETTINGS["search_type_extension_limit"])


class SettingsUpdate(BaseModel):
    """
    Settings update. Schedule and enabled flag are always written together;
    the remaining fields are written only when provided.
    """

    schedule: str = Field(..., min_length=1, max_length=100)
    enabled: bool = Field(...)
    recency_filter: str | None = Field(default=None, pattern=r"^1?(day|week|month)$")
    news_filter_off: bool | None = None
    search_type_extension_limit: str | None = Field(default=None, min_length=1, max_length=50)


class SettingsUpdateResponse(SystemSettings):
    success: bool = True
    scheduled: bool


class SchedulerStatus(BaseModel):
    scheduled: bool
    schedule: str | None = None
    next_run_time: datetime | None = None
    fetch_running: bool
