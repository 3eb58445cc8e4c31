"""Key/value system settings store (last writer wins)."""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from newsbrief.constants.settings_defaults import resolve_settings
from newsbrief.models import SystemSetting


class SystemSettingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> str | None:
        setting = await self.session.get(SystemSetting, key)
        return setting.value if setting else None

    async def set(self, key: str, value: str) -> None:
        setting = await self.session.get(SystemSetting, key)
        if setting:
            setting.value = value
            setting.updated_at = datetime.now(UTC)
        else:
            self.session.add(SystemSetting(key=key, value=value))
        await self.session.commit()

    async def get_all(self) -> dict[str, str]:
        result = await self.session.execute(select(SystemSetting))
        return {row.key: row.value for row in result.scalars().all()}

    async def get_resolved(self) -> dict:
        """All settings with the default table applied."""
        return resolve_settings(await self.get_all())
