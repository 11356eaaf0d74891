"""Settings repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.settings import AppSetting


class SettingsRepository(Protocol):
    """Repository for app-level key/value settings."""

    def get(self, key: str) -> Optional[AppSetting]:
        """Retrieve a setting row."""
        ...

    def get_value(self, key: str) -> Optional[str]:
        """Retrieve only the stored value."""
        ...

    def set(self, key: str, value: str, description: str | None = None) -> AppSetting:
        """Insert or update a setting."""
        ...

    def delete(self, key: str) -> None:
        """Remove a setting."""
        ...
