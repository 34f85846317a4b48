"""
Contract: Settings Repository
"""

from abc import ABC, abstractmethod

from permit_tracker.core.entities.setting import SystemSetting


class ISettingsRepository(ABC):
    """Port: key/value system settings."""

    @abstractmethod
    def get_setting(self, setting_id: int) -> SystemSetting | None:
        ...

    @abstractmethod
    def get_by_key(self, key: str) -> SystemSetting | None:
        ...

    @abstractmethod
    def list_settings(self, category: str | None = None) -> list[SystemSetting]:
        """Settings ordered by category then key."""
        ...

    @abstractmethod
    def create_setting(self, fields: dict) -> SystemSetting:
        ...

    @abstractmethod
    def update_setting(self, setting_id: int, fields: dict) -> SystemSetting | None:
        ...
