"""
Use Case: System Settings

Runtime key/value settings administered through the API. Upload limits are
read from here, falling back to the static configuration.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime

from permit_tracker.core.clock import utcnow
from permit_tracker.core.entities.setting import DEFAULT_SETTINGS, SystemSetting
from permit_tracker.core.errors import NotFoundError, ValidationError
from permit_tracker.core.interfaces.settings_repository import ISettingsRepository
from permit_tracker.core.use_cases.manage_documents import UploadPolicy

logger = logging.getLogger(__name__)

SETTING_FIELDS = ("value", "description", "category")


def _check_typed_value(key: str, value: str) -> str | None:
    """Error message for a value that does not fit a well-known key."""
    if key == "max_file_size":
        if not value.isdigit() or int(value) <= 0:
            return "Must be a positive integer (bytes)"
    elif key == "auto_approve_users":
        if value.strip().lower() not in ("true", "false"):
            return "Must be 'true' or 'false'"
    elif key == "allowed_file_types":
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            return "Must be a JSON list of extensions"
        if not isinstance(parsed, list) or not all(isinstance(x, str) for x in parsed):
            return "Must be a JSON list of extensions"
    return None


class SettingsManager:
    """Use Case: read, seed and edit system settings."""

    def __init__(
        self,
        repository: ISettingsRepository,
        defaults: tuple[dict, ...] = DEFAULT_SETTINGS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._defaults = defaults
        self._clock = clock

    def seed_defaults(self, updated_by: str | None = None) -> int:
        """Insert default settings whose key is missing. Returns how many were added."""
        created = 0
        for default in self._defaults:
            if self._repo.get_by_key(default["key"]) is None:
                self._repo.create_setting({
                    **default,
                    "updated_by": updated_by,
                    "updated_at": self._clock(),
                })
                created += 1
        if created:
            logger.info(f"Seeded {created} default settings")
        return created

    def list_settings(self, category: str | None = None) -> list[SystemSetting]:
        return self._repo.list_settings(category)

    def get(self, key: str) -> SystemSetting:
        setting = self._repo.get_by_key(key)
        if setting is None:
            raise NotFoundError("Setting", key)
        return setting

    def update_setting(self, setting_id: int, fields: dict, updated_by: str | None = None) -> SystemSetting:
        errors = {}
        cleaned = {}
        for key, value in fields.items():
            if key not in SETTING_FIELDS:
                errors[key] = "Unknown field"
            elif key in ("value", "category") and (not isinstance(value, str) or not value.strip()):
                errors[key] = "Must be a non-empty string"
            elif value is not None and not isinstance(value, str):
                errors[key] = "Must be a string"
            else:
                cleaned[key] = value
        if errors:
            raise ValidationError("Invalid setting data", errors)

        if "value" in cleaned:
            current = self._repo.get_setting(setting_id)
            if current is not None:
                problem = _check_typed_value(current.key, cleaned["value"])
                if problem:
                    raise ValidationError("Invalid setting data", {"value": problem})

        cleaned["updated_by"] = updated_by
        cleaned["updated_at"] = self._clock()
        updated = self._repo.update_setting(setting_id, cleaned)
        if updated is None:
            raise NotFoundError("Setting", setting_id)
        logger.info(f"Setting '{updated.key}' updated by {updated_by or 'system'}")
        return updated

    def auto_approve_users(self) -> bool:
        """Whether new registrations skip the approval queue. Off when unset or malformed."""
        setting = self._repo.get_by_key("auto_approve_users")
        if setting is None or _check_typed_value(setting.key, setting.value) is not None:
            return False
        return setting.as_bool()

    def upload_policy(self, fallback: UploadPolicy) -> UploadPolicy:
        """Upload limits from settings, falling back per key to `fallback`."""
        max_size = fallback.max_file_size
        extensions = list(fallback.allowed_extensions)

        size_setting = self._repo.get_by_key("max_file_size")
        if size_setting is not None and _check_typed_value("max_file_size", size_setting.value) is None:
            max_size = size_setting.as_int()

        types_setting = self._repo.get_by_key("allowed_file_types")
        if types_setting is not None and _check_typed_value("allowed_file_types", types_setting.value) is None:
            extensions = types_setting.as_list()

        return UploadPolicy(max_file_size=max_size, allowed_extensions=extensions)
