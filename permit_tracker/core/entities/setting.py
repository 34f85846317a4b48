"""
Entity: System Setting

Key/value configuration editable by administrators at runtime.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime

from permit_tracker.core.clock import utcnow


@dataclass
class SystemSetting:
    id: int
    key: str
    value: str
    description: str | None = None
    category: str = "general"
    is_system: bool = False
    updated_by: str | None = None
    updated_at: datetime = field(default_factory=utcnow)

    def as_int(self) -> int:
        return int(self.value)

    def as_bool(self) -> bool:
        return self.value.strip().lower() == "true"

    def as_list(self) -> list:
        return json.loads(self.value)


DEFAULT_SETTINGS = (
    {
        "key": "system_name",
        "value": "Permit Management System",
        "description": "Display name for the system",
        "category": "general",
        "is_system": True,
    },
    {
        "key": "auto_approve_users",
        "value": "false",
        "description": "Automatically approve new user registrations",
        "category": "security",
        "is_system": False,
    },
    {
        "key": "max_file_size",
        "value": "10485760",
        "description": "Maximum file upload size in bytes (10MB)",
        "category": "uploads",
        "is_system": False,
    },
    {
        "key": "allowed_file_types",
        "value": '["pdf","doc","docx","xls","xlsx","jpg","jpeg","png","gif","txt"]',
        "description": "Allowed file types for uploads",
        "category": "uploads",
        "is_system": False,
    },
)
