from .document import DOCUMENT_FIELDS, FILE_FIELDS, FileMetadata, PackageDocument
from .package import (
    PACKAGE_FIELDS,
    PERMIT_TYPES,
    REQUIRED_PACKAGE_FIELDS,
    PackageStatus,
    PermitPackage,
)
from .setting import DEFAULT_SETTINGS, SystemSetting
from .templates import BUILDING_PERMIT_TEMPLATE, DocumentTemplate, get_template
from .user import ApprovalStatus, User, UserRole

__all__ = [
    "BUILDING_PERMIT_TEMPLATE",
    "DEFAULT_SETTINGS",
    "DOCUMENT_FIELDS",
    "FILE_FIELDS",
    "PACKAGE_FIELDS",
    "PERMIT_TYPES",
    "REQUIRED_PACKAGE_FIELDS",
    "ApprovalStatus",
    "DocumentTemplate",
    "FileMetadata",
    "PackageDocument",
    "PackageStatus",
    "PermitPackage",
    "SystemSetting",
    "User",
    "UserRole",
    "get_template",
]
