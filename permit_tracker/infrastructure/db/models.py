"""
Database Models — SQLAlchemy.

Tables:
  - permit_packages: packages and their workflow status
  - package_documents: checklist items (cascade-deleted with their package)
  - settings: runtime key/value settings
  - users: registered accounts and their approval status
"""

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text,
    ForeignKey, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from permit_tracker.core.clock import utcnow
from permit_tracker.core.entities.document import PackageDocument
from permit_tracker.core.entities.package import PackageStatus, PermitPackage
from permit_tracker.core.entities.setting import SystemSetting
from permit_tracker.core.entities.user import ApprovalStatus, User, UserRole


class Base(DeclarativeBase):
    pass


class PackageRecord(Base):
    """One permit package."""
    __tablename__ = "permit_packages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    permit_type = Column(String(100), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=PackageStatus.DRAFT.value, index=True)
    description = Column(Text)
    client_name = Column(String(255))
    client_email = Column(String(255))
    client_phone = Column(String(50))
    estimated_value = Column(Integer)   # cents
    notes = Column(Text)
    created_by = Column(String(100))
    assigned_to = Column(String(100))
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
    submitted_at = Column(DateTime, nullable=True)

    documents = relationship(
        "DocumentRecord",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="DocumentRecord.document_name",
    )

    def __repr__(self):
        return f"<Package {self.id} '{self.project_name}' [{self.status}]>"

    def to_entity(self) -> PermitPackage:
        return PermitPackage(
            id=self.id,
            project_name=self.project_name,
            address=self.address,
            permit_type=self.permit_type,
            status=PackageStatus(self.status),
            description=self.description,
            client_name=self.client_name,
            client_email=self.client_email,
            client_phone=self.client_phone,
            estimated_value=self.estimated_value,
            notes=self.notes,
            created_by=self.created_by,
            assigned_to=self.assigned_to,
            created_at=self.created_at,
            updated_at=self.updated_at,
            submitted_at=self.submitted_at,
        )


class DocumentRecord(Base):
    """One checklist item of a package."""
    __tablename__ = "package_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_id = Column(
        Integer,
        ForeignKey("permit_packages.id", ondelete="CASCADE"),
        nullable=False,
    )
    document_name = Column(String(255), nullable=False)
    is_required = Column(Boolean, nullable=False, default=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    file_name = Column(String(255))
    file_size = Column(Integer)
    file_path = Column(String(500))
    mime_type = Column(String(100))
    uploaded_at = Column(DateTime)
    uploaded_by = Column(String(100))
    notes = Column(Text)

    package = relationship("PackageRecord", back_populates="documents")

    __table_args__ = (
        Index("idx_package_documents_package_name", "package_id", "document_name"),
    )

    def __repr__(self):
        done = "x" if self.is_completed else " "
        return f"<Document {self.id} [{done}] '{self.document_name}' pkg={self.package_id}>"

    def to_entity(self) -> PackageDocument:
        return PackageDocument(
            id=self.id,
            package_id=self.package_id,
            document_name=self.document_name,
            is_required=bool(self.is_required),
            is_completed=bool(self.is_completed),
            file_name=self.file_name,
            file_size=self.file_size,
            file_path=self.file_path,
            mime_type=self.mime_type,
            uploaded_at=self.uploaded_at,
            uploaded_by=self.uploaded_by,
            notes=self.notes,
        )


class SettingRecord(Base):
    """Runtime key/value setting."""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False)
    value = Column(Text, nullable=False)
    description = Column(Text)
    category = Column(String(50), nullable=False, default="general", index=True)
    is_system = Column(Boolean, nullable=False, default=False)
    updated_by = Column(String(100))
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Setting {self.key}={self.value!r}>"

    def to_entity(self) -> SystemSetting:
        return SystemSetting(
            id=self.id,
            key=self.key,
            value=self.value,
            description=self.description,
            category=self.category,
            is_system=bool(self.is_system),
            updated_by=self.updated_by,
            updated_at=self.updated_at,
        )


class UserRecord(Base):
    """Registered user account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(255))
    phone = Column(String(50))
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    approval_status = Column(String(20), nullable=False, default=ApprovalStatus.PENDING.value, index=True)
    approved_by = Column(String(100))
    approved_at = Column(DateTime)
    rejection_reason = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User {self.id} {self.email} [{self.approval_status}]>"

    def to_entity(self) -> User:
        return User(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            company=self.company,
            phone=self.phone,
            role=UserRole(self.role),
            approval_status=ApprovalStatus(self.approval_status),
            approved_by=self.approved_by,
            approved_at=self.approved_at,
            rejection_reason=self.rejection_reason,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
