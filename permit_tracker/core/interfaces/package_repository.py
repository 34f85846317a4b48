"""
Contract: Package Repository

Persistence of permit packages and their checklist documents. Any
implementation (SQLAlchemy, in-memory, remote service) must honour it.
Each call is its own unit of work; failures surface as RepositoryError.
"""

from abc import ABC, abstractmethod

from permit_tracker.core.entities.document import PackageDocument
from permit_tracker.core.entities.package import PermitPackage


class IPackageRepository(ABC):
    """
    Port: Package Repository

    Lookups return None when the row does not exist; deletes return whether a
    row was removed. Deleting a package removes its documents.
    """

    @abstractmethod
    def get_package(self, package_id: int) -> PermitPackage | None:
        ...

    @abstractmethod
    def list_packages(self) -> list[PermitPackage]:
        """All packages, newest first."""
        ...

    @abstractmethod
    def create_package(self, fields: dict) -> PermitPackage:
        ...

    @abstractmethod
    def update_package(self, package_id: int, fields: dict) -> PermitPackage | None:
        ...

    @abstractmethod
    def delete_package(self, package_id: int) -> bool:
        ...

    @abstractmethod
    def count_by_status(self) -> dict[str, int]:
        """Package count per status value; statuses with no packages may be absent."""
        ...

    @abstractmethod
    def get_documents_for_package(self, package_id: int) -> list[PackageDocument]:
        """Documents of a package ordered by name."""
        ...

    @abstractmethod
    def get_document(self, document_id: int) -> PackageDocument | None:
        ...

    @abstractmethod
    def create_document(self, fields: dict) -> PackageDocument:
        ...

    @abstractmethod
    def update_document(self, document_id: int, fields: dict) -> PackageDocument | None:
        ...

    @abstractmethod
    def delete_document(self, document_id: int) -> bool:
        ...
