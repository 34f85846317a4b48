"""
Contract: User Repository
"""

from abc import ABC, abstractmethod

from permit_tracker.core.entities.user import User


class IUserRepository(ABC):
    """
    Port: registered user accounts.

    Lookups return None when the row does not exist. Emails are unique,
    compared case-insensitively.
    """

    @abstractmethod
    def get_user(self, user_id: int) -> User | None:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        ...

    @abstractmethod
    def list_users(self, approval_status: str | None = None) -> list[User]:
        """Users newest first, optionally only those with `approval_status`."""
        ...

    @abstractmethod
    def create_user(self, fields: dict) -> User:
        ...

    @abstractmethod
    def update_user(self, user_id: int, fields: dict) -> User | None:
        ...
