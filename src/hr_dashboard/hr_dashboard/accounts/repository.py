from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for Account.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        """Insert and return the new id; returns 0 if the email is already taken."""

        raise NotImplementedError
