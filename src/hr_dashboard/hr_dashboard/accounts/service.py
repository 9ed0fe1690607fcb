from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_max_length, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, UnauthorizedError
from .model import Account
from .repository import AccountRepository

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class SessionAccount:
    """What we store into Flask session after login."""

    account_id: int
    name: str
    email: str
    role: Role


def _to_session(account: Account) -> SessionAccount:
    return SessionAccount(
        account_id=account.account_id,
        name=account.name,
        email=account.email,
        role=account.role,
    )


class AuthService:
    """Use cases: register an account, log in, resolve the acting account."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def register(self, *, name: str, email: str, password: str) -> SessionAccount:
        name = require_non_empty(name, "name")
        require_min_length(name, "name", 2)
        require_max_length(name, "name", 100)
        email = require_email(email).lower()
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        if self._accounts.get_by_email(email):
            raise ConflictError("User with this email already exists", field="email")

        account_id = self._accounts.create_account(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.USER,
        )
        if not account_id:
            # Lost a race against a concurrent registration.
            raise ConflictError("Email address is already in use", field="email")

        logger.info("New account registered: %s", email)
        return SessionAccount(account_id=account_id, name=name, email=email, role=Role.USER)

    def authenticate(self, email: str, password: str) -> SessionAccount:
        account = self._accounts.get_by_email((email or "").strip().lower())
        if not account or not password:
            raise AuthenticationError(_BAD_CREDENTIALS)

        try:
            ok = check_password_hash(account.password_hash, password)
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError(_BAD_CREDENTIALS)

        return _to_session(account)

    def current_account(self, account_id: Optional[int]) -> SessionAccount:
        account = self._accounts.get_by_id(int(account_id)) if account_id else None
        if not account:
            raise UnauthorizedError("Authentication required")
        return _to_session(account)
