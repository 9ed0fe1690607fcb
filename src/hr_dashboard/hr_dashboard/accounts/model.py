from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: the login identity that owns employees, payroll and projects.

    Note: Plain data object (no DB access code).
    """

    account_id: int
    name: str
    email: str
    password_hash: str
    role: Role = Role.USER
    created_at: Optional[datetime] = None
