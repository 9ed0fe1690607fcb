from __future__ import annotations

from typing import Optional

from mysql.connector import errors as mysql_errors

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Account
from .repository import AccountRepository

_COLUMNS = "account_id, name, email, password_hash, role, created_at"


def _to_account(row: dict) -> Account:
    return Account(
        account_id=int(row["account_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        created_at=row.get("created_at"),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE account_id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def create_account(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO accounts(name, email, password_hash, role)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (name, email, password_hash, role.value),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                return 0
            raise
