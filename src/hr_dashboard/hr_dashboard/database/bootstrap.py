from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "12345678"

DEMO_ACCOUNTS = [
    ("Demo Admin", "admin@blurr.so", "ADMIN"),
    ("HR Manager", "hr@blurr.so", "MANAGER"),
]

# (code, name, email, joining_date, basic_salary, department, position)
DEMO_EMPLOYEES = [
    ("EMP001", "John Smith", "john.smith@company.com", date(2023, 1, 15), 75000, "Engineering", "Senior Software Engineer"),
    ("EMP002", "Sarah Johnson", "sarah.johnson@company.com", date(2023, 3, 20), 65000, "Design", "UI/UX Designer"),
    ("EMP003", "Michael Brown", "michael.brown@company.com", date(2023, 5, 10), 80000, "Engineering", "Full Stack Developer"),
    ("EMP004", "Emily Davis", "emily.davis@company.com", date(2023, 7, 1), 55000, "Marketing", "Digital Marketing Specialist"),
    ("EMP005", "David Wilson", "david.wilson@company.com", date(2023, 9, 15), 90000, "Engineering", "Technical Lead"),
    ("EMP006", "Lisa Anderson", "lisa.anderson@company.com", date(2023, 11, 20), 60000, "HR", "HR Specialist"),
    ("EMP007", "Robert Taylor", "robert.taylor@company.com", date(2024, 1, 8), 70000, "Sales", "Sales Manager"),
    ("EMP008", "Jennifer Martinez", "jennifer.martinez@company.com", date(2024, 3, 12), 58000, "Design", "Graphic Designer"),
]

# (title, description, status, start, end, tasks[(title, status, priority, assignee_code)])
DEMO_PROJECTS = [
    (
        "E-commerce Platform Redesign",
        "Complete redesign of the company e-commerce platform with modern UI/UX and improved performance.",
        "IN_PROGRESS",
        date(2024, 1, 1),
        date(2024, 6, 30),
        [
            ("Design homepage mockups", "TODO", "HIGH", "EMP002"),
            ("Implement user authentication", "IN_PROGRESS", "HIGH", "EMP001"),
            ("Payment gateway integration", "IN_REVIEW", "HIGH", "EMP003"),
            ("Unit test coverage", "TESTING", "MEDIUM", "EMP001"),
        ],
    ),
    (
        "Customer Portal Enhancement",
        "Enhancing the existing customer portal with new features and improved user experience.",
        "COMPLETED",
        date(2023, 10, 1),
        date(2024, 1, 31),
        [
            ("User registration flow", "DONE", "HIGH", "EMP001"),
            ("Dashboard analytics widgets", "DONE", "MEDIUM", "EMP002"),
        ],
    ),
]


def _target(db_config: dict) -> DBConfig:
    return DBConfig.from_mapping(db_config)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    conn = _connect(_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_data(db_config: dict) -> None:
    """Create demo accounts, employees and projects unless they already exist."""

    conn = _connect(_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_account(name: str, email: str, role: str) -> int:
            cur.execute("SELECT account_id FROM accounts WHERE email=%s", (email,))
            existing = cur.fetchone()
            password_hash = generate_password_hash(DEMO_PASSWORD)
            if existing:
                cur.execute(
                    "UPDATE accounts SET name=%s, password_hash=%s, role=%s WHERE account_id=%s",
                    (name, password_hash, role, existing["account_id"]),
                )
                return int(existing["account_id"])
            cur.execute(
                "INSERT INTO accounts (name, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                (name, email, password_hash, role),
            )
            return int(cur.lastrowid)

        account_ids = [upsert_account(*a) for a in DEMO_ACCOUNTS]
        owner_id = account_ids[0]

        employee_ids: dict[str, int] = {}
        for code, name, email, joined, salary, dept, position in DEMO_EMPLOYEES:
            cur.execute(
                "SELECT employee_id FROM employees WHERE account_id=%s AND employee_code=%s",
                (owner_id, code),
            )
            row = cur.fetchone()
            if row:
                employee_ids[code] = int(row["employee_id"])
                continue
            cur.execute(
                """
                INSERT INTO employees (account_id, employee_code, name, email, joining_date,
                                       basic_salary, department, position, is_active)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, 1)
                """,
                (owner_id, code, name, email, joined, salary, dept, position),
            )
            employee_ids[code] = int(cur.lastrowid)

        for title, description, status, start, end, tasks in DEMO_PROJECTS:
            cur.execute("SELECT project_id FROM projects WHERE account_id=%s AND title=%s", (owner_id, title))
            if cur.fetchone():
                continue
            cur.execute(
                """
                INSERT INTO projects (account_id, title, description, status, start_date, end_date)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (owner_id, title, description, status, start, end),
            )
            project_id = int(cur.lastrowid)
            for task_title, task_status, priority, assignee in tasks:
                cur.execute(
                    """
                    INSERT INTO tasks (project_id, title, status, priority, assignee_id)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (project_id, task_title, task_status, priority, employee_ids.get(assignee)),
                )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo data ready (%d accounts, %d employees)", len(DEMO_ACCOUNTS), len(DEMO_EMPLOYEES))


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
