from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role stored at registration."""

    USER = "USER"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"


class SalaryStatus(str, Enum):
    """Lifecycle of a salary record: DRAFT -> APPROVED -> PAID."""

    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    PAID = "PAID"


class ProjectStatus(str, Enum):
    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    TESTING = "TESTING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


# Tasks still on the board (counted as "pending" in project stats).
OPEN_TASK_STATUSES = frozenset(
    {TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.IN_REVIEW, TaskStatus.TESTING}
)


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ErrorKind(str, Enum):
    """Failure tag carried by ActionResult across the service boundary."""

    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION"
    INTERNAL = "INTERNAL"
