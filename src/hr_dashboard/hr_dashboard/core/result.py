"""Tagged success/failure results returned to the web layer.

Services raise domain exceptions; ``run_action`` is the single place where they are
turned into an ``ActionResult`` so no exception crosses into the controllers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .enums import ErrorKind
from .exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    errors: dict[str, str] = field(default_factory=dict)
    kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str, *, errors: Optional[dict[str, str]] = None) -> "ActionResult":
        return cls(success=False, error=error, errors=dict(errors or {}), kind=kind)


def run_action(func: Callable[[], Any], *, failure_message: str) -> ActionResult:
    """Call ``func`` and wrap its outcome.

    Unexpected exceptions are logged with traceback and reported as ``failure_message``.
    """

    try:
        return ActionResult.ok(func())
    except (UnauthorizedError, AuthenticationError) as e:
        return ActionResult.fail(ErrorKind.UNAUTHORIZED, str(e))
    except NotFoundError as e:
        return ActionResult.fail(ErrorKind.NOT_FOUND, str(e))
    except ConflictError as e:
        errors = {e.field: str(e)} if e.field else None
        return ActionResult.fail(ErrorKind.CONFLICT, str(e), errors=errors)
    except ValidationError as e:
        return ActionResult.fail(ErrorKind.VALIDATION, str(e), errors=e.errors)
    except Exception:
        logger.exception("%s", failure_message)
        return ActionResult.fail(ErrorKind.INTERNAL, failure_message)
