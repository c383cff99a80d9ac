"""Privilege gate guarding every administrative operation."""

from dataclasses import dataclass
from enum import Enum as PyEnum

from app.models.request_context import RequestContext
from app.models.role import AuthRole


class DenyReason(str, PyEnum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None
    message: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "Decision":
        return cls(allowed=False, reason=reason, message=message)


def authorize(context: RequestContext | None) -> Decision:
    """
    Decide whether the caller may perform an administrative operation.

    Checks run in order and stop at the first failure:
    1. An authenticated user is present
    2. The token carries the base USER role
    3. The user record has the superuser flag

    Pure predicate: no side effects, nothing cached between calls.
    """
    if context is None or not context.is_authenticated:
        return Decision.deny(DenyReason.UNAUTHENTICATED, "Authentication required")

    if not context.has_role(AuthRole.USER):
        return Decision.deny(DenyReason.FORBIDDEN, "Missing required role")

    if not context.is_superuser:
        return Decision.deny(DenyReason.FORBIDDEN, "Superuser privileges required")

    return Decision.allow()
