"""Caller context for request authorization."""

from dataclasses import dataclass, field

from app.models.role import AuthRole
from app.models.user import User


@dataclass(frozen=True)
class RequestContext:
    """
    Identity of the caller of a single request.

    Built from the bearer token and a fresh read of the user record, then
    passed explicitly to every protected operation.

    Attributes:
        user: The authenticated User, or None when authentication failed
        roles: Role claims carried by the token
    """

    user: User | None = None
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def has_role(self, role: AuthRole) -> bool:
        """Check if the token carries the given role."""
        return role.value in self.roles

    @property
    def is_superuser(self) -> bool:
        return self.user is not None and bool(self.user.is_superuser)

    def __repr__(self) -> str:
        user_id = self.user.id if self.user else None
        return f"<RequestContext(user_id={user_id}, roles={sorted(self.roles)})>"
