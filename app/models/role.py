"""Authentication role enum carried in access tokens."""

from enum import Enum as PyEnum


class AuthRole(str, PyEnum):
    """
    Roles granted to an authenticated session.

    Roles are coarse capabilities attached to the token, separate from
    the per-user superuser flag:
    - USER: base role every interactive session holds; required for all
      account and administrative endpoints
    - ATTACHMENTS: short-lived role for attachment downloads only

    Superuser authority is never a role. It is read from the user record
    on every request so a demotion takes effect immediately.
    """

    USER = "user"
    ATTACHMENTS = "attachments"
