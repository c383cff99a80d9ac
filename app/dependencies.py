from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.privilege import DenyReason, authorize
from app.core.security import extract_identity
from app.database import get_db
from app.models.request_context import RequestContext
from app.models.role import AuthRole
from app.models.user import User
from app.repositories.user_repository import UserRepository

# Missing credentials are handled by the privilege checks, not by HTTPBearer
security = HTTPBearer(auto_error=False)


async def get_request_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> RequestContext:
    """
    FastAPI dependency building the caller's context for this request.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Extract user id ('sub') and role claims ('roles')
    4. Load the User record fresh from the store (superuser flag is never cached)

    Any failure yields an unauthenticated context; the route's
    guard decides how to answer.
    """
    if credentials is None:
        return RequestContext()

    try:
        user_id, roles = extract_identity(credentials.credentials)
    except UnauthorizedException:
        return RequestContext()

    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        return RequestContext()

    return RequestContext(user=user, roles=roles)


async def get_current_user(
    context: RequestContext = Depends(get_request_context),
) -> User:
    """
    FastAPI dependency for non-administrative account routes.

    Raises:
        UnauthorizedException: If the caller is not authenticated
        ForbiddenException: If the token lacks the base USER role
    """
    if not context.is_authenticated:
        raise UnauthorizedException("Authentication required")
    if not context.has_role(AuthRole.USER):
        raise ForbiddenException("Missing required role")
    return context.user


async def require_superuser(
    context: RequestContext = Depends(get_request_context),
) -> RequestContext:
    """
    FastAPI dependency applying the privilege gate to administrative routes.

    Raises:
        UnauthorizedException: If the caller is not authenticated
        ForbiddenException: If the caller lacks the USER role or superuser flag
    """
    decision = authorize(context)
    if decision.allowed:
        return context
    if decision.reason == DenyReason.UNAUTHENTICATED:
        raise UnauthorizedException(decision.message)
    raise ForbiddenException(decision.message)
