from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import ForbiddenException
from app.database import get_db
from app.dependencies import require_superuser
from app.models.request_context import RequestContext
from app.services.admin_user_service import AdminUserService, parse_user_id
from app.schemas.user_schemas import (
    AdminUserCreate,
    AdminUserUpdate,
    SuperuserUpdate,
    UserListResponse,
    UserResponse,
)

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(
    context: RequestContext = Depends(require_superuser),
    db: Session = Depends(get_db),
):
    """
    List every user in the system.

    - **Requires superuser**
    - Not scoped to the caller's group
    """
    service = AdminUserService(db)
    users = service.list_users()
    return UserListResponse(
        results=[UserResponse.model_validate(user) for user in users], count=len(users)
    )


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminUserCreate,
    context: RequestContext = Depends(require_superuser),
    db: Session = Depends(get_db),
):
    """
    Create a user.

    - **Requires superuser**
    - Defaults to the caller's group when `group_id` is absent or nil
    - Created users are never group owners
    """
    service = AdminUserService(db)
    return service.create_user(data, context)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: AdminUserUpdate,
    context: RequestContext = Depends(require_superuser),
    db: Session = Depends(get_db),
):
    """
    Update a user's name, email and superuser flag.

    - **Requires superuser**
    - Cannot remove your own superuser flag
    - A 500 with code `privilege_update_incomplete` means name/email were
      saved but the flag was not; retry this request or the superuser endpoint
    """
    service = AdminUserService(db)
    return service.update_user(parse_user_id(user_id), data, context)


@router.put("/users/{user_id}/superuser", response_model=UserResponse)
async def set_superuser(
    user_id: str,
    data: SuperuserUpdate,
    context: RequestContext = Depends(require_superuser),
    db: Session = Depends(get_db),
):
    """
    Grant or revoke superuser privileges.

    - **Requires superuser**
    - Idempotent
    - Cannot remove your own superuser flag
    """
    service = AdminUserService(db)
    return service.set_superuser(parse_user_id(user_id), data.is_superuser, context)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    context: RequestContext = Depends(require_superuser),
    db: Session = Depends(get_db),
):
    """
    Delete a user.

    - **Requires superuser**
    - Cannot delete yourself (use the self-service endpoint)
    """
    if settings.DEMO_MODE:
        raise ForbiddenException("Deleting users is disabled in demo mode")

    service = AdminUserService(db)
    service.delete_user(parse_user_id(user_id), context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
