from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import ForbiddenException
from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.user_service import UserService
from app.schemas.user_schemas import (
    ChangePassword,
    UserRegistration,
    UserResponse,
    UserSelfUpdate,
)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_204_NO_CONTENT)
async def register(data: UserRegistration, db: Session = Depends(get_db)):
    """Register a new user together with their own group"""
    if not settings.ALLOW_REGISTRATION:
        raise ForbiddenException("User registration disabled")

    service = UserService(db)
    service.register(data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/self", response_model=UserResponse)
async def get_self(user: User = Depends(get_current_user)):
    """Get the authenticated user's account"""
    return user


@router.put("/self", response_model=UserResponse)
async def update_self(
    data: UserSelfUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update own name and email"""
    service = UserService(db)
    return service.update_self(user, data)


@router.delete("/self", status_code=status.HTTP_204_NO_CONTENT)
async def delete_self(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete own account"""
    if settings.DEMO_MODE:
        raise ForbiddenException("Deleting accounts is disabled in demo mode")

    service = UserService(db)
    service.delete_self(user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    data: ChangePassword,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change own password"""
    if settings.DEMO_MODE:
        raise ForbiddenException("Changing passwords is disabled in demo mode")

    service = UserService(db)
    service.change_password(user, data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
