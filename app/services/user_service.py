import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.repositories.group_repository import GroupRepository
from app.repositories.user_repository import UserRepository
from app.schemas.user_schemas import ChangePassword, UserRegistration, UserSelfUpdate
from app.services.default_resource_service import DefaultResourceSeeder

logger = structlog.get_logger(__name__)


class UserService:
    """Self-service account operations; none of them touch privilege"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.group_repo = GroupRepository(db)
        self.seeder = DefaultResourceSeeder(db)

    def register(self, data: UserRegistration) -> User:
        """
        Register a new tenant: a fresh group with the user as its owner.

        Registered users are never superusers. The group is seeded with the
        default labels and locations on a best-effort basis. The group and the
        owner are committed together, so a failed owner insert leaves no group.
        """
        name = data.name.strip()
        if not name:
            raise ValidationException("Name is required")
        if self.user_repo.get_by_email(data.email) is not None:
            raise ValidationException("Email is already registered")

        password_hash = hash_password(data.password)
        group = self.group_repo.create(f"{name}'s Group", commit=False)
        user = self.user_repo.create(
            name=name,
            email=data.email,
            password_hash=password_hash,
            group_id=group.id,
            is_superuser=False,
            is_owner=True,
        )
        logger.info("user_registered", user_id=str(user.id), group_id=str(group.id))

        report = self.seeder.seed(group.id)
        if not report.ok:
            logger.warning("registration_defaults_incomplete", failures=report.failures)
        return user

    def update_self(self, user: User, data: UserSelfUpdate) -> User:
        """Update own name and email"""
        name = data.name.strip()
        if not name:
            raise ValidationException("Name is required")

        updated = self.user_repo.update(user.id, name, data.email)
        if updated is None:
            raise NotFoundException("User not found")
        return updated

    def change_password(self, user: User, data: ChangePassword) -> None:
        """
        Replace the password after verifying the current one.

        Raises:
            ForbiddenException: If the current password does not match
        """
        if not verify_password(data.current, user.password):
            raise ForbiddenException("Current password is incorrect")

        self.user_repo.change_password(user, hash_password(data.new))
        logger.info("password_changed", user_id=str(user.id))

    def delete_self(self, user: User) -> None:
        """Delete own account (not subject to the admin self-protection rule)"""
        self.user_repo.delete(user.id)
        logger.info("user_deleted_self", user_id=str(user.id))
