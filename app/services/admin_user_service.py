import uuid

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    PrivilegeUpdateIncompleteException,
    StoreException,
    ValidationException,
)
from app.core.security import hash_password
from app.models.request_context import RequestContext
from app.models.user import User
from app.repositories.group_repository import GroupRepository
from app.repositories.user_repository import UserRepository
from app.schemas.user_schemas import AdminUserCreate, AdminUserUpdate

logger = structlog.get_logger(__name__)


def parse_user_id(raw: str) -> uuid.UUID:
    """
    Parse a path identifier.

    Raises:
        ValidationException: If the value is empty or not a UUID
    """
    if not raw or not raw.strip():
        raise ValidationException("User id is required")
    try:
        return uuid.UUID(raw.strip())
    except ValueError:
        raise ValidationException(f"Invalid user id: {raw!r}")


class AdminUserService:
    """
    User administration performed by a superuser.

    Every method expects the privilege gate to have passed already and
    receives the caller's context explicitly.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.group_repo = GroupRepository(db)

    def list_users(self) -> list[User]:
        """All users across every group"""
        return self.user_repo.get_all()

    def create_user(self, data: AdminUserCreate, context: RequestContext) -> User:
        """
        Create a user in the given group or, by default, the caller's group.

        Administratively created users are never group owners.

        Raises:
            ValidationException: If a required field is empty
            NotFoundException: If an explicit group does not exist
            HashingException: If the password cannot be hashed
            StoreException: If the store rejects the user (e.g. duplicate email)
        """
        name = data.name.strip()
        email = data.email.strip()
        if not name or not email or not data.password:
            raise ValidationException("Name, email and password are required")

        group_id = data.group_id
        if group_id is None or group_id == uuid.UUID(int=0):
            group_id = context.user.group_id
        elif self.group_repo.get_by_id(group_id) is None:
            raise NotFoundException("Group not found")

        password_hash = hash_password(data.password)

        user = self.user_repo.create(
            name=name,
            email=email,
            password_hash=password_hash,
            group_id=group_id,
            is_superuser=data.is_superuser,
            is_owner=False,
        )
        logger.info(
            "admin_user_created",
            actor_id=str(context.user.id),
            user_id=str(user.id),
            is_superuser=user.is_superuser,
        )
        return user

    def update_user(
        self, user_id: uuid.UUID, data: AdminUserUpdate, context: RequestContext
    ) -> User:
        """
        Update name/email, then the superuser flag, then re-read the user.

        The two steps commit separately. If the first fails the second is
        never attempted. If only the second fails the name/email change
        stays applied and PrivilegeUpdateIncompleteException is raised;
        both steps are idempotent so the request can simply be retried.

        Raises:
            ForbiddenException: If the caller tries to demote themself
            NotFoundException: If the user does not exist
            StoreException: If the name/email update fails
            PrivilegeUpdateIncompleteException: If only the flag step fails,
                whether on its read or its commit
        """
        self._guard_self_demotion(user_id, data.is_superuser, context)

        name = data.name.strip()
        email = data.email.strip()
        if not name or not email:
            raise ValidationException("Name and email are required")

        updated = self.user_repo.update(user_id, name, email)
        if updated is None:
            raise NotFoundException("User not found")

        try:
            updated = self.user_repo.set_superuser(user_id, data.is_superuser)
        except (StoreException, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error(
                "admin_user_privilege_update_failed",
                actor_id=str(context.user.id),
                user_id=str(user_id),
                error=str(e),
            )
            raise PrivilegeUpdateIncompleteException(user_id) from e
        if updated is None:
            raise NotFoundException("User not found")

        logger.info(
            "admin_user_updated",
            actor_id=str(context.user.id),
            user_id=str(user_id),
            is_superuser=data.is_superuser,
        )
        return self.get_user(user_id)

    def set_superuser(
        self, user_id: uuid.UUID, is_superuser: bool, context: RequestContext
    ) -> User:
        """
        Grant or revoke superuser on its own. Idempotent.

        Raises:
            ForbiddenException: If the caller tries to demote themself
            NotFoundException: If the user does not exist
        """
        self._guard_self_demotion(user_id, is_superuser, context)

        user = self.user_repo.set_superuser(user_id, is_superuser)
        if user is None:
            raise NotFoundException("User not found")

        logger.info(
            "admin_user_privilege_set",
            actor_id=str(context.user.id),
            user_id=str(user_id),
            is_superuser=is_superuser,
        )
        return user

    def get_user(self, user_id: uuid.UUID) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")
        return user

    def delete_user(self, user_id: uuid.UUID, context: RequestContext) -> None:
        """
        Delete another user's account.

        Raises:
            ForbiddenException: If the id is the caller's own
            NotFoundException: If the user does not exist
        """
        # Checked before any lookup so a denial reveals nothing about the store
        if user_id == context.user.id:
            raise ForbiddenException("Cannot delete yourself through the admin API")

        if not self.user_repo.delete(user_id):
            raise NotFoundException("User not found")

        logger.info("admin_user_deleted", actor_id=str(context.user.id), user_id=str(user_id))

    @staticmethod
    def _guard_self_demotion(
        user_id: uuid.UUID, is_superuser: bool, context: RequestContext
    ) -> None:
        if user_id == context.user.id and not is_superuser:
            raise ForbiddenException("Cannot remove your own superuser privileges")
