import uuid

from sqlalchemy.orm import Session

from app.database import commit_or_raise
from app.models.user import User


def normalize_email(email: str) -> str:
    """Emails compare case-insensitively; store and look up lower-cased."""
    return email.strip().lower()


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)"""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        """Get user by ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_all(self) -> list[User]:
        """Get every user in the system, across all groups"""
        return self.db.query(User).order_by(User.created_at, User.email).all()

    def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        group_id: uuid.UUID,
        is_superuser: bool = False,
        is_owner: bool = False,
    ) -> User:
        """
        Create a new user.

        Args:
            password_hash: Output of the password hasher, never plaintext

        Raises:
            StoreException: If the email already exists or the commit fails
        """
        user = User(
            name=name,
            email=normalize_email(email),
            password=password_hash,
            group_id=group_id,
            is_superuser=is_superuser,
            is_owner=is_owner,
        )
        self.db.add(user)
        commit_or_raise(self.db, "create user")
        self.db.refresh(user)
        return user

    def update(self, user_id: uuid.UUID, name: str, email: str) -> User | None:
        """
        Update a user's name and email.

        Returns:
            Updated User or None if the user does not exist
        """
        user = self.get_by_id(user_id)
        if user is None:
            return None
        user.name = name
        user.email = normalize_email(email)
        commit_or_raise(self.db, "update user")
        self.db.refresh(user)
        return user

    def set_superuser(self, user_id: uuid.UUID, is_superuser: bool) -> User | None:
        """
        Set the superuser flag. Idempotent.

        Returns:
            Updated User or None if the user does not exist
        """
        user = self.get_by_id(user_id)
        if user is None:
            return None
        user.is_superuser = is_superuser
        commit_or_raise(self.db, "set superuser flag")
        self.db.refresh(user)
        return user

    def change_password(self, user: User, password_hash: str) -> User:
        """Replace the stored password hash"""
        user.password = password_hash
        commit_or_raise(self.db, "change password")
        self.db.refresh(user)
        return user

    def delete(self, user_id: uuid.UUID) -> bool:
        """
        Delete a user.

        Returns:
            True if a user was deleted, False if none matched
        """
        user = self.get_by_id(user_id)
        if user is None:
            return False
        self.db.delete(user)
        commit_or_raise(self.db, "delete user")
        return True
