"""Repository for Group model operations."""

import uuid

from sqlalchemy.orm import Session

from app.database import commit_or_raise, flush_or_raise
from app.models.group import Group


class GroupRepository:
    """Repository for Group model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, group_id: uuid.UUID) -> Group | None:
        """
        Get group by ID.

        Args:
            group_id: Group ID

        Returns:
            Group object or None if not found
        """
        return self.db.query(Group).filter(Group.id == group_id).first()

    def get_all(self) -> list[Group]:
        """Get all groups."""
        return self.db.query(Group).all()

    def create(self, name: str, commit: bool = True) -> Group:
        """
        Create a new group.

        Args:
            name: Display name
            commit: When False the row is only flushed and becomes durable
                with the next commit on the session (e.g. the owner insert)

        Returns:
            Created Group object with ID populated

        Raises:
            StoreException: If the commit or flush fails
        """
        group = Group(name=name)
        self.db.add(group)
        if not commit:
            flush_or_raise(self.db, "create group")
            return group
        commit_or_raise(self.db, "create group")
        self.db.refresh(group)
        return group
