import uuid

from sqlalchemy.orm import Session

from app.database import commit_or_raise
from app.models.location import Location


class LocationRepository:
    """Repository for group-scoped locations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_group(self, group_id: uuid.UUID) -> list[Location]:
        """Get all locations of a group"""
        return (
            self.db.query(Location)
            .filter(Location.group_id == group_id)
            .order_by(Location.name)
            .all()
        )

    def create(
        self, group_id: uuid.UUID, name: str, description: str | None = None
    ) -> Location:
        """Create a location in a group, committing it on its own"""
        location = Location(group_id=group_id, name=name, description=description)
        self.db.add(location)
        commit_or_raise(self.db, f"create location {name!r}")
        self.db.refresh(location)
        return location
