import uuid

from sqlalchemy.orm import Session

from app.database import commit_or_raise
from app.models.label import Label


class LabelRepository:
    """Repository for group-scoped labels"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_group(self, group_id: uuid.UUID) -> list[Label]:
        """Get all labels of a group"""
        return self.db.query(Label).filter(Label.group_id == group_id).order_by(Label.name).all()

    def create(self, group_id: uuid.UUID, name: str, color: str | None = None) -> Label:
        """Create a label in a group, committing it on its own"""
        label = Label(group_id=group_id, name=name, color=color)
        self.db.add(label)
        commit_or_raise(self.db, f"create label {name!r}")
        self.db.refresh(label)
        return label
