"""Group model: the tenant boundary for users and their resources."""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.label import Label
    from app.models.location import Location


class Group(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary.

    A group is created exactly once per new tenant, either by the admin
    bootstrap ("Admin Group") or by user registration. It is seeded with
    a starter set of labels and locations at creation time; those are
    owned by the group and removed with it.
    """

    __tablename__ = "groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    users: Mapped[list["User"]] = relationship("User", back_populates="group")
    labels: Mapped[list["Label"]] = relationship(
        "Label",
        back_populates="group",
        cascade="all, delete-orphan",
    )
    locations: Mapped[list["Location"]] = relationship(
        "Location",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name='{self.name}')>"
