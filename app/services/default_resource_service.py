"""Seeding of the starter labels and locations every new group receives."""

import uuid
from dataclasses import dataclass, field

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import StoreException
from app.repositories.label_repository import LabelRepository
from app.repositories.location_repository import LocationRepository

logger = structlog.get_logger(__name__)

DEFAULT_LABELS: tuple[tuple[str, str], ...] = (
    ("Electronics", "#FF5733"),
    ("Books", "#33FF57"),
    ("Clothing", "#3357FF"),
    ("Tools", "#F3FF33"),
    ("Furniture", "#33FFF3"),
)

DEFAULT_LOCATIONS: tuple[str, ...] = ("Home", "Garage", "Storage", "Office")


@dataclass
class SeedReport:
    """Outcome of seeding one group"""

    labels_created: int = 0
    locations_created: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class DefaultResourceSeeder:
    """
    Creates the default labels and locations for a freshly created group.

    Best effort: each item is committed separately and a failing item is
    logged and recorded without stopping the rest. Nothing is rolled back
    beyond the failing item, and nothing is raised to the caller.
    """

    def __init__(self, db: Session):
        self.db = db
        self.label_repo = LabelRepository(db)
        self.location_repo = LocationRepository(db)

    def seed(self, group_id: uuid.UUID) -> SeedReport:
        report = SeedReport()

        logger.debug("seeding_default_labels", group_id=str(group_id))
        for name, color in DEFAULT_LABELS:
            try:
                self.label_repo.create(group_id, name, color)
                report.labels_created += 1
            except StoreException as e:
                logger.error("default_label_failed", group_id=str(group_id), label=name, error=str(e))
                report.failures.append(f"label:{name}")

        logger.debug("seeding_default_locations", group_id=str(group_id))
        for name in DEFAULT_LOCATIONS:
            try:
                self.location_repo.create(group_id, name)
                report.locations_created += 1
            except StoreException as e:
                logger.error(
                    "default_location_failed", group_id=str(group_id), location=name, error=str(e)
                )
                report.failures.append(f"location:{name}")

        return report
