"""Admin bootstrap: make sure the configured admin account exists at startup."""

from enum import Enum as PyEnum
from typing import Callable

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import AdminBootstrapConfig
from app.core.exceptions import (
    ConfigurationException,
    HashingException,
    InventoryException,
    StoreException,
)
from app.core.security import hash_password
from app.repositories.group_repository import GroupRepository
from app.repositories.user_repository import UserRepository
from app.services.default_resource_service import DefaultResourceSeeder

logger = structlog.get_logger(__name__)

ADMIN_GROUP_NAME = "Admin Group"


class BootstrapOutcome(str, PyEnum):
    SKIPPED = "skipped"
    ALREADY_SATISFIED = "already_satisfied"
    PROMOTED = "promoted"
    CREATED = "created"
    FAILED = "failed"


class AdminBootstrapper:
    """
    Reconciles the configured admin identity against the user store.

    Idempotent: the email lookup decides between create and promote, so
    repeated runs with the same configuration converge on one user and
    one group. Never raises; every failure, including raw query errors,
    is rolled back and becomes BootstrapOutcome.FAILED.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.group_repo = GroupRepository(db)
        self.seeder = DefaultResourceSeeder(db)

    def reconcile(self, request: AdminBootstrapConfig) -> BootstrapOutcome:
        if not request.enabled:
            logger.debug("admin_bootstrap_not_requested")
            return BootstrapOutcome.SKIPPED

        try:
            request.require_complete()
        except ConfigurationException as e:
            logger.warning("admin_bootstrap_misconfigured", error=str(e))
            return BootstrapOutcome.SKIPPED

        try:
            existing = self.user_repo.get_by_email(request.email)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("admin_bootstrap_lookup_failed", email=request.email, error=str(e))
            return BootstrapOutcome.FAILED

        if existing is not None:
            if existing.is_superuser:
                logger.info("admin_already_superuser", email=existing.email)
                return BootstrapOutcome.ALREADY_SATISFIED
            return self._promote(existing.id, request)

        return self._create(request)

    def _promote(self, user_id, request: AdminBootstrapConfig) -> BootstrapOutcome:
        logger.info("promoting_admin_user", email=request.email, user_id=str(user_id))
        try:
            updated = self.user_repo.update(user_id, request.name, request.email)
        except (StoreException, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error("admin_update_failed", user_id=str(user_id), error=str(e))
            return BootstrapOutcome.FAILED
        if updated is None:
            logger.error("admin_update_failed", user_id=str(user_id), error="user disappeared")
            return BootstrapOutcome.FAILED

        try:
            promoted = self.user_repo.set_superuser(user_id, True)
        except (StoreException, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error("admin_set_superuser_failed", user_id=str(user_id), error=str(e))
            return BootstrapOutcome.FAILED
        if promoted is None:
            logger.error("admin_set_superuser_failed", user_id=str(user_id), error="user disappeared")
            return BootstrapOutcome.FAILED

        logger.info("admin_promoted", user_id=str(user_id))
        return BootstrapOutcome.PROMOTED

    def _create(self, request: AdminBootstrapConfig) -> BootstrapOutcome:
        logger.info("creating_admin_user", email=request.email)
        try:
            password_hash = hash_password(request.password)
            # group and owner commit together; a failed owner insert leaves no group
            group = self.group_repo.create(ADMIN_GROUP_NAME, commit=False)
            user = self.user_repo.create(
                name=request.name,
                email=request.email,
                password_hash=password_hash,
                group_id=group.id,
                is_superuser=True,
                is_owner=True,
            )
        except (StoreException, HashingException, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error("admin_create_failed", email=request.email, error=str(e))
            return BootstrapOutcome.FAILED

        logger.info("admin_created", email=user.email, user_id=str(user.id))

        report = self.seeder.seed(user.group_id)
        if not report.ok:
            logger.warning("admin_defaults_incomplete", failures=report.failures)

        return BootstrapOutcome.CREATED


def run_admin_bootstrap(
    session_factory: Callable[[], Session], request: AdminBootstrapConfig
) -> BootstrapOutcome:
    """
    Process-start entry point.

    Opens a session only when bootstrap is enabled and swallows every
    failure so the service always starts.
    """
    if not request.enabled:
        logger.debug("admin_bootstrap_not_requested")
        return BootstrapOutcome.SKIPPED

    try:
        db = session_factory()
    except (SQLAlchemyError, InventoryException) as e:
        logger.error("admin_bootstrap_session_failed", error=str(e))
        return BootstrapOutcome.FAILED

    try:
        outcome = AdminBootstrapper(db).reconcile(request)
    except (SQLAlchemyError, InventoryException) as e:
        db.rollback()
        logger.exception("admin_bootstrap_failed", error=str(e))
        outcome = BootstrapOutcome.FAILED
    finally:
        db.close()

    logger.info("admin_bootstrap_finished", outcome=outcome.value)
    return outcome
