"""
Configuration Version Store

Append-only history of scoring weight configurations with a single active
version. Every change goes through ``create_version``; reverting re-publishes
an old document as a new version and never reactivates the old row.
"""

import threading
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, PersistenceError, ValidationError
from core.logging import get_logger
from core.metrics import metrics
from database.session import SessionLocal, session_scope

from .defaults import load_weights_document
from .models import AuditLog, ScoringConfig
from .schemas import ScoringConfiguration, WeightConfiguration, validate_configuration

logger = get_logger("scoring_config.store", domain="d3_versioning")

# Writers in this process queue here; the row lock covers other processes
_version_lock = threading.RLock()

ConfigurationDocument = Union[WeightConfiguration, Mapping[str, Any]]


class ConfigurationVersionStore:
    """Versioned scoring configurations backed by ``scoring_config`` and ``audit_log``"""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def _audit(
        self,
        db: Session,
        row: ScoringConfig,
        action: str,
        old_values: Optional[dict] = None,
        new_values: Optional[dict] = None,
        actor: Optional[str] = None,
    ) -> None:
        db.add(
            AuditLog(
                table_name=ScoringConfig.__tablename__,
                record_id=row.id,
                action=action,
                old_values=old_values,
                new_values=new_values,
                user_id=actor,
            )
        )

    def create_version(
        self,
        document: ConfigurationDocument,
        reason: str,
        actor: Optional[str] = None,
        action: str = "create",
    ) -> ScoringConfiguration:
        """
        Store a new configuration version and make it the active one

        Args:
            document: Weights document (``weights`` plus optional ``sectorOverrides``)
            reason: Why the weights are changing
            actor: Who made the change, recorded in the audit log
            action: Audit action for the new row

        Returns:
            Snapshot of the newly active version

        Raises:
            InvalidConfigurationError: document is malformed; nothing is written
            ValidationError: reason is blank; nothing is written
            PersistenceError: the write failed and was rolled back
        """
        configuration = validate_configuration(document)
        if not reason or not reason.strip():
            raise ValidationError("A change reason is required", field="change_reason")
        config_data = configuration.to_document()

        with _version_lock, session_scope(self.session_factory) as db:
            try:
                previous = (
                    db.query(ScoringConfig).filter(ScoringConfig.is_active.is_(True)).with_for_update().first()
                )
                latest = db.query(func.max(ScoringConfig.version)).scalar() or 0
                new_version = latest + 1

                if previous is not None:
                    previous.is_active = False
                    self._audit(
                        db,
                        previous,
                        "deactivate",
                        old_values={"version": previous.version, "is_active": True},
                        new_values={"version": previous.version, "is_active": False},
                        actor=actor,
                    )
                    # The single-active index must see the flip before the insert
                    db.flush()

                row = ScoringConfig(
                    version=new_version,
                    config_name=f"Version {new_version}",
                    config_data=config_data,
                    change_reason=reason,
                    created_by=actor,
                    is_active=True,
                )
                db.add(row)
                db.flush()
                self._audit(
                    db,
                    row,
                    action,
                    old_values={"version": previous.version, "config_data": previous.config_data}
                    if previous is not None
                    else None,
                    new_values={"version": new_version, "config_data": config_data, "change_reason": reason},
                    actor=actor,
                )
                db.commit()
                db.refresh(row)
                created = ScoringConfiguration.from_row(row)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Database error creating scoring configuration: {e}")
                raise PersistenceError(
                    f"Failed to create scoring configuration: {e}", operation="create_version"
                ) from e

        metrics.track_config_version(action, created.version)
        logger.info(f"Activated scoring configuration version {created.version} ({action}): {reason}")
        return created

    def revert_to_version(self, target_version: int, reason: str, actor: Optional[str] = None) -> ScoringConfiguration:
        """
        Publish the weights of ``target_version`` as a new active version

        Raises:
            NotFoundError: target version does not exist
        """
        target = self.get_version(target_version)
        return self.create_version(
            target.to_document(),
            f"Reverted to version {target_version}: {reason}",
            actor=actor,
            action="revert",
        )

    def get_active_configuration(self) -> Optional[ScoringConfiguration]:
        """The active version, or None while the store is empty"""
        with session_scope(self.session_factory) as db:
            try:
                row = db.query(ScoringConfig).filter(ScoringConfig.is_active.is_(True)).first()
                return ScoringConfiguration.from_row(row) if row is not None else None
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Failed to read active scoring configuration: {e}", operation="get_active_configuration"
                ) from e

    def get_version(self, version: int) -> ScoringConfiguration:
        with session_scope(self.session_factory) as db:
            try:
                row = db.query(ScoringConfig).filter(ScoringConfig.version == version).first()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Failed to read scoring configuration {version}: {e}", operation="get_version"
                ) from e
            if row is None:
                raise NotFoundError("Scoring configuration version", version)
            return ScoringConfiguration.from_row(row)

    def get_history(self, limit: Optional[int] = None) -> List[ScoringConfiguration]:
        """All versions, newest first"""
        with session_scope(self.session_factory) as db:
            try:
                query = db.query(ScoringConfig).order_by(ScoringConfig.version.desc())
                if limit:
                    query = query.limit(limit)
                return [ScoringConfiguration.from_row(row) for row in query.all()]
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to read scoring history: {e}", operation="get_history") from e

    def get_audit_log(self, limit: Optional[int] = None) -> List[dict]:
        """Audit entries for configuration changes, newest first"""
        with session_scope(self.session_factory) as db:
            try:
                query = (
                    db.query(AuditLog)
                    .filter(AuditLog.table_name == ScoringConfig.__tablename__)
                    .order_by(AuditLog.created_at.desc())
                )
                if limit:
                    query = query.limit(limit)
                return [entry.to_dict() for entry in query.all()]
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to read audit log: {e}", operation="get_audit_log") from e

    def ensure_default(self, actor: Optional[str] = "system") -> ScoringConfiguration:
        """Seed version 1 from the default weights document when no version is active"""
        with _version_lock:
            active = self.get_active_configuration()
            if active is not None:
                return active
            logger.info("No active scoring configuration, seeding default weights")
            return self.create_version(load_weights_document(), "Initial default configuration", actor=actor)
