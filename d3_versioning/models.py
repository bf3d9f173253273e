"""
Scoring configuration and audit log models

``scoring_config`` rows are append-only: only ``is_active`` ever changes, and a
partial unique index allows at most one active row.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, Text, text

from database.base import Base, generate_uuid


class ScoringConfig(Base):
    """One version of the scoring weights"""

    __tablename__ = "scoring_config"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    version = Column(Integer, nullable=False, unique=True)
    config_name = Column(String(100), nullable=False)
    config_data = Column(JSON, nullable=False)
    change_reason = Column(Text)
    created_by = Column(String(100))
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_scoring_config_single_active",
            "is_active",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "version": self.version,
            "config_name": self.config_name,
            "config_data": self.config_data,
            "change_reason": self.change_reason,
            "created_by": self.created_by,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AuditLog(Base):
    """Append-only record of configuration changes"""

    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    table_name = Column(String(100), nullable=False)
    record_id = Column(String(36), nullable=False, index=True)
    action = Column(String(20), nullable=False)  # create, revert, deactivate
    old_values = Column(JSON)
    new_values = Column(JSON)
    user_id = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("idx_audit_log_table_created", "table_name", "created_at"),)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "table_name": self.table_name,
            "record_id": self.record_id,
            "action": self.action,
            "old_values": self.old_values,
            "new_values": self.new_values,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
