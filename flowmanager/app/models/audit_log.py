"""
Audit Log Database Model.

Tracks account management, deletions and login attempts.
Rows are not FK-linked to users so the trail survives cascading deletes.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking security events and admin actions.

    Events logged:
    - USER_CREATED / USER_UPDATED / USER_DELETED
    - PROJECT_DELETED
    - LOGIN_SUCCESS / LOGIN_FAILED / LOGOUT
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system and CLI actions)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    action = Column(String(100), nullable=False, index=True)

    # Entity acted upon (user id for account actions, project id for PROJECT_DELETED)
    target_id = Column(Integer, index=True, nullable=True)
    target_email = Column(String(255), nullable=True)

    meta_data = Column(JSON, nullable=True)

    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email}, target={self.target_id})>"
