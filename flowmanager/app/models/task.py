"""
Task database model.
"""

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base
from flowmanager.app.models.enums import TaskStatus


class Task(Base):
    """Unit of work inside a project, optionally assigned to a user."""
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=True, index=True)

    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    assigned_to_id = Column(Integer, ForeignKey('users.id'), nullable=True, index=True)
    status = Column(String(100), default=TaskStatus.TODO.value, nullable=True)
    estimated_hours = Column(Numeric(6, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Task(id={self.id}, project_id={self.project_id}, title='{self.title}')>"
