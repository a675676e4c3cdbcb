"""
Project assignment database model (user <-> project join).
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class ProjectAssignment(Base):
    """
    Assignment of a user to a project with a role on that project.

    A project holds at most one assignment with the "Manager" role.
    """
    __tablename__ = "project_assignments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False, index=True)
    role_on_project = Column(String(255), nullable=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    def __repr__(self):
        return f"<ProjectAssignment(id={self.id}, user_id={self.user_id}, project_id={self.project_id}, role='{self.role_on_project}')>"
