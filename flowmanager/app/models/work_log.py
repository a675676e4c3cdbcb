"""
Work log database model.
"""

from sqlalchemy import Column, Integer, Text, Boolean, Date, Numeric, ForeignKey
from flowmanager.app.db.session import Base


class WorkLog(Base):
    """Hours a user worked on a project (optionally on one of its tasks) on a given day."""
    __tablename__ = "work_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=True, index=True)
    task_id = Column(Integer, ForeignKey('tasks.id'), nullable=True, index=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=True, index=True)

    date = Column(Date, nullable=True)
    hours_worked = Column(Numeric(5, 2), nullable=True)
    is_overtime = Column(Boolean, default=False, nullable=False)
    note = Column(Text, nullable=True)

    def __repr__(self):
        return f"<WorkLog(id={self.id}, user_id={self.user_id}, project_id={self.project_id}, hours={self.hours_worked})>"
