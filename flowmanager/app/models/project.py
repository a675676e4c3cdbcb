"""
Project database model.

Projects own tasks, assignments, work logs, costs and financial reports.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, Numeric
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class Project(Base):
    """
    Project model.

    progress is a percentage in the 0-100 range; archived projects are kept
    for reporting rather than deleted.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(255), nullable=True, index=True)
    description = Column(Text, nullable=True)
    budget = Column(Numeric(12, 2), nullable=True)
    progress = Column(Integer, default=0, nullable=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    is_archived = Column(Boolean, default=False, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}', progress={self.progress})>"
