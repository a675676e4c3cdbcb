"""
Vacation database model.
"""

from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class Vacation(Base):
    """Leave request of a user; type and status point at lookup tables."""
    __tablename__ = "vacations"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=True, index=True)
    type_id = Column(Integer, ForeignKey('vacation_types.id'), nullable=True)
    status_id = Column(Integer, ForeignKey('vacation_statuses.id'), nullable=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vacation(id={self.id}, user_id={self.user_id}, {self.start_date}..{self.end_date})>"
