"""
User profile database model.

Holds employee data: name, position, employment type, supervisor,
salary rate and remaining vacation days.
"""

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from flowmanager.app.db.session import Base


class UserProfile(Base):
    """
    Employee profile (at most one per user).

    supervisor_id must point at a user with an administrative-tier role;
    vacation_days_total is the remaining balance and shrinks as
    balance-consuming vacations are booked.
    """
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), unique=True, nullable=False)

    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    employment_type = Column(String(100), nullable=True)

    # Self-referencing hierarchy
    supervisor_id = Column(Integer, ForeignKey('users.id'), nullable=True, index=True)

    salary_rate = Column(Numeric(10, 2), nullable=True)
    vacation_days_total = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<UserProfile(id={self.id}, user_id={self.user_id}, name='{self.first_name} {self.last_name}')>"
