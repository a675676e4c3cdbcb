"""
Expense database model.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class Expense(Base):
    """
    Company expense, optionally charged to a project.

    Expenses outlive their project: deleting a project detaches them.
    """
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    category_id = Column(Integer, ForeignKey('expense_categories.id'), nullable=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=True)
    status_id = Column(Integer, ForeignKey('expense_statuses.id'), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Expense(id={self.id}, name='{self.name}', amount={self.amount})>"
