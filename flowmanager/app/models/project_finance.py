"""
Project finance database models.

ProjectCost records money spent on a project; FinancialReport stores
periodic roll-ups of hours, costs and margin.
"""

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class ProjectCost(Base):
    __tablename__ = "project_costs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=True, index=True)
    type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=True)
    recorded_at = Column(Date, server_default=func.current_date(), nullable=True)

    def __repr__(self):
        return f"<ProjectCost(id={self.id}, project_id={self.project_id}, amount={self.amount})>"


class FinancialReport(Base):
    __tablename__ = "financial_reports"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=True, index=True)
    total_hours = Column(Numeric(10, 2), nullable=True)
    total_costs = Column(Numeric(12, 2), nullable=True)
    profit_margin = Column(Numeric(5, 2), nullable=True)
    report_date = Column(Date, server_default=func.current_date(), nullable=True)

    def __repr__(self):
        return f"<FinancialReport(id={self.id}, project_id={self.project_id}, date={self.report_date})>"
