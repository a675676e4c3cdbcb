"""
Lookup table models (vacation and expense dictionaries).
"""

from sqlalchemy import Column, Integer, String
from flowmanager.app.db.session import Base


class VacationType(Base):
    __tablename__ = "vacation_types"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)


class VacationStatus(Base):
    __tablename__ = "vacation_statuses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)


class ExpenseCategory(Base):
    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)


class ExpenseStatus(Base):
    __tablename__ = "expense_statuses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
