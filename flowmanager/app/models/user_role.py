"""
User role database model.
"""

from sqlalchemy import Column, Integer, String, Text
from flowmanager.app.db.session import Base


class UserRole(Base):
    """Named permission tier assigned to users (lookup table)."""
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<UserRole(id={self.id}, name='{self.name}')>"
