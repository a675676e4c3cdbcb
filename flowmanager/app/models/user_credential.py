"""
User credential database model.
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from flowmanager.app.db.session import Base


class UserCredential(Base):
    """
    Stored password hash of a user (exactly one per user).

    Kept apart from users so identity rows never carry secrets.
    """
    __tablename__ = "user_credentials"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    password_updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    def __repr__(self):
        return f"<UserCredential(id={self.id}, user_id={self.user_id})>"
