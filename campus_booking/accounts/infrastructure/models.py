"""
Accounts Infrastructure Models
==============================

SQLAlchemy ORM models for the accounts module.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from campus_booking.infrastructure.database import Base


class UserModel(Base):
    """
    Database model for User entity.

    Maps to the 'users' table.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
