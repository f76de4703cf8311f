"""
Resources Infrastructure Models
===============================

SQLAlchemy ORM models for the resources module.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from campus_booking.config import ResourceStatus
from campus_booking.infrastructure.database import Base


class ResourceModel(Base):
    """
    Database model for Resource entity.

    Maps to the 'resources' table.
    """
    __tablename__ = "resources"

    resource_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ResourceStatus.AVAILABLE.value
    )
