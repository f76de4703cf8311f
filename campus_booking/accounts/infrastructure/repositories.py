"""
Accounts Infrastructure Repositories
====================================

SQLAlchemy implementation of the user repository.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.accounts.application.services import IUserRepository
from campus_booking.accounts.domain import User
from campus_booking.accounts.infrastructure.models import UserModel
from campus_booking.core import DuplicateException


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation for users."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password_hash=model.password,
        )

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by id."""
        model = await self._session.get(UserModel, user_id)
        return self._to_domain(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def create(self, user: User) -> User:
        """Create new user."""
        model = UserModel(name=user.name, email=user.email, password=user.password_hash)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateException("User already exists", {"email": user.email}) from e

        user.id = model.id
        return user
