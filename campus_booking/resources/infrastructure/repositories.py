"""
Resources Infrastructure Repositories
=====================================

SQLAlchemy implementation of the resource repository, including the
resources LEFT JOIN bookings read queries.
"""

from typing import List, Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.bookings.infrastructure.models import BookingModel
from campus_booking.config import BookingStatus, ResourceStatus, ResourceType
from campus_booking.core import RepositoryException
from campus_booking.resources.application.dto import ResourceBookingRow, SortKeyStr
from campus_booking.resources.application.services import IResourceRepository
from campus_booking.resources.domain import Resource
from campus_booking.resources.infrastructure.models import ResourceModel


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLAlchemyResourceRepository(IResourceRepository):
    """
    SQLAlchemy implementation of resource repository.

    Handles persistence of Resource entities.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_domain(model: ResourceModel) -> Resource:
        return Resource(
            id=model.resource_id,
            name=model.name,
            type=model.type,
            capacity=model.capacity,
            image_url=model.image_url,
            status=model.status,
        )

    def _joined_rows_stmt(self):
        return (
            select(
                ResourceModel.resource_id,
                ResourceModel.name,
                ResourceModel.type,
                ResourceModel.capacity,
                ResourceModel.image_url,
                ResourceModel.status.label("resource_status"),
                BookingModel.booking_id,
                BookingModel.status.label("booking_status"),
                BookingModel.booking_date,
            )
            .outerjoin(BookingModel, BookingModel.resource_id == ResourceModel.resource_id)
        )

    async def get_by_id(self, resource_id: int) -> Optional[Resource]:
        """Get resource by id."""
        model = await self._session.get(ResourceModel, resource_id)
        return self._to_domain(model) if model else None

    async def get_for_update(self, resource_id: int) -> Optional[Resource]:
        """Get resource by id with a row lock (no-op on SQLite)."""
        stmt = (
            select(ResourceModel)
            .where(ResourceModel.resource_id == resource_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_all(self) -> List[Resource]:
        """All resources ordered by id."""
        stmt = select(ResourceModel).order_by(ResourceModel.resource_id)
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def create(self, resource: Resource) -> Resource:
        """Create new resource."""
        model = ResourceModel(
            name=resource.name,
            type=resource.type.value,
            capacity=resource.capacity,
            image_url=resource.image_url,
            status=resource.status.value,
        )
        self._session.add(model)
        await self._session.flush()

        resource.id = model.resource_id
        return resource

    async def update(self, resource: Resource) -> Resource:
        """Update existing resource."""
        model = await self._session.get(ResourceModel, resource.id)
        if model is None:
            raise RepositoryException(f"Resource {resource.id} not found")

        model.name = resource.name
        model.type = resource.type.value
        model.capacity = resource.capacity
        model.image_url = resource.image_url
        model.status = resource.status.value

        await self._session.flush()
        return resource

    async def delete(self, resource_id: int) -> None:
        """Delete a resource together with its booking history."""
        await self._session.execute(
            delete(BookingModel).where(BookingModel.resource_id == resource_id)
        )
        await self._session.execute(
            delete(ResourceModel).where(ResourceModel.resource_id == resource_id)
        )
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def search(self, query: str) -> List[Resource]:
        """Case-insensitive substring search over name, type and image_url."""
        pattern = _like_pattern(query)
        stmt = (
            select(ResourceModel)
            .where(
                ResourceModel.name.ilike(pattern, escape="\\")
                | ResourceModel.type.ilike(pattern, escape="\\")
                | ResourceModel.image_url.ilike(pattern, escape="\\")
            )
            .order_by(ResourceModel.resource_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_with_bookings(
        self,
        resource_type: Optional[ResourceType] = None,
        booking_status: Optional[BookingStatus] = None,
        resource_status: Optional[ResourceStatus] = None,
    ) -> List[ResourceBookingRow]:
        """Resources LEFT JOIN bookings, filtered."""
        conditions = []
        if resource_type is not None:
            conditions.append(ResourceModel.type == ResourceType(resource_type).value)
        if booking_status is not None:
            conditions.append(BookingModel.status == BookingStatus(booking_status).value)
        if resource_status is not None:
            conditions.append(ResourceModel.status == ResourceStatus(resource_status).value)

        stmt = self._joined_rows_stmt()
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(ResourceModel.resource_id, BookingModel.booking_id)

        result = await self._session.execute(stmt)
        return [ResourceBookingRow.model_validate(row) for row in result.all()]

    async def list_sorted_with_bookings(self, sort_by: SortKeyStr) -> List[ResourceBookingRow]:
        """Resources LEFT JOIN bookings, ordered by date, name or capacity."""
        stmt = self._joined_rows_stmt()

        if sort_by == "date":
            stmt = stmt.order_by(
                BookingModel.booking_date.is_(None),
                BookingModel.booking_date.asc(),
                BookingModel.start_time.asc(),
                ResourceModel.resource_id,
            )
        elif sort_by == "name":
            stmt = stmt.order_by(ResourceModel.name.asc(), ResourceModel.resource_id)
        elif sort_by == "capacity":
            stmt = stmt.order_by(ResourceModel.capacity.asc(), ResourceModel.resource_id)
        else:
            raise RepositoryException(f"Unsupported sort key: {sort_by}")

        result = await self._session.execute(stmt)
        return [ResourceBookingRow.model_validate(row) for row in result.all()]
