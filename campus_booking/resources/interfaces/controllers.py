"""
Resources Controllers (API Routes)
==================================

FastAPI routes for resource management and resource queries.

Static paths (search, filter, sort, book) are declared before the
``/{resource_id}/`` routes so they are matched first.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.accounts.interfaces import get_current_user_id
from campus_booking.bookings.infrastructure.repositories import SQLAlchemyBookingRepository
from campus_booking.config import BookingStatus, ResourceStatus, ResourceType
from campus_booking.infrastructure.database import get_session
from campus_booking.resources.application import (
    MessageResponse,
    ResourceBookingRow,
    ResourceCancelResponse,
    ResourceCreate,
    ResourceCreatedResponse,
    ResourceResponse,
    ResourceService,
    ResourceUpdate,
    SortKeyStr,
)
from campus_booking.resources.infrastructure import SQLAlchemyResourceRepository

router = APIRouter(
    prefix="/api/resources",
    tags=["Resources"],
    dependencies=[Depends(get_current_user_id)],
)


async def get_resource_service(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> ResourceService:
    """Get resource service sharing the booking lock registry."""
    return ResourceService(
        resource_repository=SQLAlchemyResourceRepository(session),
        booking_ledger=SQLAlchemyBookingRepository(session),
        locks=request.app.state.resource_locks,
    )


# ========== Queries ==========

@router.get("/", response_model=List[ResourceResponse], summary="List resources")
async def list_resources(service: ResourceService = Depends(get_resource_service)):
    resources = await service.list_resources()
    return [ResourceResponse.from_domain(r) for r in resources]


@router.get(
    "/search/",
    response_model=List[ResourceResponse],
    summary="Search resources",
    description="Case-insensitive substring match over name, type and image URL.",
)
async def search_resources(
    query: Optional[str] = Query(None, max_length=255),
    service: ResourceService = Depends(get_resource_service)
):
    resources = await service.search(query)
    return [ResourceResponse.from_domain(r) for r in resources]


@router.get(
    "/filter/",
    response_model=List[ResourceBookingRow],
    summary="Filter resources joined with their bookings",
    description="""
    One row per resource/booking pair; resources without bookings appear
    once with null booking columns.

    - **type**: resource type
    - **status**: booking status
    - **resource_status**: resource status
    """,
)
async def filter_resources(
    resource_type: Optional[ResourceType] = Query(None, alias="type"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    resource_status: Optional[ResourceStatus] = Query(None),
    service: ResourceService = Depends(get_resource_service)
):
    return await service.filter(resource_type, booking_status, resource_status)


@router.get(
    "/sort/",
    response_model=List[ResourceBookingRow],
    summary="Resources joined with their bookings, sorted",
)
async def sort_resources(
    by: SortKeyStr = Query("date", description="date, name or capacity"),
    service: ResourceService = Depends(get_resource_service)
):
    return await service.sort(by)


# ========== Commands ==========

@router.post(
    "/",
    response_model=ResourceCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a resource",
    responses={201: {"content": {"application/json": {"example": {"resource_id": 1}}}}},
)
async def create_resource(
    request: ResourceCreate,
    service: ResourceService = Depends(get_resource_service)
):
    resource = await service.create_resource(request)
    return ResourceCreatedResponse(resource_id=resource.id)


@router.post(
    "/book/",
    response_model=ResourceCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a resource (legacy path)",
    deprecated=True,
)
async def create_resource_legacy(
    request: ResourceCreate,
    service: ResourceService = Depends(get_resource_service)
):
    resource = await service.create_resource(request)
    return ResourceCreatedResponse(resource_id=resource.id)


@router.get(
    "/{resource_id}/",
    response_model=ResourceResponse,
    summary="Get a resource",
    responses={404: {"description": "Resource not found"}},
)
async def get_resource(
    resource_id: int,
    service: ResourceService = Depends(get_resource_service)
):
    return ResourceResponse.from_domain(await service.get_resource(resource_id))


@router.put(
    "/{resource_id}/update",
    response_model=ResourceResponse,
    summary="Update a resource",
    responses={409: {"description": "Resource is cancelled"}},
)
async def update_resource(
    resource_id: int,
    request: ResourceUpdate,
    service: ResourceService = Depends(get_resource_service)
):
    resource = await service.update_resource(resource_id, request)
    return ResourceResponse.from_domain(resource)


@router.put(
    "/{resource_id}/cancel",
    response_model=ResourceCancelResponse,
    summary="Cancel a resource and its upcoming bookings",
    responses={409: {"description": "Resource already cancelled"}},
)
async def cancel_resource(
    resource_id: int,
    service: ResourceService = Depends(get_resource_service)
):
    resource, cancelled = await service.cancel_resource(resource_id)
    return ResourceCancelResponse(
        resource=ResourceResponse.from_domain(resource),
        cancelled_bookings=cancelled,
    )


@router.put(
    "/{resource_id}/restore",
    response_model=ResourceResponse,
    summary="Make a cancelled resource bookable again",
    responses={409: {"description": "Resource is not cancelled"}},
)
async def restore_resource(
    resource_id: int,
    service: ResourceService = Depends(get_resource_service)
):
    return ResourceResponse.from_domain(await service.restore_resource(resource_id))


@router.delete(
    "/{resource_id}/",
    response_model=MessageResponse,
    summary="Delete a resource",
    responses={409: {"description": "Resource has upcoming bookings"}},
)
async def delete_resource(
    resource_id: int,
    service: ResourceService = Depends(get_resource_service)
):
    await service.delete_resource(resource_id)
    return MessageResponse(message="Resource deleted successfully")
