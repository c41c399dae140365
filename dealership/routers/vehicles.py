"""
Vehicle routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from dealership.database import get_db
from dealership.schemas.vehicle import Vehicle as VehicleSchema, VehicleCreate, VehicleUpdate
from dealership.services.vehicles import VehicleService

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def get_vehicle_service(db: AsyncSession = Depends(get_db)) -> VehicleService:
    return VehicleService(db)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Vehicle not found"
    )


@router.get("", response_model=List[VehicleSchema])
async def get_vehicles(service: VehicleService = Depends(get_vehicle_service)):
    """
    Get all vehicles, newest first.
    """
    return await service.get_all()


@router.get("/vin/{vin}", response_model=VehicleSchema)
async def get_vehicle_by_vin(vin: str, service: VehicleService = Depends(get_vehicle_service)):
    """
    Get a vehicle by its VIN.
    """
    vehicle = await service.get_by_vin(vin)
    if not vehicle:
        raise _not_found()
    return vehicle


@router.get("/search/{text}", response_model=List[VehicleSchema])
async def search_vehicles(text: str, service: VehicleService = Depends(get_vehicle_service)):
    """
    Search vehicles by make and model.
    """
    return await service.search(text)


@router.get("/{vehicle_id}", response_model=VehicleSchema)
async def get_vehicle(vehicle_id: int, service: VehicleService = Depends(get_vehicle_service)):
    """
    Get a specific vehicle by ID.
    """
    vehicle = await service.get_by_id(vehicle_id)
    if not vehicle:
        raise _not_found()
    return vehicle


@router.post("/new", response_model=VehicleSchema, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle: VehicleCreate,
    service: VehicleService = Depends(get_vehicle_service)
):
    """
    Create a new vehicle.
    """
    return await service.create(vehicle.model_dump())


@router.put("/{vehicle_id}", response_model=VehicleSchema)
async def update_vehicle(
    vehicle_id: int,
    vehicle_update: VehicleUpdate,
    service: VehicleService = Depends(get_vehicle_service)
):
    """
    Update a vehicle. Only the fields present in the body change.
    """
    vehicle = await service.update(vehicle_id, vehicle_update.model_dump(exclude_none=True))
    if not vehicle:
        raise _not_found()
    return vehicle


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(vehicle_id: int, service: VehicleService = Depends(get_vehicle_service)):
    """
    Delete a vehicle.
    """
    if not await service.delete(vehicle_id):
        raise _not_found()
    return None
