"""
Pydantic schemas for Vehicle.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from dealership.models.vehicle import VehicleStatus


class VehicleBase(BaseModel):
    """Base vehicle schema with common fields."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    vin_number: str = Field(min_length=17, max_length=17)
    make: str = Field(min_length=1)
    model: str = Field(min_length=1)
    year: int = Field(gt=0)
    color: str = Field(min_length=1)
    mileage: int = Field(default=0, ge=0)
    price: float = Field(default=0, ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE


class VehicleCreate(VehicleBase):
    """Schema for creating a vehicle."""
    pass


class VehicleUpdate(BaseModel):
    """Schema for updating a vehicle."""
    model_config = ConfigDict(use_enum_values=True)

    vin_number: Optional[str] = Field(default=None, min_length=17, max_length=17)
    make: Optional[str] = Field(default=None, min_length=1)
    model: Optional[str] = Field(default=None, min_length=1)
    year: Optional[int] = Field(default=None, gt=0)
    color: Optional[str] = Field(default=None, min_length=1)
    mileage: Optional[int] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    status: Optional[VehicleStatus] = None


class Vehicle(VehicleBase):
    """Schema for vehicle responses."""
    # Legacy rows may carry values outside the current enumeration.
    status: str
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
