"""
Vehicle model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric
from sqlalchemy.sql import func
from dealership.database import Base, UTCDateTime
import enum


class VehicleStatus(str, enum.Enum):
    """Vehicle status enumeration."""
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    SOLD = "sold"


class Vehicle(Base):
    """Vehicle database model."""

    __tablename__ = "ds_vehicle"

    id = Column(Integer, primary_key=True, index=True)
    vin_number = Column(String(17), unique=True, nullable=False)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(50), nullable=False)
    mileage = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    status = Column(String(50), default=VehicleStatus.AVAILABLE.value,
                    server_default=VehicleStatus.AVAILABLE.value)
    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())
