"""
Contract model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dealership.database import Base, UTCDateTime
import enum


class ContractStatus(str, enum.Enum):
    """Contract status enumeration. Any status may be set from any other."""
    ACTIVE = "active"
    RETURNED = "returned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Contract(Base):
    """Contract database model.

    ``vin_number``, ``customer_name`` and ``customer_phone`` are a snapshot
    taken when the contract is created; later edits to the vehicle or
    customer are not copied over.
    """

    __tablename__ = "ds_contract"

    id = Column(Integer, primary_key=True, index=True)
    contract_number = Column(String(100), unique=True, nullable=False)
    vehicle_id = Column(Integer, ForeignKey("ds_vehicle.id"), nullable=False)
    customer_id = Column(Integer, ForeignKey("ds_customer.id"), nullable=False)
    vin_number = Column(String(17), nullable=False)
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    start_date = Column(UTCDateTime(), nullable=False)
    end_date = Column(UTCDateTime(), nullable=False)
    payment_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    tax_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0, server_default="0")
    deposit_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    status = Column(String(50), default=ContractStatus.ACTIVE.value,
                    server_default=ContractStatus.ACTIVE.value)
    created_by = Column(String(100), nullable=True)
    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())

    # Relationships
    vehicle = relationship("Vehicle", lazy="raise")
    customer = relationship("Customer", lazy="raise")
    images = relationship("ContractImage", back_populates="contract", lazy="raise", passive_deletes=True)
