"""
Pydantic schemas for Contract.
"""
from pydantic import BaseModel, ConfigDict, Field, PositiveInt
from datetime import datetime
from typing import List, Optional
from dealership.models.contract import ContractStatus
from dealership.schemas.vehicle import Vehicle
from dealership.schemas.customer import Customer
from dealership.schemas.contract_file import ContractFile


class ContractBase(BaseModel):
    """Base contract schema with common fields."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    contract_number: str = Field(min_length=1)
    vehicle_id: PositiveInt
    customer_id: PositiveInt
    start_date: datetime
    end_date: datetime
    payment_amount: float = Field(gt=0)
    tax_amount: float = Field(default=0, ge=0)
    deposit_amount: float = Field(ge=0)
    status: ContractStatus = ContractStatus.ACTIVE
    created_by: Optional[str] = None


class ContractCreate(ContractBase):
    """Schema for creating a contract.

    The denormalized fields are optional; omitted ones are copied from the
    referenced vehicle and customer.
    """
    vin_number: Optional[str] = Field(default=None, min_length=17, max_length=17)
    customer_name: Optional[str] = Field(default=None, min_length=1)
    customer_phone: Optional[str] = Field(default=None, min_length=1)


class ContractUpdate(BaseModel):
    """Schema for updating a contract."""
    model_config = ConfigDict(use_enum_values=True)

    contract_number: Optional[str] = Field(default=None, min_length=1)
    vehicle_id: Optional[PositiveInt] = None
    customer_id: Optional[PositiveInt] = None
    vin_number: Optional[str] = Field(default=None, min_length=17, max_length=17)
    customer_name: Optional[str] = Field(default=None, min_length=1)
    customer_phone: Optional[str] = Field(default=None, min_length=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    payment_amount: Optional[float] = Field(default=None, gt=0)
    tax_amount: Optional[float] = Field(default=None, ge=0)
    deposit_amount: Optional[float] = Field(default=None, ge=0)
    status: Optional[ContractStatus] = None
    created_by: Optional[str] = None


class Contract(ContractBase):
    """Schema for contract responses."""
    status: str
    id: int
    vin_number: str
    customer_name: str
    customer_phone: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class ContractDetail(Contract):
    """Contract with its vehicle and customer resolved."""
    images: List[ContractFile] = []
    vehicle: Optional[Vehicle] = None
    customer: Optional[Customer] = None
