"""
Pydantic schemas for Customer.
"""
from pydantic import BaseModel, EmailStr, ConfigDict, Field
from datetime import datetime
from typing import Optional


class CustomerBase(BaseModel):
    """Base customer schema with common fields."""
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""
    pass


class CustomerUpdate(BaseModel):
    """Schema for updating a customer."""
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None


class Customer(CustomerBase):
    """Schema for customer responses."""
    email: Optional[str] = None
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
