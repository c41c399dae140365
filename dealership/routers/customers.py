"""
Customer routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from dealership.database import get_db
from dealership.schemas.customer import Customer as CustomerSchema, CustomerCreate, CustomerUpdate
from dealership.services.customers import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


def get_customer_service(db: AsyncSession = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Customer not found"
    )


@router.get("", response_model=List[CustomerSchema])
async def get_customers(service: CustomerService = Depends(get_customer_service)):
    """
    Get all customers, newest first.
    """
    return await service.get_all()


@router.get("/phone/{phone}", response_model=CustomerSchema)
async def get_customer_by_phone(phone: str, service: CustomerService = Depends(get_customer_service)):
    """
    Get a customer by phone number.
    """
    customer = await service.get_by_phone(phone)
    if not customer:
        raise _not_found()
    return customer


@router.get("/search/{name}", response_model=List[CustomerSchema])
async def search_customers(name: str, service: CustomerService = Depends(get_customer_service)):
    """
    Search customers by name.
    """
    return await service.search(name)


@router.get("/{customer_id}", response_model=CustomerSchema)
async def get_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    """
    Get a specific customer by ID.
    """
    customer = await service.get_by_id(customer_id)
    if not customer:
        raise _not_found()
    return customer


@router.post("/new", response_model=CustomerSchema, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer: CustomerCreate,
    service: CustomerService = Depends(get_customer_service)
):
    """
    Create a new customer.
    """
    return await service.create(customer.model_dump())


@router.put("/{customer_id}", response_model=CustomerSchema)
async def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service)
):
    """
    Update a customer. Only the fields present in the body change.
    """
    customer = await service.update(customer_id, customer_update.model_dump(exclude_none=True))
    if not customer:
        raise _not_found()
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    """
    Delete a customer.
    """
    if not await service.delete(customer_id):
        raise _not_found()
    return None
