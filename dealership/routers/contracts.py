"""
Contract routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from dealership.database import get_db
from dealership.schemas.contract import (
    Contract as ContractSchema,
    ContractCreate,
    ContractDetail,
    ContractUpdate,
)
from dealership.services.contracts import ContractService
from dealership.storage import ObjectStorage, get_storage

router = APIRouter(prefix="/contracts", tags=["contracts"])


def get_contract_service(
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
) -> ContractService:
    return ContractService(db, storage)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Contract not found"
    )


@router.post("/new", response_model=ContractSchema, status_code=status.HTTP_201_CREATED)
async def create_contract(
    contract: ContractCreate,
    service: ContractService = Depends(get_contract_service)
):
    """
    Create a new contract.
    """
    return await service.create(contract.model_dump())


@router.get("", response_model=List[ContractSchema])
async def get_contracts(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    service: ContractService = Depends(get_contract_service)
):
    """
    Get all contracts with pagination, newest first.
    """
    return await service.get_all(skip=skip, limit=limit)


@router.get("/search", response_model=List[ContractSchema])
async def search_contracts(
    q: Optional[str] = None,
    customer_name: Optional[str] = None,
    contract_number: Optional[str] = None,
    vin_number: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    service: ContractService = Depends(get_contract_service)
):
    """
    Search contracts by customer name, contract number, VIN or phone.
    """
    return await service.search(
        q=q,
        customer_name=customer_name,
        contract_number=contract_number,
        vin_number=vin_number,
        skip=skip,
        limit=limit,
    )


@router.get("/{contract_id}", response_model=ContractDetail)
async def get_contract(contract_id: int, service: ContractService = Depends(get_contract_service)):
    """
    Get a contract with its vehicle and customer.
    """
    contract = await service.get_detail(contract_id)
    if not contract:
        raise _not_found()
    return contract


@router.put("/{contract_id}", response_model=ContractSchema)
async def update_contract(
    contract_id: int,
    contract_update: ContractUpdate,
    service: ContractService = Depends(get_contract_service)
):
    """
    Update a contract. Only the fields present in the body change.
    """
    contract = await service.update(contract_id, contract_update.model_dump(exclude_none=True))
    if not contract:
        raise _not_found()
    return contract


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(contract_id: int, service: ContractService = Depends(get_contract_service)):
    """
    Delete a contract and its files.
    """
    if not await service.delete(contract_id):
        raise _not_found()
    return None
