"""
Contract file routes.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from dealership.config import get_settings
from dealership.database import get_db
from dealership.schemas.contract_file import ContractFile, ContractFileUploaded, StorageStatus
from dealership.services.contract_files import ContractFileService
from dealership.storage import ObjectStorage, get_storage

router = APIRouter(prefix="/contract-files", tags=["contract-files"])


def get_contract_file_service(
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
) -> ContractFileService:
    return ContractFileService(db, storage, get_settings())


@router.post("/upload", response_model=ContractFileUploaded, status_code=status.HTTP_201_CREATED)
async def upload_contract_file(
    file: UploadFile = File(...),
    contract_id: int = Form(..., gt=0),
    uploaded_by: str = Form(..., min_length=1),
    description: Optional[str] = Form(None),
    service: ContractFileService = Depends(get_contract_file_service)
):
    """
    Upload a file for a contract to object storage.
    """
    if file.size is not None:
        service.check_size(file.size)
    # One byte past the limit is enough to reject an oversized body.
    data = await file.read(service.max_upload_size + 1)
    record = await service.upload(
        contract_id=contract_id,
        file_name=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        data=data,
        uploaded_by=uploaded_by,
        description=description,
    )
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contract not found"
        )
    return {"message": "File uploaded successfully", "file": record}


@router.get("/storage/status", response_model=StorageStatus)
async def storage_status(storage: ObjectStorage = Depends(get_storage)):
    """
    Report object storage configuration without exposing secrets.
    """
    return storage.status()


@router.get("/contract/{contract_id}", response_model=List[ContractFile])
async def get_contract_files(
    contract_id: int,
    service: ContractFileService = Depends(get_contract_file_service)
):
    """
    Get all files attached to a contract.
    """
    return await service.list_for_contract(contract_id)


@router.get("/{file_id}", response_model=ContractFile)
async def get_contract_file(
    file_id: int,
    service: ContractFileService = Depends(get_contract_file_service)
):
    """
    Get a file's metadata by ID.
    """
    record = await service.get_by_id(file_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )
    return record


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract_file(
    file_id: int,
    service: ContractFileService = Depends(get_contract_file_service)
):
    """
    Delete a file from object storage and remove its record.
    """
    if not await service.delete(file_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )
    return None
