"""
Pydantic schemas for contract files.
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class ContractFile(BaseModel):
    """Schema for contract file responses."""
    id: int
    contract_id: int
    file_name: str
    file_url: str
    file_size: int
    file_type: str
    description: Optional[str] = None
    uploaded_by: Optional[str] = None
    image_path: str
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContractFileUploaded(BaseModel):
    """Schema returned after a successful upload."""
    message: str = "File uploaded successfully"
    file: ContractFile


class StorageStatus(BaseModel):
    """Object storage configuration report. Secrets are never echoed."""
    endpoint: str
    bucket: str
    region: str
    access_key_id: str
    secret_access_key: str
    cdn_endpoint: str
    is_configured: bool
    errors: list[str]
