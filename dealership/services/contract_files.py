"""
Contract file uploads: bytes go to object storage, metadata to ds_contract_image.
"""
import logging
from typing import Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from dealership.config import Settings
from dealership.exceptions import InvalidUploadError
from dealership.models.contract import Contract
from dealership.models.contract_image import ContractImage
from dealership.storage import ObjectStorage, generate_file_path

logger = logging.getLogger(__name__)

ALLOWED_FILE_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/markdown",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})


class ContractFileService:
    def __init__(self, db: AsyncSession, storage: ObjectStorage, settings: Settings):
        self.db = db
        self.storage = storage
        self.max_upload_size = settings.max_upload_size
        self.max_files_per_contract = settings.max_files_per_contract

    def validate(self, file_name: str, content_type: str, size: int) -> None:
        if not file_name:
            raise InvalidUploadError("File name is required")
        if content_type not in ALLOWED_FILE_TYPES:
            raise InvalidUploadError(
                "Invalid file type. Only images, PDFs, and documents are allowed."
            )
        if size == 0:
            raise InvalidUploadError("File is empty")
        self.check_size(size)

    def check_size(self, size: int) -> None:
        if size > self.max_upload_size:
            raise InvalidUploadError(
                f"File exceeds the {self.max_upload_size // (1024 * 1024)}MB limit"
            )

    async def count_for_contract(self, contract_id: int) -> int:
        return await self.db.scalar(
            select(func.count()).select_from(ContractImage).where(ContractImage.contract_id == contract_id)
        )

    async def upload(
        self,
        contract_id: int,
        file_name: str,
        content_type: str,
        data: bytes,
        uploaded_by: str,
        description: Optional[str] = None,
    ) -> Optional[ContractImage]:
        """Store a file for a contract. Returns ``None`` if the contract is unknown."""
        if await self.db.get(Contract, contract_id) is None:
            return None

        self.validate(file_name, content_type, len(data))
        if await self.count_for_contract(contract_id) >= self.max_files_per_contract:
            raise InvalidUploadError(
                f"A contract can hold at most {self.max_files_per_contract} files"
            )

        key = generate_file_path(contract_id, file_name)
        self.storage.ensure_client()
        await run_in_threadpool(
            self.storage.put,
            key,
            data,
            content_type,
            "public-read",
            {
                "original-filename": file_name,
                "description": description or "",
                "uploaded-by": uploaded_by,
                "contract-id": contract_id,
            },
        )

        record = ContractImage(
            contract_id=contract_id,
            file_name=file_name,
            file_url=self.storage.public_url(key),
            file_size=len(data),
            file_type=content_type,
            description=description,
            uploaded_by=uploaded_by,
            image_path=key,
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.warning("Saving metadata for %s failed; removing stored object", key)
            await run_in_threadpool(self.storage.delete, key)
            raise
        await self.db.refresh(record)
        logger.info("Uploaded %s for contract %s as file %s", file_name, contract_id, record.id)
        return record

    async def list_for_contract(self, contract_id: int) -> Sequence[ContractImage]:
        result = await self.db.execute(
            select(ContractImage)
            .where(ContractImage.contract_id == contract_id)
            .order_by(ContractImage.uploaded_at.desc(), ContractImage.id.desc())
        )
        return result.scalars().all()

    async def get_by_id(self, file_id: int) -> Optional[ContractImage]:
        return await self.db.get(ContractImage, file_id)

    async def delete(self, file_id: int) -> bool:
        """Remove the stored object, then its metadata row."""
        record = await self.get_by_id(file_id)
        if record is None:
            return False
        self.storage.ensure_client()
        await run_in_threadpool(self.storage.delete, record.image_path)
        result = await self.db.execute(delete(ContractImage).where(ContractImage.id == file_id))
        await self.db.commit()
        return result.rowcount > 0
