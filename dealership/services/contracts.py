"""
Contract operations.
"""
import logging
from typing import Any, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload
from starlette.concurrency import run_in_threadpool

from dealership.exceptions import InvalidReferenceError
from dealership.models.contract import Contract
from dealership.models.contract_image import ContractImage
from dealership.models.customer import Customer
from dealership.models.vehicle import Vehicle
from dealership.schemas.contract import Contract as ContractSchema, ContractDetail
from dealership.schemas.customer import Customer as CustomerSchema
from dealership.schemas.vehicle import Vehicle as VehicleSchema
from dealership.services.base import CrudService
from dealership.storage import ObjectStorage

logger = logging.getLogger(__name__)

DENORMALIZED_FIELDS = ("vin_number", "customer_name", "customer_phone")


class ContractService(CrudService[Contract]):
    model = Contract

    def __init__(self, db: AsyncSession, storage: Optional[ObjectStorage] = None):
        super().__init__(db)
        self.storage = storage

    async def get_all(self, skip: int = 0, limit: int = 100) -> Sequence[Contract]:
        """Offset pagination, newest first.

        Pages are not stable across concurrent inserts.
        """
        query = self._newest_first(select(Contract)).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def get_detail(self, contract_id: int) -> Optional[ContractDetail]:
        """Load a contract with its vehicle and customer in one joined query."""
        query = (
            select(Contract)
            .options(joinedload(Contract.vehicle), joinedload(Contract.customer))
            .where(Contract.id == contract_id)
        )
        result = await self.db.execute(query)
        contract = result.unique().scalar_one_or_none()
        if contract is None:
            return None

        # Files are listed through the contract-files endpoints.
        return ContractDetail(
            **ContractSchema.model_validate(contract).model_dump(),
            vehicle=VehicleSchema.model_validate(contract.vehicle) if contract.vehicle else None,
            customer=CustomerSchema.model_validate(contract.customer) if contract.customer else None,
            images=[],
        )

    async def create(self, data: dict[str, Any]) -> Contract:
        """Create a contract.

        ``vin_number``, ``customer_name`` and ``customer_phone`` are stored as
        given. Any of them left out is copied from the referenced vehicle or
        customer.
        """
        data = dict(data)
        missing = [field for field in DENORMALIZED_FIELDS if not data.get(field)]
        if "vin_number" in missing:
            vehicle = await self.db.get(Vehicle, data["vehicle_id"])
            if vehicle is None:
                raise InvalidReferenceError(f"Vehicle {data['vehicle_id']} does not exist")
            data["vin_number"] = vehicle.vin_number
        if "customer_name" in missing or "customer_phone" in missing:
            customer = await self.db.get(Customer, data["customer_id"])
            if customer is None:
                raise InvalidReferenceError(f"Customer {data['customer_id']} does not exist")
            if "customer_name" in missing:
                data["customer_name"] = customer.full_name
            if "customer_phone" in missing:
                data["customer_phone"] = customer.phone_number
        return await super().create(data)

    async def delete(self, record_id: int) -> bool:
        """Delete a contract and its stored files.

        File rows go with the contract through the foreign key cascade; the
        objects they point at are removed from storage first.
        """
        result = await self.db.execute(
            select(ContractImage.image_path).where(ContractImage.contract_id == record_id)
        )
        keys = result.scalars().all()
        if keys:
            if self.storage is None:
                raise RuntimeError(f"Contract {record_id} has stored files but no storage is available")
            self.storage.ensure_client()
            for key in keys:
                await run_in_threadpool(self.storage.delete, key)
            logger.info("Removed %d stored files of contract %s", len(keys), record_id)
        return await super().delete(record_id)

    async def search(
        self,
        q: Optional[str] = None,
        customer_name: Optional[str] = None,
        contract_number: Optional[str] = None,
        vin_number: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Sequence[Contract]:
        """Case-insensitive substring filters, all of which must match."""
        query = select(Contract)
        if customer_name:
            query = query.where(Contract.customer_name.icontains(customer_name, autoescape=True))
        if contract_number:
            query = query.where(Contract.contract_number.icontains(contract_number, autoescape=True))
        if vin_number:
            query = query.where(Contract.vin_number.icontains(vin_number, autoescape=True))
        if q:
            query = query.where(
                or_(
                    Contract.customer_name.icontains(q, autoescape=True),
                    Contract.contract_number.icontains(q, autoescape=True),
                    Contract.vin_number.icontains(q, autoescape=True),
                    Contract.customer_phone.contains(q, autoescape=True),
                )
            )
        result = await self.db.execute(self._newest_first(query).offset(skip).limit(limit))
        return result.scalars().all()
