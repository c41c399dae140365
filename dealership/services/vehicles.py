"""
Vehicle inventory operations.
"""
from typing import Optional, Sequence

from sqlalchemy import or_, select

from dealership.models.vehicle import Vehicle
from dealership.services.base import CrudService


class VehicleService(CrudService[Vehicle]):
    model = Vehicle

    async def get_by_vin(self, vin: str) -> Optional[Vehicle]:
        result = await self.db.execute(select(Vehicle).where(Vehicle.vin_number == vin))
        return result.scalar_one_or_none()

    async def search(self, text: str) -> Sequence[Vehicle]:
        """Case-insensitive substring match on make, model or "make model"."""
        query = select(Vehicle).where(
            or_(
                Vehicle.make.icontains(text, autoescape=True),
                Vehicle.model.icontains(text, autoescape=True),
                (Vehicle.make + " " + Vehicle.model).icontains(text, autoescape=True),
            )
        )
        result = await self.db.execute(self._newest_first(query))
        return result.scalars().all()
