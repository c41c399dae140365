"""
Customer record operations.
"""
from typing import Optional, Sequence

from sqlalchemy import select

from dealership.models.customer import Customer
from dealership.services.base import CrudService


class CustomerService(CrudService[Customer]):
    model = Customer

    async def get_by_phone(self, phone: str) -> Optional[Customer]:
        # Phone numbers are not unique; the newest customer wins.
        query = self._newest_first(select(Customer).where(Customer.phone_number == phone)).limit(1)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def search(self, name: str) -> Sequence[Customer]:
        """Case-insensitive substring match on the customer's full name.

        Matching against "first last" also covers either name on its own.
        """
        full_name = Customer.first_name + " " + Customer.last_name
        query = select(Customer).where(full_name.icontains(name, autoescape=True))
        result = await self.db.execute(self._newest_first(query))
        return result.scalars().all()
