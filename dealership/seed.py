"""
Sample data for development and demos.

Vehicles and customers are seeded independently, each only when its table is
empty, so running the loader again is a no-op.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import Customer, Vehicle

logger = logging.getLogger(__name__)

SAMPLE_VEHICLES = [
    {"vin_number": "1HGBH41JXMN109186", "make": "Honda", "model": "Civic", "year": 2021,
     "color": "Blue", "mileage": 15000, "price": 25000.00, "status": "available"},
    {"vin_number": "2T1BURHE0JC123456", "make": "Toyota", "model": "Camry", "year": 2020,
     "color": "Silver", "mileage": 25000, "price": 28000.00, "status": "available"},
    {"vin_number": "3VWDX7AJ5DM123789", "make": "Volkswagen", "model": "Golf", "year": 2019,
     "color": "White", "mileage": 35000, "price": 22000.00, "status": "available"},
    {"vin_number": "4T1B11HK5JU123456", "make": "Toyota", "model": "Corolla", "year": 2022,
     "color": "Red", "mileage": 8000, "price": 30000.00, "status": "available"},
    {"vin_number": "5NPE34AF5FH123789", "make": "Hyundai", "model": "Sonata", "year": 2021,
     "color": "Black", "mileage": 18000, "price": 26000.00, "status": "available"},
]

SAMPLE_CUSTOMERS = [
    {"first_name": "John", "last_name": "Smith", "phone_number": "555-0101",
     "email": "john.smith@email.com", "address": "123 Main St, Anytown, USA"},
    {"first_name": "Sarah", "last_name": "Johnson", "phone_number": "555-0102",
     "email": "sarah.johnson@email.com", "address": "456 Oak Ave, Somewhere, USA"},
    {"first_name": "Michael", "last_name": "Brown", "phone_number": "555-0103",
     "email": "michael.brown@email.com", "address": "789 Pine Rd, Elsewhere, USA"},
    {"first_name": "Emily", "last_name": "Davis", "phone_number": "555-0104",
     "email": "emily.davis@email.com", "address": "321 Elm St, Nowhere, USA"},
    {"first_name": "David", "last_name": "Wilson", "phone_number": "555-0105",
     "email": "david.wilson@email.com", "address": "654 Maple Dr, Anywhere, USA"},
]


async def _seed_table(session: AsyncSession, model, rows: list[dict]) -> int:
    count = await session.scalar(select(func.count()).select_from(model))
    if count:
        return 0
    # One row per flush keeps ids in list order.
    for row in rows:
        session.add(model(**row))
        await session.flush()
    await session.commit()
    return len(rows)


async def seed_sample_data(session: AsyncSession) -> dict[str, int]:
    """Insert the sample rows into empty tables; return rows inserted per table."""
    vehicles = await _seed_table(session, Vehicle, SAMPLE_VEHICLES)
    if vehicles:
        logger.info("Sample vehicles inserted (%d)", vehicles)

    customers = await _seed_table(session, Customer, SAMPLE_CUSTOMERS)
    if customers:
        logger.info("Sample customers inserted (%d)", customers)

    return {"vehicles": vehicles, "customers": customers}
