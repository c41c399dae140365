"""
SQLAlchemy database models.
"""
from dealership.models.vehicle import Vehicle, VehicleStatus
from dealership.models.customer import Customer
from dealership.models.contract import Contract, ContractStatus
from dealership.models.contract_image import ContractImage

__all__ = ["Vehicle", "VehicleStatus", "Customer", "Contract", "ContractStatus", "ContractImage"]
