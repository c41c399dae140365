"""
Pydantic schemas for request/response validation.
"""
from dealership.schemas.vehicle import VehicleBase, VehicleCreate, VehicleUpdate, Vehicle
from dealership.schemas.customer import CustomerBase, CustomerCreate, CustomerUpdate, Customer
from dealership.schemas.contract import ContractBase, ContractCreate, ContractUpdate, Contract, ContractDetail
from dealership.schemas.contract_file import ContractFile, ContractFileUploaded, StorageStatus

__all__ = [
    "VehicleBase", "VehicleCreate", "VehicleUpdate", "Vehicle",
    "CustomerBase", "CustomerCreate", "CustomerUpdate", "Customer",
    "ContractBase", "ContractCreate", "ContractUpdate", "Contract", "ContractDetail",
    "ContractFile", "ContractFileUploaded", "StorageStatus",
]
