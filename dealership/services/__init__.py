"""
Data-access services, one per entity.
"""
from dealership.services.vehicles import VehicleService
from dealership.services.customers import CustomerService
from dealership.services.contracts import ContractService
from dealership.services.contract_files import ContractFileService

__all__ = ["VehicleService", "CustomerService", "ContractService", "ContractFileService"]
