"""
Customer model for database.
"""
from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.sql import func
from dealership.database import Base, UTCDateTime


class Customer(Base):
    """Customer database model."""

    __tablename__ = "ds_customer"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(50), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
