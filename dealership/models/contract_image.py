"""
Contract file (image/document) metadata model for database.
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dealership.database import Base, UTCDateTime


class ContractImage(Base):
    """Metadata row for a file stored in object storage."""

    __tablename__ = "ds_contract_image"

    id = Column(Integer, primary_key=True, index=True)
    contract_id = Column(Integer, ForeignKey("ds_contract.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    file_url = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    uploaded_by = Column(String(100), nullable=True)
    image_path = Column(Text, nullable=False)
    uploaded_at = Column(UTCDateTime(), server_default=func.now())

    # Relationships
    contract = relationship("Contract", back_populates="images", lazy="raise")
