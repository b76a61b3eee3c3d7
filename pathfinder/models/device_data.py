"""
Telemetry readings submitted by devices
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, JSON, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from pathfinder.database.connection import Base

class DeviceData(Base):
    """One timestamped reading. Rows are append-only."""

    __tablename__ = "device_data"
    __table_args__ = (
        Index("ix_device_data_device_id_timestamp", "device_id", "timestamp"),
        Index("ix_device_data_data_type", "data_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(Integer, ForeignKey("devices.id", ondelete="CASCADE"), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    data_type = Column(String(100), nullable=False)  # temperature, humidity, location, ...
    value = Column(JSON, nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationship
    device = relationship("Device", back_populates="readings")

    def __repr__(self):
        return f"<DeviceData(device_id={self.device_id}, type={self.data_type}, timestamp={self.timestamp})>"
