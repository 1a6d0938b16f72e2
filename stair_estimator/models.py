from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime
from .database import Base


class TaskRate(Base):
    """Hours-per-unit rate for a named labor task (building, cutting, installation, mixing)."""
    __tablename__ = "task_rates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    unit = Column(String, nullable=False, default="piece")
    estimated_hours = Column(Float, nullable=False, default=0.0)
    description = Column(String)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def as_rate(self) -> dict:
        return {
            "name": self.name,
            "unit": self.unit,
            "estimated_hours": self.estimated_hours,
        }


class Carrier(Base):
    """Barrow / dumper used to move materials on site."""
    __tablename__ = "carriers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    size_tonnes = Column(Float, nullable=False)
    speed_m_per_hour = Column(Float)  # None = look up from CARRIER_SPEEDS by size
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def as_carrier(self) -> dict:
        return {
            "name": self.name,
            "size_tonnes": self.size_tonnes,
            "speed_m_per_hour": self.speed_m_per_hour,
        }
