from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class TaskRateBase(BaseModel):
    name: str
    unit: str = "piece"
    estimated_hours: float = 0.0
    description: Optional[str] = None

class TaskRateCreate(TaskRateBase):
    pass

class TaskRateUpdate(BaseModel):
    unit: Optional[str] = None
    estimated_hours: Optional[float] = None
    description: Optional[str] = None

class TaskRate(TaskRateBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True

class CarrierBase(BaseModel):
    name: str
    size_tonnes: float
    speed_m_per_hour: Optional[float] = None

class CarrierCreate(CarrierBase):
    pass

class Carrier(CarrierBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True

class RateInput(BaseModel):
    """Task rate supplied inline with a calculation request."""
    name: str
    unit: str = "piece"
    estimated_hours: float = 0.0

class StairCalculationRequest(BaseModel):
    fields: Dict[str, Any]
    carrier_name: Optional[str] = None
    task_rates: Optional[List[RateInput]] = None  # None = use stored task_rates table

class StairCalculationResponse(BaseModel):
    job_type: str
    materials: List[Dict[str, Any]]
    task_breakdown: List[Dict[str, Any]]
    step_dimensions: List[Dict[str, Any]]
    course_fits: List[Dict[str, Any]]
    slab_plan: Dict[str, Any]
    summary: Dict[str, Any]
    assumptions: List[str] = []
