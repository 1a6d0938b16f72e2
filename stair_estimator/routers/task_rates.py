from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db

router = APIRouter(prefix="/task-rates", tags=["task-rates"])

# Default hours per unit for a small landscaping crew
DEFAULT_TASK_RATES = {
    "building steps with 4-inch blocks": {"unit": "pieces", "estimated_hours": 0.08},
    "building steps with 7-inch blocks": {"unit": "pieces", "estimated_hours": 0.1},
    "building steps with bricks": {"unit": "pieces", "estimated_hours": 0.02},
    "mixing mortar": {"unit": "batch", "estimated_hours": 0.25},
    "cutting 30cm porcelain slab": {"unit": "piece", "estimated_hours": 0.05},
    "cutting 60cm porcelain slab": {"unit": "piece", "estimated_hours": 0.08},
    "cutting 90cm porcelain slab": {"unit": "piece", "estimated_hours": 0.12},
    "cutting 120cm porcelain slab": {"unit": "piece", "estimated_hours": 0.15},
    "tile installation 90 x 60": {"unit": "piece", "estimated_hours": 0.5},
    "tile installation 60 x 60": {"unit": "piece", "estimated_hours": 0.4},
    "tile installation 60 x 30": {"unit": "piece", "estimated_hours": 0.3},
    "tile installation 30 x 30": {"unit": "piece", "estimated_hours": 0.2},
}


def seed_task_rates(db: Session) -> int:
    """Insert any missing default task rates. Returns how many were added."""
    seeded = 0
    for name, data in DEFAULT_TASK_RATES.items():
        existing = db.query(models.TaskRate).filter(models.TaskRate.name == name).first()
        if not existing:
            db.add(models.TaskRate(name=name, **data))
            seeded += 1
    db.commit()
    return seeded


def load_task_rates(db: Session) -> list:
    return [rate.as_rate() for rate in db.query(models.TaskRate).order_by(models.TaskRate.name).all()]


@router.get("/seed")
def seed_rates(db: Session = Depends(get_db)):
    """Seed default task rates. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_task_rates(db)}


@router.get("/", response_model=List[schemas.TaskRate])
def list_task_rates(db: Session = Depends(get_db)):
    return db.query(models.TaskRate).order_by(models.TaskRate.name).all()


@router.post("/", response_model=schemas.TaskRate)
def create_task_rate(rate: schemas.TaskRateCreate, db: Session = Depends(get_db)):
    existing = db.query(models.TaskRate).filter(models.TaskRate.name == rate.name).first()
    if existing:
        raise HTTPException(status_code=409, detail="Task rate already exists: %s" % rate.name)
    db_rate = models.TaskRate(**rate.model_dump())
    db.add(db_rate)
    db.commit()
    db.refresh(db_rate)
    return db_rate


@router.patch("/{name}", response_model=schemas.TaskRate)
def update_task_rate(name: str, update: schemas.TaskRateUpdate, db: Session = Depends(get_db)):
    rate = db.query(models.TaskRate).filter(models.TaskRate.name == name).first()
    if not rate:
        raise HTTPException(status_code=404, detail="Task rate not found, run /task-rates/seed first")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(rate, field, value)
    db.commit()
    db.refresh(rate)
    return rate
