from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db

router = APIRouter(prefix="/carriers", tags=["carriers"])

# Speed None = taken from the carrier speed table by size
DEFAULT_CARRIERS = {
    "wheelbarrow": {"size_tonnes": 0.125, "speed_m_per_hour": None},
    "petrol barrow": {"size_tonnes": 0.3, "speed_m_per_hour": None},
    "dumper 1t": {"size_tonnes": 1.0, "speed_m_per_hour": None},
}


def seed_carriers(db: Session) -> int:
    seeded = 0
    for name, data in DEFAULT_CARRIERS.items():
        existing = db.query(models.Carrier).filter(models.Carrier.name == name).first()
        if not existing:
            db.add(models.Carrier(name=name, **data))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    """Seed default carriers. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_carriers(db)}


@router.get("/", response_model=List[schemas.Carrier])
def list_carriers(db: Session = Depends(get_db)):
    return db.query(models.Carrier).order_by(models.Carrier.size_tonnes).all()


@router.post("/", response_model=schemas.Carrier)
def create_carrier(carrier: schemas.CarrierCreate, db: Session = Depends(get_db)):
    existing = db.query(models.Carrier).filter(models.Carrier.name == carrier.name).first()
    if existing:
        raise HTTPException(status_code=409, detail="Carrier already exists: %s" % carrier.name)
    db_carrier = models.Carrier(**carrier.model_dump())
    db.add(db_carrier)
    db.commit()
    db.refresh(db_carrier)
    return db_carrier
