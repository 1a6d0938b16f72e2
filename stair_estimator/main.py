from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base, SessionLocal
from .logging_config import setup_logging
from .routers import carriers, stairs, task_rates

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("stair_estimator")

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Stair Estimator",
    description="Materials, slab cutting and labor estimates for U-shaped garden steps",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(stairs.router, prefix="/api")
app.include_router(task_rates.router, prefix="/api")
app.include_router(carriers.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.on_event("startup")
def auto_seed():
    """Auto-seed task rates and carriers on first run."""
    db = SessionLocal()
    try:
        rates = task_rates.seed_task_rates(db)
        carrier_count = carriers.seed_carriers(db)
        if rates or carrier_count:
            logger.info("Seeded %d task rates and %d carriers", rates, carrier_count)
    finally:
        db.close()
