import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..calculators.errors import GeometryError, StairInputError
from ..calculators.registry import get_calculator
from ..database import get_db
from .task_rates import load_task_rates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stairs", tags=["stairs"])


@router.post("/u-shape/calculate", response_model=schemas.StairCalculationResponse)
def calculate_u_shape(request: schemas.StairCalculationRequest, db: Session = Depends(get_db)):
    """
    Run the U-shaped stair estimate for one set of measurements.

    Task rates come from the request when given, else from the task_rates
    table. A named carrier turns transport on unless fields says otherwise.
    """
    if request.task_rates is not None:
        task_rates = [rate.model_dump() for rate in request.task_rates]
    else:
        task_rates = load_task_rates(db)

    carrier = None
    if request.carrier_name:
        row = db.query(models.Carrier).filter(models.Carrier.name == request.carrier_name).first()
        if not row:
            raise HTTPException(status_code=404, detail="Carrier not found: %s" % request.carrier_name)
        carrier = row.as_carrier()

    calculator = get_calculator("u_shape_stair")
    try:
        return calculator.calculate(request.fields, task_rates=task_rates, carrier=carrier)
    except GeometryError as e:
        logger.info("Stair geometry rejected: %s", e)
        raise HTTPException(status_code=422, detail=e.as_detail())
    except StairInputError as e:
        raise HTTPException(status_code=400, detail={"error": str(e), "field": e.field})
