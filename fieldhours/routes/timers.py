import structlog
from fastapi import APIRouter, Depends, Response
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import ActiveTimer, new_timer_id
from ..schemas.timers import TimerCreate, TimerResponse
from ..services.errors import store_failure


router = APIRouter(prefix="/api/timers", tags=["timers"])

logger = structlog.get_logger(__name__)


@router.post("", status_code=201, response_model=TimerResponse)
def start_timer(payload: TimerCreate, db: Session = Depends(get_db)):
    timer_id = new_timer_id()
    try:
        db.add(ActiveTimer(
            id=timer_id,
            start_time=payload.start_time,
            date=payload.date,
            client=payload.client,
            property_address=payload.property_address,
            service=payload.service,
            employees=payload.employees,
        ))
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Start timer")
    logger.info("timer_started", timer_id=timer_id)
    return TimerResponse(id=timer_id, **payload.model_dump())


@router.delete("/{timer_id}", status_code=204)
def stop_timer(timer_id: str, db: Session = Depends(get_db)):
    try:
        db.execute(delete(ActiveTimer).where(ActiveTimer.id == timer_id))
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Stop timer", timer_id=timer_id)
    logger.info("timer_stopped", timer_id=timer_id)
    return Response(status_code=204)
