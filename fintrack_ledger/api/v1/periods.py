"""PUT /v1/periods/{year}/{month} - find-or-create a Year/Month pair"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack_ledger.api.dependencies import get_current_user_id
from fintrack_ledger.api.v1.schemas import PeriodResponse
from fintrack_ledger.infrastructure.database.repositories import PeriodRepository
from fintrack_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.put("/periods/{year}/{month}", response_model=PeriodResponse)
def resolve_period(
    year: int = Path(..., ge=1900, le=9999),
    month: int = Path(..., ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Idempotent: returns the existing period or materializes it"""
    try:
        year_record, month_record = PeriodRepository(db).resolve_period(user_id, year, month)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to resolve period: {e}", extra={"user_id": user_id})
        raise HTTPException(status_code=500, detail="Failed to resolve period")

    return PeriodResponse(year_id=year_record.id, month_id=month_record.id, year=year, month=month)
