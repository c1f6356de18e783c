"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from fintrack_ledger.infrastructure.database.session import get_db
from fintrack_ledger.services.installments import InstallmentService
from fintrack_ledger.services.ledger import LedgerService


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Resolve the authenticated user; the whole request fails without one"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id


def get_ledger_service(db: Session = Depends(get_db)) -> LedgerService:
    """Provide ledger service bound to the request session"""
    return LedgerService(db)


def get_installment_service(db: Session = Depends(get_db)) -> InstallmentService:
    """Provide installment service bound to the request session"""
    return InstallmentService(db)
