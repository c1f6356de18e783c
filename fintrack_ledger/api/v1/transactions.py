"""Transaction endpoints backed by the ledger reconciliation engine"""

import uuid
from fastapi import APIRouter, Depends, Query

from fintrack_ledger.api.dependencies import get_current_user_id, get_ledger_service
from fintrack_ledger.api.v1.results import to_response
from fintrack_ledger.api.v1.schemas import (
    OperationResponse,
    TransactionListResponse,
    TransactionRequest,
    TransactionSchema,
)
from fintrack_ledger.domain.models import TransactionInput
from fintrack_ledger.services.ledger import LedgerService

router = APIRouter()


def _to_input(body: TransactionRequest) -> TransactionInput:
    return TransactionInput(**body.model_dump())


@router.post("/transactions", response_model=OperationResponse, status_code=201)
def create_transaction(
    body: TransactionRequest,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Record a transaction and apply its balance/loan effects"""
    return to_response(service.create_transaction(user_id, _to_input(body)))


@router.put("/transactions/{transaction_id}", response_model=OperationResponse)
def update_transaction(
    transaction_id: uuid.UUID,
    body: TransactionRequest,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Edit a transaction; old effects are reversed before new ones apply"""
    return to_response(service.update_transaction(user_id, transaction_id, _to_input(body)))


@router.delete("/transactions/{transaction_id}", response_model=OperationResponse)
def delete_transaction(
    transaction_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return to_response(service.delete_transaction(user_id, transaction_id))


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    transactions = service.list_transactions(user_id, year, month)
    return TransactionListResponse(
        year=year,
        month=month,
        transactions=[TransactionSchema.model_validate(t) for t in transactions],
    )
