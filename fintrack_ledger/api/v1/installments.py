"""Installment endpoints: scheduling, payment, maintenance"""

import uuid
from typing import List
from fastapi import APIRouter, Depends

from fintrack_ledger.api.dependencies import get_current_user_id, get_installment_service
from fintrack_ledger.api.v1.results import to_response
from fintrack_ledger.api.v1.schemas import (
    InstallmentRequest,
    InstallmentSchema,
    InstallmentUpdateRequest,
    OperationResponse,
)
from fintrack_ledger.domain.models import InstallmentTerms, InstallmentUpdate
from fintrack_ledger.services.installments import InstallmentService

router = APIRouter()


@router.post("/installments", response_model=OperationResponse, status_code=201)
def create_installment(
    body: InstallmentRequest,
    user_id: str = Depends(get_current_user_id),
    service: InstallmentService = Depends(get_installment_service),
):
    """
    Create an installment plan.

    Any current_balance_payment is backfilled as historical transactions at
    successive statement cycles of the card.
    """
    return to_response(service.create_installment(user_id, InstallmentTerms(**body.model_dump())))


@router.get("/installments", response_model=List[InstallmentSchema])
def list_installments(
    user_id: str = Depends(get_current_user_id),
    service: InstallmentService = Depends(get_installment_service),
):
    return [InstallmentSchema.model_validate(i) for i in service.list_installments(user_id)]


@router.post("/installments/{installment_id}/pay", response_model=OperationResponse, status_code=201)
def pay_installment(
    installment_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: InstallmentService = Depends(get_installment_service),
):
    """Pay one cycle today; 409 once every month is paid"""
    return to_response(service.pay_installment(user_id, installment_id))


@router.put("/installments/{installment_id}", response_model=OperationResponse)
def update_installment(
    installment_id: uuid.UUID,
    body: InstallmentUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: InstallmentService = Depends(get_installment_service),
):
    return to_response(service.update_installment(user_id, installment_id, InstallmentUpdate(**body.model_dump())))


@router.delete("/installments/{installment_id}", response_model=OperationResponse)
def delete_installment(
    installment_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: InstallmentService = Depends(get_installment_service),
):
    return to_response(service.delete_installment(user_id, installment_id))
