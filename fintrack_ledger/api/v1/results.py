"""Translate operation results into HTTP responses"""

from fastapi import HTTPException

from fintrack_ledger.api.v1.schemas import OperationResponse
from fintrack_ledger.domain.models import ErrorKind, OperationResult

STATUS_BY_ERROR_KIND = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BUSINESS_RULE: 409,
    ErrorKind.PERSISTENCE: 500,
}


def to_response(result: OperationResult) -> OperationResponse:
    """Return the success body, or raise with the message callers display verbatim"""
    if not result.success:
        raise HTTPException(status_code=STATUS_BY_ERROR_KIND[result.error_kind], detail=result.error)
    return OperationResponse(success=True, id=result.resource_id)
