"""All-or-nothing execution of ledger operations against one Session"""

import logging
import time
import uuid
from typing import Callable, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack_ledger.domain.exceptions import DomainException, UnauthenticatedError
from fintrack_ledger.domain.models import ErrorKind, OperationResult
from fintrack_ledger.infrastructure.observability.logging import log_ledger_operation
from fintrack_ledger.infrastructure.observability.metrics import record_operation


def require_user(user_id: Optional[str]) -> str:
    """The one failure that propagates instead of becoming a result"""
    if not user_id:
        raise UnauthenticatedError("Unauthorized")
    return user_id


def run_atomically(
    db: Session,
    operation: str,
    user_id: str,
    failure_message: str,
    work: Callable[[], Optional[uuid.UUID]],
) -> OperationResult:
    """
    Run work inside one transaction and turn its outcome into a result.

    Flow:
    1. Run work (returns the id of the affected row, if any)
    2. Commit on success
    3. Roll back on any error, so no partial effects survive
    4. Domain errors keep their message; persistence errors become
       failure_message and the cause is only logged
    """
    start_time = time.time()

    try:
        resource_id = work()
        db.commit()
        result = OperationResult.ok(resource_id)

    except UnauthenticatedError:
        db.rollback()
        raise

    except DomainException as e:
        db.rollback()
        logging.warning(f"{operation} rejected: {e}", extra={"user_id": user_id, "operation": operation})
        result = OperationResult.fail(e.kind, str(e))

    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Persistence error during {operation}: {e}", extra={"user_id": user_id, "operation": operation})
        result = OperationResult.fail(ErrorKind.PERSISTENCE, failure_message)

    except Exception:
        db.rollback()
        raise

    duration_ms = (time.time() - start_time) * 1000
    record_operation(operation, "success" if result.success else result.error_kind.value)
    log_ledger_operation(
        operation,
        user_id,
        result.success,
        duration_ms,
        resource_id=str(result.resource_id) if result.resource_id else None,
        error=result.error,
    )
    return result
