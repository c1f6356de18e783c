"""Input validation performed before any persistence call"""

from decimal import Decimal

from fintrack_ledger.domain.exceptions import ValidationError
from fintrack_ledger.domain.models import (
    TRANSACTION_TYPES,
    InstallmentTerms,
    InstallmentUpdate,
    TransactionInput,
)

CENT = Decimal("0.01")


def _is_positive(value) -> bool:
    return value is not None and Decimal(value).is_finite() and Decimal(value) > 0


def _is_whole_cents(value) -> bool:
    """Money columns hold two decimal places; anything finer would be rounded on insert"""
    if value is None or not Decimal(value).is_finite():
        return True
    value = Decimal(value)
    return value == value.quantize(CENT)


def _require_cents(*amounts) -> None:
    if not all(_is_whole_cents(amount) for amount in amounts):
        raise ValidationError("Amounts must have at most 2 decimal places")


def validate_transaction_input(payload: TransactionInput) -> None:
    if payload.amount is None or not payload.type or payload.date is None:
        raise ValidationError("Amount and type are required")
    if payload.type not in TRANSACTION_TYPES:
        raise ValidationError("Type must be income or expense")
    if not _is_positive(payload.amount):
        raise ValidationError("Amount must be greater than zero")
    _require_cents(payload.amount)


def validate_installment_terms(terms: InstallmentTerms) -> None:
    if (
        not terms.name
        or not _is_positive(terms.total_amount)
        or not _is_positive(terms.monthly_payment)
        or not terms.total_months
        or terms.total_months <= 0
        or not terms.credit_card_id
        or terms.start_date is None
    ):
        raise ValidationError("All fields are required")
    _require_cents(terms.total_amount, terms.monthly_payment, terms.current_balance_payment)


def validate_installment_update(update: InstallmentUpdate, total_months: int) -> None:
    if (
        not update.name
        or not _is_positive(update.total_amount)
        or not _is_positive(update.monthly_payment)
        or not update.credit_card_id
    ):
        raise ValidationError("All fields are required")
    _require_cents(update.total_amount, update.monthly_payment)
    if update.remaining_months is None or not 0 <= update.remaining_months <= total_months:
        raise ValidationError(f"Remaining months must be between 0 and {total_months}")
