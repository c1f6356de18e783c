"""Unit tests for input validation"""

import uuid
import pytest
from datetime import date
from decimal import Decimal
from fintrack_ledger.domain.exceptions import ValidationError
from fintrack_ledger.domain.models import ErrorKind, InstallmentTerms, InstallmentUpdate, TransactionInput
from fintrack_ledger.domain.validation import (
    validate_installment_terms,
    validate_installment_update,
    validate_transaction_input,
)


def _terms(**overrides) -> InstallmentTerms:
    fields = dict(
        name="Laptop",
        total_amount=Decimal("1200"),
        monthly_payment=Decimal("100"),
        total_months=12,
        start_date=date(2024, 1, 10),
        credit_card_id=uuid.uuid4(),
    )
    fields.update(overrides)
    return InstallmentTerms(**fields)


def test_transaction_requires_positive_amount():
    with pytest.raises(ValidationError, match="greater than zero"):
        validate_transaction_input(TransactionInput(date(2024, 1, 1), Decimal("0"), "expense"))


def test_transaction_rejects_unknown_type():
    """Test 'payment' is not a stored type"""
    with pytest.raises(ValidationError, match="income or expense"):
        validate_transaction_input(TransactionInput(date(2024, 1, 1), Decimal("10"), "payment"))


def test_transaction_requires_amount_and_type():
    with pytest.raises(ValidationError, match="Amount and type are required"):
        validate_transaction_input(TransactionInput(date(2024, 1, 1), None, ""))


def test_valid_transaction_passes():
    validate_transaction_input(TransactionInput(date(2024, 1, 1), Decimal("10.50"), "income"))


@pytest.mark.parametrize("overrides", [
    {"name": ""},
    {"total_amount": Decimal("0")},
    {"monthly_payment": Decimal("-1")},
    {"total_months": 0},
    {"credit_card_id": None},
])
def test_installment_terms_required_fields(overrides):
    with pytest.raises(ValidationError, match="All fields are required") as exc_info:
        validate_installment_terms(_terms(**overrides))
    assert exc_info.value.kind == ErrorKind.VALIDATION


def test_installment_update_remaining_bounds():
    update = InstallmentUpdate(
        name="Laptop",
        total_amount=Decimal("1200"),
        monthly_payment=Decimal("100"),
        remaining_months=13,
        credit_card_id=uuid.uuid4(),
    )
    with pytest.raises(ValidationError, match="between 0 and 12"):
        validate_installment_update(update, total_months=12)

    update.remaining_months = 12
    validate_installment_update(update, total_months=12)


def test_transaction_rejects_sub_cent_amount():
    """Test amounts finer than a cent are refused instead of rounded on insert"""
    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        validate_transaction_input(TransactionInput(date(2024, 1, 1), Decimal("10.005"), "expense"))


def test_trailing_zeros_are_whole_cents():
    validate_transaction_input(TransactionInput(date(2024, 1, 1), Decimal("10.500"), "expense"))


@pytest.mark.parametrize("overrides", [
    {"monthly_payment": Decimal("33.333")},
    {"total_amount": Decimal("99.999")},
    {"current_balance_payment": Decimal("0.001")},
])
def test_installment_terms_reject_sub_cent_amounts(overrides):
    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        validate_installment_terms(_terms(**overrides))
