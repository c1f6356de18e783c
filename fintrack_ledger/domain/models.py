"""Domain models - pure Python dataclasses representing ledger inputs and outcomes"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


class ErrorKind(str, Enum):
    """Category of a failed operation, used to pick an HTTP status"""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    BUSINESS_RULE = "business_rule"
    PERSISTENCE = "persistence"


@dataclass
class OperationResult:
    """Success marker or user-facing error message for a ledger operation"""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    resource_id: Optional[uuid.UUID] = None

    @classmethod
    def ok(cls, resource_id: Optional[uuid.UUID] = None) -> "OperationResult":
        return cls(success=True, resource_id=resource_id)

    @classmethod
    def fail(cls, error_kind: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, error=message, error_kind=error_kind)


@dataclass
class TransactionInput:
    """
    Field values for creating or editing a transaction.

    A UI "payment" arrives here as type="expense" with both a funding link
    (bank_account_id) and a target link (loan_id or credit_card_id).
    """

    date: date
    amount: Decimal
    type: str
    description: Optional[str] = None
    notes: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None
    income_source_id: Optional[uuid.UUID] = None
    bank_account_id: Optional[uuid.UUID] = None
    loan_id: Optional[uuid.UUID] = None


@dataclass
class InstallmentTerms:
    """Terms for a new credit card installment plan"""

    name: str
    total_amount: Decimal
    monthly_payment: Decimal
    total_months: int
    start_date: date
    credit_card_id: Optional[uuid.UUID]
    category_id: Optional[uuid.UUID] = None
    current_balance_payment: Decimal = Decimal("0")  # already paid before entry


@dataclass
class InstallmentUpdate:
    """Editable installment fields"""

    name: str
    total_amount: Decimal
    monthly_payment: Decimal
    remaining_months: int
    credit_card_id: Optional[uuid.UUID]
    category_id: Optional[uuid.UUID] = None


@dataclass
class ScheduledPayment:
    """Single backfilled payment at a statement cycle"""

    due_date: date
    amount: Decimal


@dataclass
class InstallmentSchedule:
    """Outcome of amortizing an already-paid balance over statement cycles"""

    paid_months: int
    remainder: Decimal
    remaining_months: int
    payments: List[ScheduledPayment] = field(default_factory=list)
