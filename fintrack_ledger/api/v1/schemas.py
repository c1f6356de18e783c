"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class OperationResponse(BaseModel):
    """Success marker for a mutating ledger operation"""

    success: bool = True
    id: Optional[uuid.UUID] = None


class PeriodResponse(BaseModel):
    """Response for PUT /v1/periods/{year}/{month}"""

    year_id: uuid.UUID
    month_id: uuid.UUID
    year: int
    month: int


class TransactionRequest(BaseModel):
    """Request body for creating or editing a transaction"""

    date: date
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Positive amount, at most 2 decimal places")
    type: Literal["income", "expense"]
    description: Optional[str] = None
    notes: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None
    income_source_id: Optional[uuid.UUID] = None
    bank_account_id: Optional[uuid.UUID] = Field(None, description="Funding account")
    loan_id: Optional[uuid.UUID] = Field(None, description="Loan being paid down")


class TransactionSchema(BaseModel):
    """Stored transaction"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
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
    installment_id: Optional[uuid.UUID] = None


class TransactionListResponse(BaseModel):
    """Response for GET /v1/transactions"""

    year: int
    month: int
    transactions: List[TransactionSchema]


class InstallmentRequest(BaseModel):
    """Request body for POST /v1/installments"""

    name: str = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0, decimal_places=2)
    monthly_payment: Decimal = Field(..., gt=0, decimal_places=2)
    total_months: int = Field(..., gt=0)
    current_balance_payment: Decimal = Field(Decimal("0"), decimal_places=2, description="Amount already paid before entry")
    start_date: date
    credit_card_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None


class InstallmentUpdateRequest(BaseModel):
    """Request body for PUT /v1/installments/{installment_id}"""

    name: str = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0, decimal_places=2)
    monthly_payment: Decimal = Field(..., gt=0, decimal_places=2)
    remaining_months: int = Field(..., ge=0)
    credit_card_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None


class InstallmentSchema(BaseModel):
    """Stored installment plan"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    total_amount: Decimal
    monthly_payment: Decimal
    total_months: int
    remaining_months: int
    start_date: date
    credit_card_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None


class BankAccountRequest(BaseModel):
    """Request body for creating or replacing a bank account"""

    name: str = Field(..., min_length=1)
    type: str = "Savings"
    balance: Decimal = Field(Decimal("0"), decimal_places=2)
    is_savings: bool = False
    target_amount: Optional[Decimal] = Field(None, decimal_places=2)
    growth_rate: Optional[Decimal] = None
    target_date: Optional[date] = None


class BankAccountSchema(BankAccountRequest):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID


class LoanRequest(BaseModel):
    """Request body for creating or editing a loan"""

    name: str = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0, decimal_places=2)
    remaining_amount: Optional[Decimal] = Field(
        None, decimal_places=2, description="Defaults to total_amount on create, unchanged on edit"
    )
    interest_rate: Decimal = Field(..., ge=0)
    monthly_payment: Optional[Decimal] = Field(None, decimal_places=2)
    due_date: Optional[int] = Field(None, ge=1, le=31, description="Day of month")


class LoanSchema(LoanRequest):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    remaining_amount: Decimal


class CreditCardRequest(BaseModel):
    """Request body for POST /v1/credit-cards"""

    name: str = Field(..., min_length=1)
    last_four: Optional[str] = Field(None, max_length=4)
    color: Optional[str] = None
    statement_day: Optional[int] = Field(None, ge=1, le=31)
    due_day: Optional[int] = Field(None, ge=1, le=31)


class CreditCardSchema(CreditCardRequest):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
