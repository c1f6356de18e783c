"""Bank account, loan and credit card endpoints (ledger link targets)"""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack_ledger.api.dependencies import get_current_user_id
from fintrack_ledger.api.v1.schemas import (
    BankAccountRequest,
    BankAccountSchema,
    CreditCardRequest,
    CreditCardSchema,
    LoanRequest,
    LoanSchema,
    OperationResponse,
)
from fintrack_ledger.infrastructure.database.repositories import (
    BankAccountRepository,
    CreditCardRepository,
    LoanRepository,
)
from fintrack_ledger.infrastructure.database.session import get_db

router = APIRouter()


@contextmanager
def _committing(db: Session, failure_message: str, duplicate_message: Optional[str] = None) -> Iterator[None]:
    """Run the writes in the block and commit; any database error rolls everything back"""
    try:
        yield
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if duplicate_message:
            raise HTTPException(status_code=409, detail=duplicate_message)
        logging.error(f"{failure_message}: {e}")
        raise HTTPException(status_code=500, detail=failure_message)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"{failure_message}: {e}")
        raise HTTPException(status_code=500, detail=failure_message)


@router.post("/bank-accounts", response_model=BankAccountSchema, status_code=201)
def create_bank_account(
    body: BankAccountRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Open a bank account with its starting balance"""
    with _committing(db, "Failed to create account"):
        db_account = BankAccountRepository(db).create(user_id, **body.model_dump())
    return BankAccountSchema.model_validate(db_account)


@router.get("/bank-accounts", response_model=List[BankAccountSchema])
def list_bank_accounts(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return [BankAccountSchema.model_validate(a) for a in BankAccountRepository(db).list_for_user(user_id)]


@router.put("/bank-accounts/{account_id}", response_model=BankAccountSchema)
def update_bank_account(
    account_id: uuid.UUID,
    body: BankAccountRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Replace account details; the balance given here overrides the ledger's running value"""
    repo = BankAccountRepository(db)
    db_account = repo.get_owned(user_id, account_id)
    if db_account is None:
        raise HTTPException(status_code=404, detail="Bank account not found")
    with _committing(db, "Failed to update account"):
        repo.update(db_account, **body.model_dump())
    return BankAccountSchema.model_validate(db_account)


@router.delete("/bank-accounts/{account_id}", response_model=OperationResponse)
def delete_bank_account(
    account_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    repo = BankAccountRepository(db)
    db_account = repo.get_owned(user_id, account_id)
    if db_account is None:
        raise HTTPException(status_code=404, detail="Bank account not found")
    with _committing(db, "Failed to delete account"):
        repo.delete(db_account)
    return OperationResponse(id=account_id)


@router.post("/loans", response_model=LoanSchema, status_code=201)
def create_loan(
    body: LoanRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record a loan; remaining amount starts at the principal unless given"""
    with _committing(db, "Failed to create loan"):
        db_loan = LoanRepository(db).create(user_id, **body.model_dump())
    return LoanSchema.model_validate(db_loan)


@router.get("/loans", response_model=List[LoanSchema])
def list_loans(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return [LoanSchema.model_validate(loan) for loan in LoanRepository(db).list_for_user(user_id)]


@router.put("/loans/{loan_id}", response_model=LoanSchema)
def update_loan(
    loan_id: uuid.UUID,
    body: LoanRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    repo = LoanRepository(db)
    db_loan = repo.get_owned(user_id, loan_id)
    if db_loan is None:
        raise HTTPException(status_code=404, detail="Loan not found")
    with _committing(db, "Failed to update loan"):
        repo.update(db_loan, **body.model_dump())
    return LoanSchema.model_validate(db_loan)


@router.delete("/loans/{loan_id}", response_model=OperationResponse)
def delete_loan(
    loan_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    repo = LoanRepository(db)
    db_loan = repo.get_owned(user_id, loan_id)
    if db_loan is None:
        raise HTTPException(status_code=404, detail="Loan not found")
    with _committing(db, "Failed to delete loan"):
        repo.delete(db_loan)
    return OperationResponse(id=loan_id)


@router.post("/credit-cards", response_model=CreditCardSchema, status_code=201)
def create_credit_card(
    body: CreditCardRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    with _committing(db, "Failed to create credit card", duplicate_message="Credit card already exists"):
        db_card = CreditCardRepository(db).create(user_id, **body.model_dump())
    return CreditCardSchema.model_validate(db_card)


@router.get("/credit-cards", response_model=List[CreditCardSchema])
def list_credit_cards(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return [CreditCardSchema.model_validate(c) for c in CreditCardRepository(db).list_for_user(user_id)]
