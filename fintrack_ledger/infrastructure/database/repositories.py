"""Data access layer for ledger entities"""

import uuid
from typing import Callable, List, Optional, Tuple, TypeVar
from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fintrack_ledger.infrastructure.database.models import (
    BankAccount,
    Category,
    CreditCard,
    IncomeSource,
    Installment,
    Loan,
    Month,
    Transaction,
    Year,
)
from fintrack_ledger.domain.exceptions import NotFoundError
from fintrack_ledger.domain.ledger import LedgerEffects
from fintrack_ledger.domain.models import InstallmentTerms, InstallmentUpdate, TransactionInput

T = TypeVar("T")


def _unlink_transactions(db: Session, link_column, entity_id: uuid.UUID) -> None:
    """
    Null a link before its target is deleted.

    SQLite does not enforce ON DELETE SET NULL unless foreign keys are enabled,
    and a dangling link would make later reversals fail.
    """
    (
        db.query(Transaction)
        .filter(link_column == entity_id)
        .update({link_column: None}, synchronize_session=False)
    )


class PeriodRepository:
    """Repository for lazily created Year/Month containers"""

    def __init__(self, db: Session):
        self.db = db

    def resolve_period(self, user_id: str, year: int, month: int) -> Tuple[Year, Month]:
        """Find or create the (Year, Month) pair; never fails on a missing period"""
        year_record = self._get_or_create(
            lambda: self._find_year(user_id, year),
            lambda: Year(user_id=user_id, year=year),
        )
        month_record = self._get_or_create(
            lambda: self._find_month(year_record.id, month),
            lambda: Month(year_id=year_record.id, month=month),
        )
        return year_record, month_record

    def find_month(self, user_id: str, year: int, month: int) -> Optional[Month]:
        """Lookup only; read paths must not materialize periods"""
        return (
            self.db.query(Month)
            .join(Year, Month.year_id == Year.id)
            .filter(Year.user_id == user_id, Year.year == year, Month.month == month)
            .first()
        )

    def _find_year(self, user_id: str, year: int) -> Optional[Year]:
        return self.db.query(Year).filter(Year.user_id == user_id, Year.year == year).first()

    def _find_month(self, year_id: uuid.UUID, month: int) -> Optional[Month]:
        return self.db.query(Month).filter(Month.year_id == year_id, Month.month == month).first()

    def _get_or_create(self, find: Callable[[], Optional[T]], build: Callable[[], T]) -> T:
        record = find()
        if record is not None:
            return record

        try:
            # Savepoint so a unique violation doesn't poison the caller's transaction
            with self.db.begin_nested():
                record = build()
                self.db.add(record)
                self.db.flush()
            return record
        except IntegrityError:
            # Created concurrently by another request
            existing = find()
            if existing is None:
                raise
            return existing


class LedgerRepository:
    """Applies balance and counter deltas with atomic in-database increments"""

    def __init__(self, db: Session):
        self.db = db

    def apply_effects(self, user_id: str, effects: LedgerEffects) -> None:
        """
        Apply every delta as UPDATE ... SET col = col + delta.

        Each update is scoped by user_id; touching zero rows means the target
        is missing or owned by someone else, which aborts the unit.

        Raises:
            NotFoundError: A referenced account, loan or installment is not owned by user_id
        """
        if effects.is_empty():
            return

        for account_id, delta in effects.bank_accounts.items():
            updated = (
                self.db.query(BankAccount)
                .filter(BankAccount.id == account_id, BankAccount.user_id == user_id)
                .update({BankAccount.balance: BankAccount.balance + delta}, synchronize_session=False)
            )
            if not updated:
                raise NotFoundError("Bank account not found")

        for loan_id, delta in effects.loans.items():
            updated = (
                self.db.query(Loan)
                .filter(Loan.id == loan_id, Loan.user_id == user_id)
                .update({Loan.remaining_amount: Loan.remaining_amount + delta}, synchronize_session=False)
            )
            if not updated:
                raise NotFoundError("Loan not found")

        for installment_id, delta in effects.installments.items():
            shifted = Installment.remaining_months + delta
            # Keep 0 <= remaining_months <= total_months
            clamped = case(
                (shifted > Installment.total_months, Installment.total_months),
                (shifted < 0, 0),
                else_=shifted,
            )
            updated = (
                self.db.query(Installment)
                .filter(Installment.id == installment_id, Installment.user_id == user_id)
                .update({Installment.remaining_months: clamped}, synchronize_session=False)
            )
            if not updated:
                raise NotFoundError("Installment not found")


class TransactionRepository:
    """Repository for ledger transactions"""

    # Link field -> (model, label) for ownership checks
    LINKS = {
        "category_id": (Category, "Category"),
        "credit_card_id": (CreditCard, "Credit card"),
        "income_source_id": (IncomeSource, "Income source"),
        "bank_account_id": (BankAccount, "Bank account"),
        "loan_id": (Loan, "Loan"),
    }

    def __init__(self, db: Session):
        self.db = db

    def verify_links(self, user_id: str, payload: TransactionInput) -> None:
        """Reject links to entities the user does not own"""
        for field_name in self.LINKS:
            self.verify_link(user_id, field_name, getattr(payload, field_name))

    def verify_link(self, user_id: str, field_name: str, entity_id: Optional[uuid.UUID]) -> None:
        if entity_id is None:
            return
        model, label = self.LINKS[field_name]
        owned = (
            self.db.query(model.id)
            .filter(model.id == entity_id, model.user_id == user_id)
            .first()
        )
        if owned is None:
            raise NotFoundError(f"{label} not found")

    def create(
        self,
        month_id: uuid.UUID,
        payload: TransactionInput,
        installment_id: Optional[uuid.UUID] = None,
        consumes_installment_month: bool = False,
    ) -> Transaction:
        db_transaction = Transaction(
            month_id=month_id,
            installment_id=installment_id,
            consumes_installment_month=consumes_installment_month,
        )
        self._assign(db_transaction, payload)
        self.db.add(db_transaction)
        self.db.flush()  # Get ID without committing
        return db_transaction

    def get_owned(self, user_id: str, transaction_id: uuid.UUID) -> Optional[Transaction]:
        """Fetch a transaction only if its period belongs to user_id"""
        return (
            self.db.query(Transaction)
            .join(Month, Transaction.month_id == Month.id)
            .join(Year, Month.year_id == Year.id)
            .filter(Transaction.id == transaction_id, Year.user_id == user_id)
            .first()
        )

    def update(self, db_transaction: Transaction, month_id: uuid.UUID, payload: TransactionInput) -> Transaction:
        """Overwrite editable fields; installment_id is left untouched"""
        db_transaction.month_id = month_id
        self._assign(db_transaction, payload)
        self.db.flush()
        return db_transaction

    def delete(self, db_transaction: Transaction) -> None:
        self.db.delete(db_transaction)
        self.db.flush()

    def list_for_month(self, month_id: uuid.UUID) -> List[Transaction]:
        return (
            self.db.query(Transaction)
            .filter(Transaction.month_id == month_id)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
            .all()
        )

    @staticmethod
    def _assign(db_transaction: Transaction, payload: TransactionInput) -> None:
        db_transaction.date = payload.date
        db_transaction.amount = payload.amount
        db_transaction.type = payload.type
        db_transaction.description = payload.description or None
        db_transaction.notes = payload.notes or None
        db_transaction.category_id = payload.category_id
        db_transaction.credit_card_id = payload.credit_card_id
        db_transaction.income_source_id = payload.income_source_id
        db_transaction.bank_account_id = payload.bank_account_id
        db_transaction.loan_id = payload.loan_id


class InstallmentRepository:
    """Repository for installment plans"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, terms: InstallmentTerms, remaining_months: int) -> Installment:
        db_installment = Installment(
            user_id=user_id,
            name=terms.name,
            total_amount=terms.total_amount,
            monthly_payment=terms.monthly_payment,
            total_months=terms.total_months,
            remaining_months=remaining_months,
            start_date=terms.start_date,
            credit_card_id=terms.credit_card_id,
            category_id=terms.category_id,
        )
        self.db.add(db_installment)
        self.db.flush()
        return db_installment

    def get_owned(self, user_id: str, installment_id: uuid.UUID) -> Optional[Installment]:
        return (
            self.db.query(Installment)
            .filter(Installment.id == installment_id, Installment.user_id == user_id)
            .first()
        )

    def list_for_user(self, user_id: str) -> List[Installment]:
        return (
            self.db.query(Installment)
            .filter(Installment.user_id == user_id)
            .order_by(Installment.start_date.desc())
            .all()
        )

    def consume_month(self, user_id: str, installment_id: uuid.UUID) -> bool:
        """Atomically decrement remaining_months; False if nothing was left to pay"""
        updated = (
            self.db.query(Installment)
            .filter(
                Installment.id == installment_id,
                Installment.user_id == user_id,
                Installment.remaining_months > 0,
            )
            .update({Installment.remaining_months: Installment.remaining_months - 1}, synchronize_session=False)
        )
        return updated > 0

    def update(self, db_installment: Installment, update: InstallmentUpdate) -> Installment:
        db_installment.name = update.name
        db_installment.total_amount = update.total_amount
        db_installment.monthly_payment = update.monthly_payment
        db_installment.remaining_months = update.remaining_months
        db_installment.credit_card_id = update.credit_card_id
        db_installment.category_id = update.category_id
        self.db.flush()
        return db_installment

    def delete(self, db_installment: Installment) -> None:
        """Delete the plan; its transactions stay in history, unlinked"""
        _unlink_transactions(self.db, Transaction.installment_id, db_installment.id)
        self.db.delete(db_installment)
        self.db.flush()


class BankAccountRepository:
    """Repository for bank accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, **fields) -> BankAccount:
        db_account = BankAccount(user_id=user_id, **fields)
        self.db.add(db_account)
        self.db.flush()
        return db_account

    def get_owned(self, user_id: str, account_id: uuid.UUID) -> Optional[BankAccount]:
        return (
            self.db.query(BankAccount)
            .filter(BankAccount.id == account_id, BankAccount.user_id == user_id)
            .first()
        )

    def update(self, db_account: BankAccount, **fields) -> BankAccount:
        """Overwrite account fields, balance included (a manual correction)"""
        for name, value in fields.items():
            setattr(db_account, name, value)
        self.db.flush()
        return db_account

    def delete(self, db_account: BankAccount) -> None:
        """Delete the account; transactions it funded stay in history, unlinked"""
        _unlink_transactions(self.db, Transaction.bank_account_id, db_account.id)
        self.db.delete(db_account)
        self.db.flush()

    def list_for_user(self, user_id: str) -> List[BankAccount]:
        return (
            self.db.query(BankAccount)
            .filter(BankAccount.user_id == user_id)
            .order_by(BankAccount.name.asc())
            .all()
        )


class LoanRepository:
    """Repository for loans"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, **fields) -> Loan:
        if fields.get("remaining_amount") is None:
            fields["remaining_amount"] = fields["total_amount"]
        db_loan = Loan(user_id=user_id, **fields)
        self.db.add(db_loan)
        self.db.flush()
        return db_loan

    def get_owned(self, user_id: str, loan_id: uuid.UUID) -> Optional[Loan]:
        return self.db.query(Loan).filter(Loan.id == loan_id, Loan.user_id == user_id).first()

    def update(self, db_loan: Loan, **fields) -> Loan:
        if fields.get("remaining_amount") is None:
            fields.pop("remaining_amount", None)
        for name, value in fields.items():
            setattr(db_loan, name, value)
        self.db.flush()
        return db_loan

    def delete(self, db_loan: Loan) -> None:
        _unlink_transactions(self.db, Transaction.loan_id, db_loan.id)
        self.db.delete(db_loan)
        self.db.flush()

    def list_for_user(self, user_id: str) -> List[Loan]:
        return (
            self.db.query(Loan)
            .filter(Loan.user_id == user_id)
            .order_by(Loan.created_at.desc())
            .all()
        )


class CreditCardRepository:
    """Repository for credit cards"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, **fields) -> CreditCard:
        db_card = CreditCard(user_id=user_id, **fields)
        self.db.add(db_card)
        self.db.flush()
        return db_card

    def get_owned(self, user_id: str, credit_card_id: uuid.UUID) -> Optional[CreditCard]:
        return (
            self.db.query(CreditCard)
            .filter(CreditCard.id == credit_card_id, CreditCard.user_id == user_id)
            .first()
        )

    def list_for_user(self, user_id: str) -> List[CreditCard]:
        return (
            self.db.query(CreditCard)
            .filter(CreditCard.user_id == user_id)
            .order_by(CreditCard.name.asc())
            .all()
        )
