"""Ledger reconciliation: transaction create/update/delete with balance upkeep"""

import uuid
from typing import List
from sqlalchemy.orm import Session

from fintrack_ledger.domain.exceptions import NotFoundError
from fintrack_ledger.domain.ledger import LedgerEntry, effects_of, rebalance, reversal_of
from fintrack_ledger.domain.models import OperationResult, TransactionInput
from fintrack_ledger.domain.validation import validate_transaction_input
from fintrack_ledger.infrastructure.database.models import Transaction
from fintrack_ledger.infrastructure.database.repositories import (
    LedgerRepository,
    PeriodRepository,
    TransactionRepository,
)
from fintrack_ledger.services.unit_of_work import require_user, run_atomically


def _counted_installment(db_transaction: Transaction):
    if db_transaction.consumes_installment_month:
        return db_transaction.installment_id
    return None


def entry_for(db_transaction: Transaction) -> LedgerEntry:
    """Effectful fields of a stored transaction; backfilled history never owns a counter month"""
    return LedgerEntry(
        amount=db_transaction.amount,
        type=db_transaction.type,
        bank_account_id=db_transaction.bank_account_id,
        loan_id=db_transaction.loan_id,
        installment_id=_counted_installment(db_transaction),
    )


class LedgerService:
    """
    Keeps bank balances, loan remaining amounts and installment counters
    consistent with the transactions that reference them.

    Every mutation runs as a single unit: the transaction row and all of its
    side effects commit together or not at all.
    """

    def __init__(self, db: Session):
        self.db = db
        self.periods = PeriodRepository(db)
        self.transactions = TransactionRepository(db)
        self.ledger = LedgerRepository(db)

    def create_transaction(self, user_id: str, payload: TransactionInput) -> OperationResult:
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            validate_transaction_input(payload)
            self.transactions.verify_links(user_id, payload)

            _, month_record = self.periods.resolve_period(user_id, payload.date.year, payload.date.month)
            db_transaction = self.transactions.create(month_record.id, payload)
            self.ledger.apply_effects(user_id, effects_of(entry_for(db_transaction)))
            return db_transaction.id

        return run_atomically(self.db, "create_transaction", user_id, "Failed to create transaction", work)

    def update_transaction(
        self,
        user_id: str,
        transaction_id: uuid.UUID,
        payload: TransactionInput,
    ) -> OperationResult:
        """
        Edit a transaction by reversing its old effects and applying the new.

        The installment link cannot be changed by an edit; if the edited
        transaction is no longer an expense, the installment regains a month.
        """
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            validate_transaction_input(payload)
            db_transaction = self.transactions.get_owned(user_id, transaction_id)
            if db_transaction is None:
                raise NotFoundError("Transaction not found")
            self.transactions.verify_links(user_id, payload)

            old_entry = entry_for(db_transaction)
            new_entry = LedgerEntry(
                amount=payload.amount,
                type=payload.type,
                bank_account_id=payload.bank_account_id,
                loan_id=payload.loan_id,
                installment_id=_counted_installment(db_transaction),
            )
            self.ledger.apply_effects(user_id, rebalance(old_entry, new_entry))

            _, month_record = self.periods.resolve_period(user_id, payload.date.year, payload.date.month)
            self.transactions.update(db_transaction, month_record.id, payload)
            return db_transaction.id

        return run_atomically(self.db, "update_transaction", user_id, "Failed to update transaction", work)

    def delete_transaction(self, user_id: str, transaction_id: uuid.UUID) -> OperationResult:
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            db_transaction = self.transactions.get_owned(user_id, transaction_id)
            if db_transaction is None:
                raise NotFoundError("Transaction not found")

            self.ledger.apply_effects(user_id, reversal_of(entry_for(db_transaction)))
            self.transactions.delete(db_transaction)
            return transaction_id

        return run_atomically(self.db, "delete_transaction", user_id, "Failed to delete transaction", work)

    def list_transactions(self, user_id: str, year: int, month: int) -> List[Transaction]:
        """Transactions recorded in a month, newest first; empty if the month was never used"""
        user_id = require_user(user_id)
        month_record = self.periods.find_month(user_id, year, month)
        if month_record is None:
            return []
        return self.transactions.list_for_month(month_record.id)
