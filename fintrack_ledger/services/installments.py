"""Installment scheduling and payment processing"""

import uuid
from datetime import date
from typing import Callable, List, Optional
from sqlalchemy.orm import Session

from fintrack_ledger.config import settings
from fintrack_ledger.domain.exceptions import BusinessRuleError, NotFoundError
from fintrack_ledger.domain.installments import (
    BALANCE_PAYMENT_DESCRIPTION,
    PAYMENT_DESCRIPTION,
    build_installment_schedule,
)
from fintrack_ledger.domain.models import (
    EXPENSE,
    InstallmentTerms,
    InstallmentUpdate,
    OperationResult,
    TransactionInput,
)
from fintrack_ledger.domain.validation import validate_installment_terms, validate_installment_update
from fintrack_ledger.infrastructure.database.models import Installment
from fintrack_ledger.infrastructure.database.repositories import (
    CreditCardRepository,
    InstallmentRepository,
    PeriodRepository,
    TransactionRepository,
)
from fintrack_ledger.infrastructure.observability.metrics import backfill_transaction_counter
from fintrack_ledger.services.unit_of_work import require_user, run_atomically
from fintrack_ledger.utils.date_utils import current_date


def _today_in_reference_zone() -> date:
    return current_date(settings.reference_timezone)


class InstallmentService:
    """Creates installment plans with backfilled history and advances them one cycle at a time"""

    def __init__(self, db: Session, today: Optional[Callable[[], date]] = None):
        self.db = db
        self.today = today or _today_in_reference_zone
        self.periods = PeriodRepository(db)
        self.transactions = TransactionRepository(db)
        self.installments = InstallmentRepository(db)
        self.credit_cards = CreditCardRepository(db)

    def create_installment(self, user_id: str, terms: InstallmentTerms) -> OperationResult:
        """
        Create an installment and backfill transactions for what was already paid.

        Backfilled transactions only record history: they don't touch bank
        balances or loans, and the settled months are already deducted from
        remaining_months.
        """
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            validate_installment_terms(terms)

            card = self.credit_cards.get_owned(user_id, terms.credit_card_id)
            if card is None:
                raise NotFoundError("Credit card not found")
            if not card.statement_day:
                raise BusinessRuleError("Statement date required")
            self.transactions.verify_link(user_id, "category_id", terms.category_id)

            schedule = build_installment_schedule(
                total_months=terms.total_months,
                monthly_payment=terms.monthly_payment,
                current_balance_payment=terms.current_balance_payment,
                start_date=terms.start_date,
                statement_day=card.statement_day,
            )

            db_installment = self.installments.create(user_id, terms, schedule.remaining_months)

            description = BALANCE_PAYMENT_DESCRIPTION.format(name=terms.name)
            for payment in schedule.payments:
                _, month_record = self.periods.resolve_period(user_id, payment.due_date.year, payment.due_date.month)
                self.transactions.create(
                    month_record.id,
                    TransactionInput(
                        date=payment.due_date,
                        amount=payment.amount,
                        type=EXPENSE,
                        description=description,
                        credit_card_id=terms.credit_card_id,
                        category_id=terms.category_id,
                    ),
                    installment_id=db_installment.id,
                )

            backfill_transaction_counter.inc(len(schedule.payments))
            return db_installment.id

        return run_atomically(self.db, "create_installment", user_id, "Failed to create installment", work)

    def pay_installment(self, user_id: str, installment_id: uuid.UUID) -> OperationResult:
        """
        Pay one cycle today: record the expense and consume one remaining month.

        Dated today in the reference timezone, not on the installment's own schedule.
        """
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            db_installment = self.installments.get_owned(user_id, installment_id)
            if db_installment is None:
                raise NotFoundError("Installment not found")
            if db_installment.remaining_months <= 0:
                raise BusinessRuleError("Installment already completed")

            today = self.today()
            _, month_record = self.periods.resolve_period(user_id, today.year, today.month)
            db_transaction = self.transactions.create(
                month_record.id,
                TransactionInput(
                    date=today,
                    amount=db_installment.monthly_payment,
                    type=EXPENSE,
                    description=PAYMENT_DESCRIPTION.format(name=db_installment.name),
                    credit_card_id=db_installment.credit_card_id,
                    category_id=db_installment.category_id,
                ),
                installment_id=db_installment.id,
                consumes_installment_month=True,
            )

            # Guarded decrement: a concurrent payment may have taken the last month
            if not self.installments.consume_month(user_id, db_installment.id):
                raise BusinessRuleError("Installment already completed")
            return db_transaction.id

        return run_atomically(self.db, "pay_installment", user_id, "Failed to process payment", work)

    def update_installment(self, user_id: str, installment_id: uuid.UUID, update: InstallmentUpdate) -> OperationResult:
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            db_installment = self.installments.get_owned(user_id, installment_id)
            if db_installment is None:
                raise NotFoundError("Installment not found")
            validate_installment_update(update, db_installment.total_months)
            if self.credit_cards.get_owned(user_id, update.credit_card_id) is None:
                raise NotFoundError("Credit card not found")
            self.transactions.verify_link(user_id, "category_id", update.category_id)

            self.installments.update(db_installment, update)
            return db_installment.id

        return run_atomically(self.db, "update_installment", user_id, "Failed to update installment", work)

    def delete_installment(self, user_id: str, installment_id: uuid.UUID) -> OperationResult:
        user_id = require_user(user_id)

        def work() -> uuid.UUID:
            db_installment = self.installments.get_owned(user_id, installment_id)
            if db_installment is None:
                raise NotFoundError("Installment not found")
            self.installments.delete(db_installment)
            return installment_id

        return run_atomically(self.db, "delete_installment", user_id, "Failed to delete installment", work)

    def list_installments(self, user_id: str) -> List[Installment]:
        user_id = require_user(user_id)
        return self.installments.list_for_user(user_id)
