"""Installment amortization: backfill schedule for balances paid before entry"""

from datetime import date
from decimal import Decimal
from typing import List

from fintrack_ledger.domain.models import InstallmentSchedule, ScheduledPayment
from fintrack_ledger.utils.date_utils import add_cycles, first_statement_on_or_after

BALANCE_PAYMENT_DESCRIPTION = "Installment Balance Payment: {name}"
PAYMENT_DESCRIPTION = "Installment Payment: {name}"


def normalize_paid_amount(value) -> Decimal:
    """Clamp an already-paid amount to >= 0; non-finite or missing counts as 0"""
    if value is None:
        return Decimal("0")
    value = Decimal(value)
    if not value.is_finite():
        return Decimal("0")
    return max(value, Decimal("0"))


def build_installment_schedule(
    total_months: int,
    monthly_payment: Decimal,
    current_balance_payment: Decimal,
    start_date: date,
    statement_day: int,
) -> InstallmentSchedule:
    """
    Work out how much of an installment is already settled and backfill it.

    Requirements:
    - paid_months full cycles and one partial cycle for any remainder
    - remaining_months floors at 0
    - Backfill dates start at the first statement on/after start_date and
      advance one statement cycle per payment
    - Backfill never exceeds total_months entries

    Example:
        1200 over 12 months at 100/month, 250 already paid, statement day 5,
        start 2024-01-10
        -> paid_months=2, remainder=50, remaining_months=10
        -> [100 @ 2024-02-05, 100 @ 2024-03-05, 50 @ 2024-04-05]
    """
    paid = normalize_paid_amount(current_balance_payment)
    monthly_payment = Decimal(monthly_payment)

    if monthly_payment <= 0:
        return InstallmentSchedule(paid_months=0, remainder=Decimal("0"), remaining_months=total_months)

    paid_months = int(paid // monthly_payment)
    remainder = paid - paid_months * monthly_payment
    remaining_months = max(total_months - min(paid_months, total_months), 0)

    # Full cycles beyond the term are dropped, and so is the partial one
    settled_months = min(paid_months, total_months)
    amounts: List[Decimal] = [monthly_payment] * settled_months
    if remainder > 0 and paid_months < total_months:
        amounts.append(remainder)

    anchor = first_statement_on_or_after(start_date, statement_day)
    payments = [
        ScheduledPayment(due_date=add_cycles(anchor, statement_day, i), amount=amount)
        for i, amount in enumerate(amounts)
    ]

    return InstallmentSchedule(
        paid_months=paid_months,
        remainder=remainder,
        remaining_months=remaining_months,
        payments=payments,
    )
