"""Unit tests for installment backfill scheduling"""

from datetime import date
from decimal import Decimal
from fintrack_ledger.domain.installments import build_installment_schedule, normalize_paid_amount


def test_schedule_partial_history():
    """Test 250 paid at 100/month: two full cycles plus a 50 remainder"""
    schedule = build_installment_schedule(
        total_months=12,
        monthly_payment=Decimal("100"),
        current_balance_payment=Decimal("250"),
        start_date=date(2024, 1, 10),
        statement_day=5,
    )

    assert schedule.paid_months == 2
    assert schedule.remainder == Decimal("50")
    assert schedule.remaining_months == 10
    assert [p.amount for p in schedule.payments] == [Decimal("100"), Decimal("100"), Decimal("50")]
    assert [p.due_date for p in schedule.payments] == [
        date(2024, 2, 5),
        date(2024, 3, 5),
        date(2024, 4, 5),
    ]


def test_schedule_nothing_paid():
    """Test no backfill when nothing was paid yet"""
    schedule = build_installment_schedule(12, Decimal("100"), Decimal("0"), date(2024, 1, 10), 5)

    assert schedule.paid_months == 0
    assert schedule.remaining_months == 12
    assert schedule.payments == []


def test_schedule_exact_months_no_remainder_entry():
    """Test an exact multiple produces only full payments"""
    schedule = build_installment_schedule(6, Decimal("50"), Decimal("150"), date(2024, 3, 1), 20)

    assert schedule.paid_months == 3
    assert schedule.remainder == Decimal("0")
    assert schedule.remaining_months == 3
    assert [p.amount for p in schedule.payments] == [Decimal("50")] * 3
    assert schedule.payments[0].due_date == date(2024, 3, 20)


def test_schedule_remainder_only():
    """Test less than one payment yields a single partial entry"""
    schedule = build_installment_schedule(12, Decimal("100"), Decimal("30"), date(2024, 1, 1), 5)

    assert schedule.paid_months == 0
    assert schedule.remaining_months == 12
    assert len(schedule.payments) == 1
    assert schedule.payments[0].amount == Decimal("30")
    assert schedule.payments[0].due_date == date(2024, 1, 5)


def test_schedule_overpaid_is_capped_at_term():
    """Test overpayment floors remaining months at 0 and caps backfill at the term"""
    schedule = build_installment_schedule(3, Decimal("100"), Decimal("550"), date(2024, 1, 10), 5)

    assert schedule.paid_months == 5
    assert schedule.remaining_months == 0
    assert len(schedule.payments) == 3
    assert all(p.amount == Decimal("100") for p in schedule.payments)


def test_schedule_fully_paid_with_remainder_drops_partial():
    """Test a remainder beyond the full term is not backfilled"""
    schedule = build_installment_schedule(2, Decimal("100"), Decimal("230"), date(2024, 1, 10), 5)

    assert schedule.remaining_months == 0
    assert [p.amount for p in schedule.payments] == [Decimal("100"), Decimal("100")]


def test_schedule_non_positive_monthly_payment():
    """Test monthly payment <= 0 skips backfill and keeps the full term"""
    for monthly in (Decimal("0"), Decimal("-10")):
        schedule = build_installment_schedule(12, monthly, Decimal("500"), date(2024, 1, 10), 5)
        assert schedule.remaining_months == 12
        assert schedule.payments == []


def test_schedule_dates_cross_year_and_clamp():
    """Test backfill dates wrap the year and clamp the statement day"""
    schedule = build_installment_schedule(12, Decimal("100"), Decimal("300"), date(2023, 12, 15), 31)

    assert [p.due_date for p in schedule.payments] == [
        date(2023, 12, 31),
        date(2024, 1, 31),
        date(2024, 2, 29),
    ]


def test_normalize_paid_amount():
    """Test negative, missing and non-finite amounts normalize to zero"""
    assert normalize_paid_amount(Decimal("-5")) == Decimal("0")
    assert normalize_paid_amount(None) == Decimal("0")
    assert normalize_paid_amount(Decimal("NaN")) == Decimal("0")
    assert normalize_paid_amount(Decimal("Infinity")) == Decimal("0")
    assert normalize_paid_amount(Decimal("12.50")) == Decimal("12.50")
