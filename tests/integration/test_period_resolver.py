"""Integration tests for lazy Year/Month resolution"""

from fintrack_ledger.infrastructure.database.models import Month, Year
from fintrack_ledger.infrastructure.database.repositories import PeriodRepository


def test_resolve_creates_year_and_month(db, user_id):
    year_record, month_record = PeriodRepository(db).resolve_period(user_id, 2024, 3)
    db.commit()

    assert year_record.user_id == user_id
    assert year_record.year == 2024
    assert month_record.month == 3
    assert month_record.year_id == year_record.id


def test_resolve_is_idempotent(db, user_id):
    repo = PeriodRepository(db)
    first = repo.resolve_period(user_id, 2024, 3)
    second = repo.resolve_period(user_id, 2024, 3)
    db.commit()

    assert first[0].id == second[0].id
    assert first[1].id == second[1].id
    assert db.query(Year).count() == 1
    assert db.query(Month).count() == 1


def test_resolve_reuses_year_across_months(db, user_id):
    repo = PeriodRepository(db)
    march = repo.resolve_period(user_id, 2024, 3)
    april = repo.resolve_period(user_id, 2024, 4)
    db.commit()

    assert march[0].id == april[0].id
    assert march[1].id != april[1].id
    assert db.query(Year).count() == 1
    assert db.query(Month).count() == 2


def test_resolve_scoped_per_user(db, user_id, other_user_id):
    repo = PeriodRepository(db)
    mine = repo.resolve_period(user_id, 2024, 3)
    theirs = repo.resolve_period(other_user_id, 2024, 3)
    db.commit()

    assert mine[0].id != theirs[0].id
    assert db.query(Year).count() == 2


def test_resolve_recovers_from_create_race(db, user_id, monkeypatch):
    """Test a unique violation on insert is treated as 'already exists'"""
    db.add(Year(user_id=user_id, year=2024))
    db.commit()
    existing = db.query(Year).filter(Year.user_id == user_id, Year.year == 2024).one()

    original_find = PeriodRepository._find_year
    calls = {"n": 0}

    def stale_first_lookup(self, uid, year):
        # First lookup misses, as if another request inserted after we checked
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return original_find(self, uid, year)

    monkeypatch.setattr(PeriodRepository, "_find_year", stale_first_lookup)

    year_record, month_record = PeriodRepository(db).resolve_period(user_id, 2024, 5)
    db.commit()

    assert year_record.id == existing.id
    assert month_record.year_id == existing.id
    assert db.query(Year).count() == 1


def test_find_month_never_creates(db, user_id):
    repo = PeriodRepository(db)
    assert repo.find_month(user_id, 2024, 1) is None
    assert db.query(Year).count() == 0

    repo.resolve_period(user_id, 2024, 1)
    db.commit()
    assert repo.find_month(user_id, 2024, 1) is not None
