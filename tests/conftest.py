"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintrack_ledger.api.main import create_app
from fintrack_ledger.infrastructure.database.models import (
    Base,
    BankAccount,
    Category,
    CreditCard,
    IncomeSource,
    Loan,
)
from fintrack_ledger.infrastructure.database.session import enable_sqlite_savepoints, get_db
from fintrack_ledger.services.installments import InstallmentService
from fintrack_ledger.services.ledger import LedgerService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
enable_sqlite_savepoints(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user_alice"
OTHER_USER_ID = "user_mallory"
TODAY = date(2024, 6, 15)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def other_user_id() -> str:
    return OTHER_USER_ID


@pytest.fixture
def today() -> date:
    """Fixed 'now' used by the payment processor"""
    return TODAY


@pytest.fixture
def ledger(db: Session) -> LedgerService:
    return LedgerService(db)


@pytest.fixture
def installment_service(db: Session) -> InstallmentService:
    return InstallmentService(db, today=lambda: TODAY)


def _persist(db: Session, entity):
    db.add(entity)
    db.commit()
    return entity


@pytest.fixture
def bank_account(db: Session) -> BankAccount:
    """Checking account holding 100.00"""
    return _persist(db, BankAccount(user_id=USER_ID, name="Checking", type="Current", balance=Decimal("100.00")))


@pytest.fixture
def savings_account(db: Session) -> BankAccount:
    return _persist(db, BankAccount(user_id=USER_ID, name="Savings", balance=Decimal("1000.00"), is_savings=True))


@pytest.fixture
def loan(db: Session) -> Loan:
    """Loan with 500.00 outstanding"""
    return _persist(
        db,
        Loan(
            user_id=USER_ID,
            name="Car loan",
            total_amount=Decimal("500.00"),
            remaining_amount=Decimal("500.00"),
            interest_rate=Decimal("3.5"),
        ),
    )


@pytest.fixture
def credit_card(db: Session) -> CreditCard:
    """Card whose statement closes on the 5th"""
    return _persist(db, CreditCard(user_id=USER_ID, name="Visa", statement_day=5, due_day=25))


@pytest.fixture
def category(db: Session) -> Category:
    return _persist(db, Category(user_id=USER_ID, name="Electronics"))


@pytest.fixture
def income_source(db: Session) -> IncomeSource:
    return _persist(db, IncomeSource(user_id=USER_ID, name="Salary"))


@pytest.fixture
def foreign_account(db: Session) -> BankAccount:
    """Account owned by a different user"""
    return _persist(db, BankAccount(user_id=OTHER_USER_ID, name="Not yours", balance=Decimal("999.00")))
