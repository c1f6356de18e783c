"""SQLAlchemy ORM models for the ledger and its link targets"""

import uuid
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(14, 2)


class BankAccount(Base):
    """Bank account whose balance is maintained by the ledger"""

    __tablename__ = "bank_account"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="Savings")
    balance = Column(Money, nullable=False, default=0)
    is_savings = Column(Boolean, nullable=False, default=False)
    # Informational only, never touched by the ledger
    target_amount = Column(Money, nullable=True)
    growth_rate = Column(Numeric(6, 3), nullable=True)
    target_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CreditCard(Base):
    """Credit card; its statement day anchors installment cycles"""

    __tablename__ = "credit_card"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    last_four = Column(Text, nullable=True)
    color = Column(Text, nullable=True)
    statement_day = Column(Integer, nullable=True)
    due_day = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_credit_card_user_name"),)


class Loan(Base):
    """Loan whose remaining amount is reduced by expense transactions"""

    __tablename__ = "loan"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    total_amount = Column(Money, nullable=False)
    remaining_amount = Column(Money, nullable=False)
    interest_rate = Column(Numeric(6, 3), nullable=False, default=0)
    monthly_payment = Column(Money, nullable=True)
    due_date = Column(Integer, nullable=True)  # day of month
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Category(Base):
    """Spending category (managed elsewhere, referenced by transactions)"""

    __tablename__ = "category"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)


class IncomeSource(Base):
    """Income source (managed elsewhere, referenced by transactions)"""

    __tablename__ = "income_source"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)


class Installment(Base):
    """Credit card installment plan with a remaining-month counter"""

    __tablename__ = "installment"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    total_amount = Column(Money, nullable=False)
    monthly_payment = Column(Money, nullable=False)
    total_months = Column(Integer, nullable=False)
    remaining_months = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    credit_card_id = Column(Uuid, ForeignKey("credit_card.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Uuid, ForeignKey("category.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Year(Base):
    """Per-user year container, created lazily"""

    __tablename__ = "period_year"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)

    months = relationship("Month", back_populates="year_record", cascade="all, delete-orphan")

    __table_args__ = (UniqueConstraint("user_id", "year", name="uq_year_user_year"),)


class Month(Base):
    """Month container within a year, created lazily"""

    __tablename__ = "period_month"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    year_id = Column(Uuid, ForeignKey("period_year.id", ondelete="CASCADE"), nullable=False)
    month = Column(Integer, nullable=False)

    year_record = relationship("Year", back_populates="months")
    transactions = relationship("Transaction", back_populates="month_record")

    __table_args__ = (UniqueConstraint("year_id", "month", name="uq_month_year_month"),)


class Transaction(Base):
    """
    Ledger entry. Role links are orthogonal: bank_account_id is the funding
    source while loan/installment/credit card are targets.
    """

    __tablename__ = "ledger_transaction"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    month_id = Column(Uuid, ForeignKey("period_month.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount = Column(Money, nullable=False)
    type = Column(Text, nullable=False)  # "income" or "expense"
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    category_id = Column(Uuid, ForeignKey("category.id", ondelete="SET NULL"), nullable=True)
    credit_card_id = Column(Uuid, ForeignKey("credit_card.id", ondelete="SET NULL"), nullable=True)
    income_source_id = Column(Uuid, ForeignKey("income_source.id", ondelete="SET NULL"), nullable=True)
    bank_account_id = Column(Uuid, ForeignKey("bank_account.id", ondelete="SET NULL"), nullable=True)
    loan_id = Column(Uuid, ForeignKey("loan.id", ondelete="SET NULL"), nullable=True)
    installment_id = Column(Uuid, ForeignKey("installment.id", ondelete="SET NULL"), nullable=True)
    # False for backfilled history, which was settled in aggregate at plan creation
    consumes_installment_month = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    month_record = relationship("Month", back_populates="transactions")
