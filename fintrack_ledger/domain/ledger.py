"""
Ledger side-effect algebra.

A transaction's effects on balances and counters are computed here as plain
deltas; persistence applies them with atomic increments. Editing a
transaction is modelled as reversing the old effects and applying the new
ones, which behaves exactly like delete-then-recreate.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional

from fintrack_ledger.domain.models import EXPENSE, INCOME


@dataclass(frozen=True)
class LedgerEntry:
    """The part of a transaction that has side effects"""

    amount: Decimal
    type: str
    bank_account_id: Optional[uuid.UUID] = None
    loan_id: Optional[uuid.UUID] = None
    installment_id: Optional[uuid.UUID] = None


@dataclass
class LedgerEffects:
    """Pending deltas per row: balances, loan remaining amounts, installment months"""

    bank_accounts: Dict[uuid.UUID, Decimal] = field(default_factory=dict)
    loans: Dict[uuid.UUID, Decimal] = field(default_factory=dict)
    installments: Dict[uuid.UUID, int] = field(default_factory=dict)

    def inverted(self) -> "LedgerEffects":
        return LedgerEffects(
            bank_accounts={k: -v for k, v in self.bank_accounts.items()},
            loans={k: -v for k, v in self.loans.items()},
            installments={k: -v for k, v in self.installments.items()},
        )

    def combine(self, other: "LedgerEffects") -> "LedgerEffects":
        """Sum two effect sets, dropping deltas that cancel out"""
        return LedgerEffects(
            bank_accounts=_merge(self.bank_accounts, other.bank_accounts),
            loans=_merge(self.loans, other.loans),
            installments=_merge(self.installments, other.installments),
        )

    def is_empty(self) -> bool:
        return not (self.bank_accounts or self.loans or self.installments)


def _merge(left: Dict, right: Dict) -> Dict:
    merged = dict(left)
    for key, delta in right.items():
        merged[key] = merged.get(key, 0) + delta
    return {k: v for k, v in merged.items() if v != 0}


def effects_of(entry: LedgerEntry) -> LedgerEffects:
    """
    Effects a transaction has while it exists.

    - Bank account: income credits, expense debits
    - Loan: only expenses reduce the remaining amount
    - Installment: each expense consumes one remaining month
    """
    amount = Decimal(entry.amount)
    effects = LedgerEffects()

    if entry.bank_account_id:
        effects.bank_accounts[entry.bank_account_id] = amount if entry.type == INCOME else -amount

    if entry.type == EXPENSE:
        if entry.loan_id:
            effects.loans[entry.loan_id] = -amount
        if entry.installment_id:
            effects.installments[entry.installment_id] = -1

    return effects


def reversal_of(entry: LedgerEntry) -> LedgerEffects:
    return effects_of(entry).inverted()


def rebalance(old: LedgerEntry, new: LedgerEntry) -> LedgerEffects:
    """Net effect of editing old into new; empty when nothing effectful changed"""
    return reversal_of(old).combine(effects_of(new))
