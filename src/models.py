import threading
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional

from amount import ZERO, exact_sum
from errors import AccountLocked, InsufficientFunds, InvalidAmount


class ActionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def creates_transaction(self) -> bool:
        return self in (ActionType.DEPOSIT, ActionType.WITHDRAWAL)


@dataclass(frozen=True)
class Action:
    action_type: ActionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Balances for one client. total is derived, so it always equals available + held.
    Every mutator checks the lock and its preconditions before touching a balance.
    """

    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self._check_mutable(amount)
        available = exact_sum(self.available, amount)
        # total must stay exact as well
        exact_sum(available, self.held)
        self.available = available

    def debit(self, amount: Decimal) -> None:
        self._check_mutable(amount)
        if amount > self.available:
            raise InsufficientFunds(self.client_id, amount, self.available)
        self.available = exact_sum(self.available, -amount)

    def hold(self, amount: Decimal) -> None:
        self._check_mutable(amount)
        if amount > self.available:
            raise InsufficientFunds(self.client_id, amount, self.available)
        available, held = exact_sum(self.available, -amount), exact_sum(self.held, amount)
        self.available, self.held = available, held

    def release(self, amount: Decimal) -> None:
        self._check_mutable(amount)
        if amount > self.held:
            raise InsufficientFunds(self.client_id, amount, self.held)
        available, held = exact_sum(self.available, amount), exact_sum(self.held, -amount)
        self.available, self.held = available, held

    def forfeit(self, amount: Decimal) -> None:
        """Remove held funds for good and lock the account."""
        self._check_mutable(amount)
        if amount > self.held:
            raise InsufficientFunds(self.client_id, amount, self.held)
        self.held = exact_sum(self.held, -amount)
        self.locked = True

    def copy(self) -> "ClientAccount":
        return replace(self)

    def _check_mutable(self, amount: Decimal) -> None:
        if self.locked:
            raise AccountLocked(self.client_id)
        if amount is None or amount <= 0:
            raise InvalidAmount(amount)


class ProcessingStats:
    """Thread-safe counters for tracking processing statistics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.applied = 0
        self.rejected = 0

    def record_success(self):
        with self._lock:
            self.applied += 1

    def record_failure(self):
        with self._lock:
            self.rejected += 1
