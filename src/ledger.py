from dataclasses import dataclass
from decimal import Decimal
from typing import Dict

from errors import DuplicateTransaction, InvalidState, UnknownTransaction
from models import ActionType


@dataclass
class TransactionRecord:
    transaction_id: int
    client_id: int
    kind: ActionType
    amount: Decimal
    disputed: bool = False


class TransactionLedger:
    """
    Append-only record of accepted deposits and withdrawals, keyed by transaction id.
    Records are never removed; only their disputed flag changes.
    """

    def __init__(self):
        self._records: Dict[int, TransactionRecord] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def record(self, transaction_id: int, client_id: int, kind: ActionType, amount: Decimal) -> TransactionRecord:
        """Store a new undisputed transaction. Transaction ids are never reused."""
        if not kind.creates_transaction:
            raise ValueError(f"{kind.value} does not create a transaction")
        if transaction_id in self._records:
            raise DuplicateTransaction(transaction_id)

        record = TransactionRecord(
            transaction_id=transaction_id,
            client_id=client_id,
            kind=kind,
            amount=amount,
        )
        self._records[transaction_id] = record
        return record

    def lookup(self, transaction_id: int) -> TransactionRecord:
        record = self._records.get(transaction_id)
        if record is None:
            raise UnknownTransaction(transaction_id)
        return record

    def mark_disputed(self, transaction_id: int) -> None:
        record = self.lookup(transaction_id)
        if record.disputed:
            raise InvalidState(transaction_id, "already disputed")
        record.disputed = True

    def clear_disputed(self, transaction_id: int) -> None:
        record = self.lookup(transaction_id)
        if not record.disputed:
            raise InvalidState(transaction_id, "not disputed")
        record.disputed = False
