from decimal import Decimal
from typing import Any


class EngineError(Exception):
    """Base class for every rejection raised by the engine. None are fatal."""


class DuplicateTransaction(EngineError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"transaction {transaction_id} has already been recorded")


class UnknownTransaction(EngineError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"transaction {transaction_id} does not exist")


class ClientMismatch(EngineError):
    def __init__(self, transaction_id: int, action_client: int, transaction_client: int):
        self.transaction_id = transaction_id
        self.action_client = action_client
        self.transaction_client = transaction_client
        super().__init__(
            f"transaction {transaction_id} belongs to client {transaction_client}, "
            f"not client {action_client}"
        )


class InvalidState(EngineError):
    def __init__(self, transaction_id: int, reason: str):
        self.transaction_id = transaction_id
        self.reason = reason
        super().__init__(f"transaction {transaction_id}: {reason}")


class InsufficientFunds(EngineError):
    def __init__(self, client_id: int, requested: Decimal, available: Decimal):
        self.client_id = client_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"client {client_id} has {available} but {requested} was requested"
        )


class AccountLocked(EngineError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"account for client {client_id} is locked")


class InvalidAmount(EngineError):
    def __init__(self, amount: Any):
        self.amount = amount
        super().__init__(f"invalid amount: {amount!r}")
