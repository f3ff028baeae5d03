import logging
from decimal import Decimal

from amount import to_amount
from errors import (
    AccountLocked,
    ClientMismatch,
    DuplicateTransaction,
    EngineError,
    InsufficientFunds,
    InvalidAmount,
    InvalidState,
)
from ledger import TransactionRecord
from models import Action, ActionType, ClientAccount
from state import EngineState

logger = logging.getLogger(__name__)


class ActionProcessor:
    """
    Applies actions to engine state, one at a time.
    Raises an EngineError subclass on rejection. Every precondition is checked
    before the first mutation, so a rejected action leaves the state untouched.
    Caller is responsible for serializing calls.
    """

    def __init__(self, state: EngineState):
        self._state = state

    def apply(self, action: Action) -> None:
        """
        Apply a single action.

        Raises:
            AccountLocked: the client's account has been charged back
            InvalidAmount: deposit or withdrawal without a positive amount
            DuplicateTransaction: deposit or withdrawal reusing a transaction id
            UnknownTransaction: dispute, resolve or chargeback of a missing transaction
            ClientMismatch: referenced transaction belongs to another client
            InvalidState: dispute lifecycle violated
            InsufficientFunds: withdrawal or dispute hold exceeds available funds
        """
        account = self._state.get_or_create_account(action.client_id)

        try:
            # Lock gate comes before any transaction checks
            if account.locked:
                raise AccountLocked(account.client_id)

            match action.action_type:
                case ActionType.DEPOSIT:
                    self._handle_deposit(account, action)
                case ActionType.WITHDRAWAL:
                    self._handle_withdrawal(account, action)
                case ActionType.DISPUTE:
                    self._handle_dispute(account, action)
                case ActionType.RESOLVE:
                    self._handle_resolve(account, action)
                case ActionType.CHARGEBACK:
                    self._handle_chargeback(account, action)
        except EngineError as e:
            logger.warning(f"Rejected {action}: {e}")
            raise

        logger.debug(f"Applied {action}")

    def _handle_deposit(self, account: ClientAccount, action: Action) -> None:
        amount = self._check_new_transaction(action)

        # Ledger is written only after the balance change succeeds
        account.credit(amount)
        self._state.ledger.record(action.transaction_id, action.client_id, ActionType.DEPOSIT, amount)

    def _handle_withdrawal(self, account: ClientAccount, action: Action) -> None:
        amount = self._check_new_transaction(action)
        if amount > account.available:
            raise InsufficientFunds(account.client_id, amount, account.available)

        account.debit(amount)
        self._state.ledger.record(action.transaction_id, action.client_id, ActionType.WITHDRAWAL, amount)

    def _handle_dispute(self, account: ClientAccount, action: Action) -> None:
        original = self._lookup_own_transaction(action)

        if original.disputed:
            raise InvalidState(action.transaction_id, "already disputed")

        # Withdrawn funds have already left the account, so only deposits can be disputed
        if original.kind != ActionType.DEPOSIT:
            raise InvalidState(action.transaction_id, f"only deposits can be disputed, not a {original.kind.value}")

        # hold raises InsufficientFunds before touching anything
        account.hold(original.amount)
        self._state.ledger.mark_disputed(action.transaction_id)

    def _handle_resolve(self, account: ClientAccount, action: Action) -> None:
        original = self._lookup_disputed_transaction(action)

        account.release(original.amount)
        self._state.ledger.clear_disputed(action.transaction_id)

    def _handle_chargeback(self, account: ClientAccount, action: Action) -> None:
        original = self._lookup_disputed_transaction(action)

        account.forfeit(original.amount)
        self._state.ledger.clear_disputed(action.transaction_id)
        logger.info(f"Client {account.client_id} locked after chargeback of tx {action.transaction_id}")

    def _check_new_transaction(self, action: Action) -> Decimal:
        if action.amount is None:
            raise InvalidAmount(action.amount)
        amount = to_amount(action.amount)
        if amount <= 0:
            raise InvalidAmount(action.amount)
        if action.transaction_id in self._state.ledger:
            raise DuplicateTransaction(action.transaction_id)
        return amount

    def _lookup_own_transaction(self, action: Action) -> TransactionRecord:
        original = self._state.ledger.lookup(action.transaction_id)
        if original.client_id != action.client_id:
            raise ClientMismatch(action.transaction_id, action.client_id, original.client_id)
        return original

    def _lookup_disputed_transaction(self, action: Action) -> TransactionRecord:
        original = self._lookup_own_transaction(action)
        if not original.disputed:
            raise InvalidState(action.transaction_id, "not disputed")
        return original
