from typing import Dict, List

from ledger import TransactionLedger
from models import ClientAccount


class EngineState:
    """
    Client accounts plus the transaction ledger used for dispute lookups.
    Not synchronized: the owning engine decides how access is serialized.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.ledger = TransactionLedger()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def snapshot_accounts(self) -> List[ClientAccount]:
        """Copies of every account, ordered by client id."""
        return [self._accounts[client_id].copy() for client_id in sorted(self._accounts)]
