import csv
import logging
from typing import Dict, Iterable, Iterator, Optional, TextIO

from amount import format_amount, to_amount
from errors import InvalidAmount
from models import Action, ActionType, ClientAccount

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def parse_row(row: Dict[str, str]) -> Optional[Action]:
    """Parse CSV row into Action. Malformed rows are logged and skipped."""
    try:
        # DictReader files surplus fields under a None key
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

        action_type = ActionType(normalized["type"].lower())
        client_id = int(normalized["client"])
        transaction_id = int(normalized["tx"])

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str and action_type.creates_transaction:
            amount = to_amount(amount_str)

        return Action(
            action_type=action_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidAmount) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def read_actions(stream: TextIO) -> Iterator[Action]:
    """Yield actions from a CSV stream with a type,client,tx,amount header."""
    reader = csv.DictReader(stream, skipinitialspace=True)
    for row in reader:
        action = parse_row(row)
        if action:
            yield action


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in accounts:
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
