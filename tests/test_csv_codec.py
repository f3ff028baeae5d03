import sys
import os
import io
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from csv_codec import parse_row, read_actions, write_accounts
from models import Action, ActionType, ClientAccount


class TestParseRow:
    def test_deposit(self):
        action = parse_row({"type": "deposit", "client": "1", "tx": "2", "amount": "1.5"})
        assert action == Action(ActionType.DEPOSIT, client_id=1, transaction_id=2, amount=Decimal("1.5"))

    def test_whitespace_and_case(self):
        action = parse_row({" type": " Withdrawal ", " client": " 3", " tx": " 4", " amount": " 2.0 "})
        assert action.action_type == ActionType.WITHDRAWAL
        assert action.client_id == 3
        assert action.transaction_id == 4
        assert action.amount == Decimal("2.0")

    def test_dispute_has_no_amount(self):
        action = parse_row({"type": "dispute", "client": "1", "tx": "2", "amount": ""})
        assert action.amount is None

    def test_dispute_amount_ignored(self):
        action = parse_row({"type": "resolve", "client": "1", "tx": "2", "amount": "9"})
        assert action.amount is None

    def test_missing_amount_column(self):
        action = parse_row({"type": "chargeback", "client": "1", "tx": "2"})
        assert action.action_type == ActionType.CHARGEBACK
        assert action.amount is None

    def test_amount_rounded(self):
        action = parse_row({"type": "deposit", "client": "1", "tx": "2", "amount": "1.23455"})
        assert action.amount == Decimal("1.2346")

    def test_malformed_rows(self):
        assert parse_row({"type": "refund", "client": "1", "tx": "2", "amount": "1"}) is None
        assert parse_row({"type": "deposit", "client": "one", "tx": "2", "amount": "1"}) is None
        assert parse_row({"type": "deposit", "client": "1", "tx": "2", "amount": "1.2.3"}) is None
        assert parse_row({"type": "deposit", "client": "1"}) is None


class TestReadActions:
    def test_reads_and_skips(self):
        stream = io.StringIO("\n".join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "bogus, 1, 2, 1.0",
            "dispute, 1, 1,",
            "deposit,2,3,4.5,extra",
            "withdrawal, 2, 4",
        ]))

        actions = list(read_actions(stream))

        assert [(a.action_type, a.client_id, a.transaction_id) for a in actions] == [
            (ActionType.DEPOSIT, 1, 1),
            (ActionType.DISPUTE, 1, 1),
            (ActionType.DEPOSIT, 2, 3),
            (ActionType.WITHDRAWAL, 2, 4),
        ]
        assert actions[2].amount == Decimal("4.5")
        assert actions[3].amount is None


class TestWriteAccounts:
    def test_format(self):
        stream = io.StringIO()
        write_accounts([
            ClientAccount(client_id=1, available=Decimal("1.5"), held=Decimal("0")),
            ClientAccount(client_id=2, available=Decimal("0"), held=Decimal("2.25"), locked=True),
        ], stream)

        assert stream.getvalue().splitlines() == [
            "client,available,held,total,locked",
            "1,1.5000,0.0000,1.5000,false",
            "2,0.0000,2.2500,2.2500,true",
        ]

    def test_empty(self):
        stream = io.StringIO()
        write_accounts([], stream)
        assert stream.getvalue() == "client,available,held,total,locked\n"
