"""
Tests for the jupiter-vault command line interface.

LedgerClient is replaced with a mock; only argument handling, output and
exit codes are exercised here.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jupiter_vault.__main__ import _parse_fields, build_parser, main
from jupiter_vault.core.errors import LedgerOperationError
from jupiter_vault.ledger.models import TransactionReceipt
from jupiter_vault.vault.record_store import StoredRecord

from conftest import ADDRESS, PASSPHRASE, SERVER


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JUPITER_SERVER", SERVER)
    monkeypatch.setenv("JUPITER_ADDRESS", ADDRESS)
    monkeypatch.setenv("JUPITER_PASSPHRASE", PASSPHRASE)


@pytest.fixture
def fake_client(env):
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    with patch("jupiter_vault.__main__.LedgerClient", return_value=client):
        yield client


class TestParser:
    def test_parse_fields(self):
        assert _parse_fields(["site=example.com", "note=a=b"]) == {
            "site": "example.com",
            "note": "a=b",
        }

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_transactions_defaults(self):
        args = build_parser().parse_args(["transactions"])
        assert args.type == 1
        assert args.no_message is False


class TestCommands:
    def test_balance(self, fake_client, capsys):
        fake_client.get_balance = AsyncMock(return_value="1.5")
        assert main(["balance"]) == 0
        assert json.loads(capsys.readouterr().out) == {"address": ADDRESS, "balance": "1.5"}
        fake_client.get_balance.assert_awaited_once_with(ADDRESS)

    def test_transactions_flags(self, fake_client, capsys):
        fake_client.list_transactions = AsyncMock(return_value=[])
        assert main(["transactions", "--no-message", "--type", "0"]) == 0
        assert json.loads(capsys.readouterr().out) == []
        fake_client.list_transactions.assert_awaited_once_with(with_message=False, type=0)

    def test_records(self, fake_client, capsys):
        with patch("jupiter_vault.__main__.RecordStore") as store_cls:
            store_cls.return_value.list_records = AsyncMock(return_value=[
                StoredRecord("9", 10, True, {"site": "a.com"}),
            ])
            assert main(["records"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out == [{
            "transaction_id": "9",
            "timestamp": 10,
            "confirmed": True,
            "fields": {"site": "a.com"},
        }]

    def test_store(self, fake_client, capsys):
        receipt = TransactionReceipt.from_dict({"signatureHash": "aa", "transaction": "5"})
        with patch("jupiter_vault.__main__.RecordStore") as store_cls:
            store_cls.return_value.save = AsyncMock(return_value=receipt)
            assert main(["store", "site=a.com", "password=pw"]) == 0
            store_cls.return_value.save.assert_awaited_once_with(
                {"site": "a.com", "password": "pw"}
            )
        assert json.loads(capsys.readouterr().out)["transaction"] == "5"

    def test_store_bad_field(self, fake_client):
        with pytest.raises(SystemExit):
            main(["store", "no-equals-sign"])

    def test_ledger_error_exit_code(self, fake_client, capsys):
        fake_client.transfer = AsyncMock(
            side_effect=LedgerOperationError({"errorCode": 6, "errorDescription": "Not enough funds"})
        )
        assert main(["fund", "JUP-OTHR"]) == 1
        assert "Not enough funds" in capsys.readouterr().err

    def test_missing_config(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        assert main(["balance"]) == 1
        assert "required" in capsys.readouterr().err
