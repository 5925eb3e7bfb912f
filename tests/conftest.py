import pathlib

import pytest
from google.api_core import exceptions

DATA_DIR = pathlib.Path(__file__).parent / "data"


class FakeTransaction:
    """Records every DML statement; raises *error* for statements containing *fail_on*."""

    def __init__(self, fail_on=None, error=None, rows=1):
        self.fail_on = fail_on
        self.error = error
        self.rows = rows
        self.executed = []

    def execute_update(self, sql):
        if self.fail_on and self.fail_on in sql:
            raise self.error
        self.executed.append(sql)
        return self.rows


class FakeDatabase:
    """Mimics ``run_in_transaction``: retries the unit of work on ``Aborted``."""

    def __init__(self, *transactions, error=None):
        self.transactions = list(transactions) or [FakeTransaction()]
        self.error = error
        self.calls = []
        self.attempts = 0

    def run_in_transaction(self, func, *args, **kw):
        self.calls.append(kw)
        if self.error is not None:
            raise self.error
        while True:
            txn = self.transactions[min(self.attempts, len(self.transactions) - 1)]
            self.attempts += 1
            try:
                return func(txn, *args)
            except exceptions.Aborted:
                if self.attempts >= len(self.transactions):
                    raise


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def emulator_env(monkeypatch):
    """Keep SPANNER_EMULATOR_HOST changes local to the test."""
    monkeypatch.delenv("SPANNER_EMULATOR_HOST", raising=False)
    return monkeypatch
