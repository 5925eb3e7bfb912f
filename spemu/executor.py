from __future__ import annotations
import typing as t

import click
from google.api_core import exceptions

from spemu.utils import preview

DEFAULT_TIMEOUT = 30.0


class ExecutionError(RuntimeError):
    """Raised when the seed transaction cannot be committed."""

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        statement: str | None = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.statement = statement


class Executor:
    """
    Replays DML statements inside **one** read‑write transaction.

    Atomicity and retry on ``Aborted`` are handled by the Spanner client's
    ``run_in_transaction``; a failing statement rolls back every statement
    before it.
    """

    def __init__(self, database, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.database = database
        self.timeout: float = timeout

    def execute_statements(self, statements: t.Sequence[str], verbose: bool = False) -> int:
        if not statements:
            return 0

        total = len(statements)

        def _unit_of_work(transaction) -> int:
            rows = 0
            for i, stmt in enumerate(statements, start=1):
                if verbose:
                    click.echo(f"Executing statement {i}/{total}: {preview(stmt, 100)}")
                try:
                    rows += transaction.execute_update(stmt)
                except exceptions.Aborted:
                    # the client retries the whole unit of work
                    raise
                except exceptions.GoogleAPICallError as exc:
                    raise ExecutionError(
                        f"failed to execute statement {i}: {exc}\nStatement: {stmt}",
                        index=i,
                        statement=stmt,
                    ) from exc
            return rows

        try:
            return self.database.run_in_transaction(
                _unit_of_work, timeout_secs=self.timeout
            )
        except ExecutionError as exc:
            raise ExecutionError(
                f"transaction failed: {exc}", index=exc.index, statement=exc.statement
            ) from exc
        except exceptions.GoogleAPIError as exc:
            raise ExecutionError(f"transaction failed: {exc}") from exc
