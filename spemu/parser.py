"""
Turn a seed file into an ordered list of DML statements.

The scan is purely textual: ``--`` starts a comment wherever it appears and
every ``;`` ends a statement, quoted literals included.  Seed files that need
either character inside a string literal are not supported.
"""
from __future__ import annotations
import pathlib

from spemu.utils import preview

VALID_PREFIXES = ("INSERT", "UPDATE", "DELETE")


class ParseError(ValueError):
    """Raised when a seed file cannot be read or holds a non‑DML statement."""


def parse_dml_file(path: pathlib.Path | str) -> list[str]:
    try:
        content = pathlib.Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"failed to read file {path}: {exc}") from exc
    return parse_dml_content(content)


def parse_dml_content(content: str) -> list[str]:
    statements: list[str] = []
    for stmt in split_statements(remove_comments(content)):
        if not is_valid_dml_statement(stmt):
            raise ParseError(f"invalid DML statement: {stmt[:50]}")
        statements.append(stmt)
    return statements


def remove_comments(content: str) -> str:
    """Drop everything from the first ``--`` to end-of-line, keeping newlines."""
    return "\n".join(line.split("--", 1)[0] for line in content.split("\n"))


def split_statements(content: str) -> list[str]:
    stmts = (s.strip() for s in content.split(";"))
    return [s for s in stmts if s]


def is_valid_dml_statement(stmt: str) -> bool:
    return stmt.strip().upper().startswith(VALID_PREFIXES)


def describe(statements: list[str]) -> list[str]:
    """One ``Statement i: ...`` line per statement, as shown by ``--dry-run``."""
    return [
        f"Statement {i}: {preview(stmt, 50)}"
        for i, stmt in enumerate(statements, start=1)
    ]
