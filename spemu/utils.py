"""
Generic helpers that are reused across sub‑modules.
"""
from __future__ import annotations
import sqlparse


def split_sql(sql: str) -> list[str]:
    """
    Split a string containing one or many SQL statements into individual
    statements, without the trailing ``;``.
    """
    stmts = (s.strip().rstrip(";").rstrip() for s in sqlparse.split(sql))
    return [s for s in stmts if s]


def preview(stmt: str, limit: int) -> str:
    """First *limit* characters of *stmt* followed by an ellipsis."""
    return stmt[:limit] + "..."
