"""
`spemu-setup` implementation – provisions the emulator instance and creates
the database from a DDL schema file.

Both steps are idempotent: an existing instance or database is reported and
left untouched, so the command can run before every test session.
"""
from __future__ import annotations
import pathlib

import click
from google.api_core import exceptions

from spemu.config import Config
from spemu.driver import client
from spemu.utils import split_sql

EMULATOR_INSTANCE_CONFIG = "emulator-config"
INSTANCE_DISPLAY_NAME = "Test Instance"
OPERATION_TIMEOUT = 60


class SchemaError(RuntimeError):
    """Raised when the schema file cannot be read or applied."""


def parse_ddl_statements(content: str) -> list[str]:
    lines = [
        line.strip()
        for line in content.splitlines()
        if line.strip() and not line.strip().startswith("--")
    ]
    return split_sql("\n".join(lines))


def read_schema(schema_file: pathlib.Path | str) -> list[str]:
    try:
        content = pathlib.Path(schema_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaError(f"failed to read schema file {schema_file}: {exc}") from exc
    return parse_ddl_statements(content)


def ensure_instance(spanner_client, cfg: Config, *, verbose: bool = False):
    """Return the instance handle, creating the instance when missing."""
    instance = spanner_client.instance(
        cfg.instance_id,
        configuration_name=f"projects/{cfg.project_id}/instanceConfigs/{EMULATOR_INSTANCE_CONFIG}",
        display_name=INSTANCE_DISPLAY_NAME,
        node_count=1,
    )
    if instance.exists():
        click.echo(f"Instance already exists: {cfg.instance_id}")
        return instance

    if verbose:
        click.echo(f"Creating instance: {cfg.instance_path()}")
    try:
        instance.create().result(OPERATION_TIMEOUT)
    except exceptions.AlreadyExists:
        click.echo(f"Instance already exists: {cfg.instance_id}")
        return instance
    except exceptions.GoogleAPIError as exc:
        raise SchemaError(f"failed to create instance: {exc}") from exc

    click.echo(f"Instance created: {cfg.instance_id}")
    return instance


def ensure_database(
    instance,
    cfg: Config,
    schema_file: pathlib.Path | str,
    *,
    verbose: bool = False,
) -> bool:
    """
    Create the database with every DDL statement in *schema_file*.

    Returns ``True`` when the database was created, ``False`` when it already
    existed.  The schema file is only read when it is actually needed.
    """
    if instance.database(cfg.database_id).exists():
        click.echo(f"Database already exists: {cfg.database_id}")
        return False

    ddl = read_schema(schema_file)
    if verbose:
        click.echo(f"Creating database: {cfg.database_path()}")
        click.echo(f"Found {len(ddl)} DDL statements")

    database = instance.database(cfg.database_id, ddl_statements=ddl)
    try:
        database.create().result(OPERATION_TIMEOUT)
    except exceptions.AlreadyExists:
        click.echo(f"Database already exists: {cfg.database_id}")
        return False
    except exceptions.GoogleAPIError as exc:
        raise SchemaError(f"failed to create database: {exc}") from exc

    click.echo(f"Database created: {cfg.database_id}")
    return True


def initialize_schema(
    cfg: Config,
    schema_file: pathlib.Path | str,
    *,
    verbose: bool = False,
) -> None:
    with client(cfg) as spanner_client:
        instance = ensure_instance(spanner_client, cfg, verbose=verbose)
        ensure_database(instance, cfg, schema_file, verbose=verbose)
