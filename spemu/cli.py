#!/usr/bin/env python3
"""
spemu – Spanner emulator DML inserter.

• `spemu`        replays a seed file of INSERT / UPDATE / DELETE statements
                 inside a single read‑write transaction
• `spemu-setup`  creates the emulator instance and database from a DDL file

Target IDs come from the command line, from a YAML config file
(`-c spemu.config.yml -e local`), or from both; flags win.
"""
from __future__ import annotations

import pathlib
import sys
import typing as t

import click
from google.api_core import exceptions

from spemu import __version__
from spemu.config import Config, ConfigError, load
from spemu.driver import open_executor
from spemu.executor import ExecutionError
from spemu.parser import ParseError, describe, parse_dml_file
from spemu.schema import SchemaError, initialize_schema

_EXAMPLES = """\b
Examples:
  spemu -p test-project -i test-instance -d test-database ./seed.sql
  spemu --project=my-proj --instance=my-inst --database=my-db --dry-run ./test.sql
  spemu -p test -i test -d test --port=9020 ./users.sql
  spemu -c spemu.config.yml -e local ./seed.sql
"""

_REQUIRED = (
    ("project_id", "--project (or -p)"),
    ("instance_id", "--instance (or -i)"),
    ("database_id", "--database (or -d)"),
)


def _fail(message: str) -> t.NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


def _build_config(
    config_path: str | None,
    env: str | None,
    project: str | None,
    instance: str | None,
    database: str | None,
    port: int | None,
) -> Config:
    base = Config()
    if config_path or env:
        try:
            base = load(config_path, env)
        except ConfigError as exc:
            _fail(f"Config error: {exc}")

    cfg = base.merged(
        project_id=project, instance_id=instance, database_id=database, port=port
    )
    for attr, flag in _REQUIRED:
        if not getattr(cfg, attr):
            _fail(f"Error: {flag} is required")
    return cfg


def _target_opts(fn):
    opts = [
        click.option("-p", "--project", help="Spanner project ID (required)"),
        click.option("-i", "--instance", help="Spanner instance ID (required)"),
        click.option("-d", "--database", help="Spanner database ID (required)"),
        click.option(
            "-P", "--port", type=int, default=None,
            help="Spanner emulator port (default: 9010)",
        ),
        click.option(
            "-c", "--config", "config_path",
            type=click.Path(dir_okay=False), help="YAML config file",
        ),
        click.option("-e", "--env", help="environment inside the config file"),
        click.option("--verbose", is_flag=True, help="Enable verbose output"),
        click.version_option(
            __version__, "--version",
            prog_name="spemu", message="%(prog)s version %(version)s",
            help="Show version information",
        ),
    ]
    for opt in reversed(opts):
        fn = opt(fn)
    return fn


@click.command(epilog=_EXAMPLES)
@_target_opts
@click.option("--dry-run", is_flag=True, help="Parse and validate DML without executing")
@click.argument("dml_file", type=click.Path(dir_okay=False))
def main(project, instance, database, port, config_path, env, verbose, dry_run, dml_file):
    """Replay DML_FILE against the Spanner emulator in one transaction."""
    cfg = _build_config(config_path, env, project, instance, database, port)

    if verbose:
        click.echo(f"Configuration: {cfg!r}")
        click.echo(f"DML file: {dml_file}")

    try:
        statements = parse_dml_file(pathlib.Path(dml_file))
    except ParseError as exc:
        _fail(f"Failed to parse DML file: {exc}")

    if verbose:
        click.echo(f"Parsed {len(statements)} DML statements")

    if dry_run:
        click.echo(f"Dry run: {len(statements)} statements would be executed")
        for line in describe(statements):
            click.echo(line)
        return

    try:
        with open_executor(cfg) as executor:
            executor.execute_statements(statements, verbose=verbose)
    except (ExecutionError, exceptions.GoogleAPIError) as exc:
        _fail(f"Failed to execute statements: {exc}")

    click.echo(f"Successfully executed {len(statements)} statements")


@click.command()
@_target_opts
@click.argument("schema_file", type=click.Path(dir_okay=False))
def setup(project, instance, database, port, config_path, env, verbose, schema_file):
    """Create the emulator instance and database described by SCHEMA_FILE."""
    cfg = _build_config(config_path, env, project, instance, database, port)

    if verbose:
        click.echo(f"Configuration: {cfg!r}")

    try:
        initialize_schema(cfg, pathlib.Path(schema_file), verbose=verbose)
    except (SchemaError, exceptions.GoogleAPIError) as exc:
        _fail(f"Failed to set up database: {exc}")

    click.echo("Database setup complete!")


if __name__ == "__main__":
    main()
