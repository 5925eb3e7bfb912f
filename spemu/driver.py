from __future__ import annotations
import os
from contextlib import contextmanager

from google.cloud import spanner

from spemu.config import Config
from spemu.executor import DEFAULT_TIMEOUT, Executor

EMULATOR_ENV = "SPANNER_EMULATOR_HOST"


@contextmanager
def client(cfg: Config):
    """
    Context‑manager that yields a Spanner client pointed at the emulator.

    The client library switches to anonymous credentials and an insecure
    channel whenever ``SPANNER_EMULATOR_HOST`` is set, so the variable is
    exported before the client is built.
    """
    if cfg.emulator_host:
        os.environ[EMULATOR_ENV] = cfg.emulator_host

    spanner_client = spanner.Client(project=cfg.project_id)
    try:
        yield spanner_client
    finally:
        spanner_client.close()


@contextmanager
def open_executor(cfg: Config, timeout: float = DEFAULT_TIMEOUT):
    """Yield an :class:`Executor` bound to ``cfg.database_path()``."""
    with client(cfg) as spanner_client:
        database = spanner_client.instance(cfg.instance_id).database(cfg.database_id)
        yield Executor(database, timeout=timeout)
