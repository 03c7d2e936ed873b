from __future__ import annotations

import importlib
from typing import Any

from querybench_probe.logging import get_logger

logger = get_logger("querybench.db")


class DatabaseConnectError(RuntimeError):
    pass


def _get_psycopg_module():
    return importlib.import_module("psycopg")


def connect(database_url: str, *, connect_timeout_seconds: float = 10.0) -> Any:
    """Open a single autocommit psycopg connection.

    The connection is a context manager; leaving the block closes it.
    """
    psycopg = _get_psycopg_module()
    try:
        conn = psycopg.connect(
            database_url,
            autocommit=True,
            connect_timeout=max(1, int(connect_timeout_seconds)),
        )
    except psycopg.Error as exc:
        raise DatabaseConnectError(str(exc)) from exc
    logger.info("database connection opened")
    return conn
