from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable

import streamlit as st

from factoryflow.schema import SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)

# Child tables first, so deleting in this order never trips a foreign key.
DATA_TABLES = (
    "sales_order_items",
    "sales_orders",
    "customers",
    "stock_transactions",
    "production_records",
)


def _connect(db_path: Path) -> sqlite3.Connection:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    logger.info("Opening store %s", db_path)
    return _connect(db_path)


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table});").fetchall()
    return column in {r["name"] for r in rows}


def schema_version(conn: sqlite3.Connection) -> int:
    return int(conn.execute("PRAGMA user_version;").fetchone()[0])


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)

    # Stores created before delivery prep have no batch column on order lines
    if not _column_exists(conn, "sales_order_items", "assigned_batch"):
        conn.execute("ALTER TABLE sales_order_items ADD COLUMN assigned_batch TEXT;")

    if not _column_exists(conn, "customers", "order_history"):
        conn.execute("ALTER TABLE customers ADD COLUMN order_history TEXT NOT NULL DEFAULT '[]';")

    if not _column_exists(conn, "stock_transactions", "created_seq"):
        conn.execute("ALTER TABLE stock_transactions ADD COLUMN created_seq INTEGER NOT NULL DEFAULT 0;")

    before = schema_version(conn)
    if before < SCHEMA_VERSION:
        conn.execute(f"PRAGMA user_version = {int(SCHEMA_VERSION)};")
        logger.info("Store schema upgraded from v%s to v%s", before, SCHEMA_VERSION)

    conn.commit()


def table_counts(conn: sqlite3.Connection) -> dict[str, int]:
    return {t: int(conn.execute(f"SELECT COUNT(*) FROM {t};").fetchone()[0]) for t in DATA_TABLES}


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    """Execute and commit one statement; returns the last row id (0 for TEXT keys)."""
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return int(last or 0)
