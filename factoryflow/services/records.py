"""
Local store for ledger lines, sales orders, customers and stock transactions.

Writes commit immediately. Listing returns fresh model objects that callers
hand to the reconciliation services; those services never touch the
connection themselves.

The ``_write_*`` helpers run inside whatever transaction the caller holds and
never commit, so a whole-store import can replace every collection at once.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from typing import Iterable

from factoryflow.db import q, x
from factoryflow.models import Customer, ProductionRecord, SalesOrder, SalesOrderItem, StockTransaction
from factoryflow.utils import now_ms

logger = logging.getLogger(__name__)


# -------------------------
# Production ledger
# -------------------------

def _row_to_record(r: sqlite3.Row) -> ProductionRecord:
    return ProductionRecord(
        id=r["id"],
        date=r["date"],
        product_name=r["product_name"],
        batch_no=r["batch_no"],
        size=r["size"],
        weight_kg=float(r["weight_kg"]),
        rejected_kg=float(r["rejected_kg"]),
        duples_pkt=int(r["duples_pkt"]),
        carton_ctn=int(r["carton_ctn"]),
        notes=r["notes"] or "",
        timestamp=int(r["timestamp"]),
        is_return=bool(r["is_return"]),
        is_dispatch=bool(r["is_dispatch"]),
    )


def list_records(conn) -> list[ProductionRecord]:
    # Newest entry first, as the ledger is shown.
    rows = q(conn, "SELECT * FROM production_records ORDER BY timestamp DESC, rowid DESC")
    return [_row_to_record(r) for r in rows]


def get_record(conn, record_id: str):
    rows = q(conn, "SELECT * FROM production_records WHERE id=?", (record_id,))
    return _row_to_record(rows[0]) if rows else None


def _write_record(conn, record: ProductionRecord) -> None:
    conn.execute(
        """
        INSERT INTO production_records (
            id, date, product_name, batch_no, size,
            weight_kg, rejected_kg, duples_pkt, carton_ctn,
            notes, timestamp, is_return, is_dispatch
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            date=excluded.date,
            product_name=excluded.product_name,
            batch_no=excluded.batch_no,
            size=excluded.size,
            weight_kg=excluded.weight_kg,
            rejected_kg=excluded.rejected_kg,
            duples_pkt=excluded.duples_pkt,
            carton_ctn=excluded.carton_ctn,
            notes=excluded.notes,
            timestamp=excluded.timestamp,
            is_return=excluded.is_return,
            is_dispatch=excluded.is_dispatch
        """,
        (
            record.id,
            record.date,
            record.product_name,
            record.batch_no,
            record.size,
            float(record.weight_kg),
            float(record.rejected_kg),
            int(record.duples_pkt),
            int(record.carton_ctn),
            record.notes or None,
            int(record.timestamp),
            int(record.is_return),
            int(record.is_dispatch),
        ),
    )


def save_record(conn, record: ProductionRecord) -> str:
    """Insert a new ledger line or replace the one with the same id."""
    with conn:
        _write_record(conn, record)
    return record.id


def delete_record(conn, record_id: str) -> None:
    x(conn, "DELETE FROM production_records WHERE id=?", (record_id,))


def clear_records(conn) -> None:
    x(conn, "DELETE FROM production_records")


# -------------------------
# Sales orders
# -------------------------

def _items_for(conn, order_id: str) -> list[SalesOrderItem]:
    rows = q(conn, "SELECT * FROM sales_order_items WHERE order_id=? ORDER BY line_no", (order_id,))
    return [
        SalesOrderItem(
            product_id=r["product_id"] or "",
            product_name=r["product_name"],
            size=r["size"],
            quantity_ctn=float(r["quantity_ctn"]),
            calculated_weight_kg=float(r["calculated_weight_kg"]),
            price_per_kg=float(r["price_per_kg"]),
            item_value=float(r["item_value"]),
            assigned_batch=r["assigned_batch"] or None,
        )
        for r in rows
    ]


def _row_to_order(conn, r: sqlite3.Row) -> SalesOrder:
    return SalesOrder(
        id=r["id"],
        order_date=r["order_date"],
        sales_person=r["sales_person"] or "",
        customer_name=r["customer_name"] or "",
        mobile_number=r["mobile_number"] or "",
        email=r["email"] or "",
        city=r["city"] or "",
        map_link=r["map_link"] or "",
        po_number=r["po_number"] or "",
        po_file_name=r["po_file_name"],
        po_file_data=r["po_file_data"],
        items=_items_for(conn, r["id"]),
        total_weight_kg=float(r["total_weight_kg"]),
        sub_total=float(r["sub_total"]),
        vat_amount=float(r["vat_amount"]),
        grand_total=float(r["grand_total"]),
        status=r["status"],
    )


def list_orders(conn) -> list[SalesOrder]:
    rows = q(conn, "SELECT * FROM sales_orders ORDER BY created_seq DESC")
    return [_row_to_order(conn, r) for r in rows]


def get_order(conn, order_id: str):
    rows = q(conn, "SELECT * FROM sales_orders WHERE id=?", (order_id,))
    return _row_to_order(conn, rows[0]) if rows else None


def _write_order(conn, order: SalesOrder) -> None:
    seq_row = conn.execute("SELECT created_seq FROM sales_orders WHERE id=?", (order.id,)).fetchone()
    if seq_row is None:
        seq = int(conn.execute("SELECT COALESCE(MAX(created_seq), 0) + 1 FROM sales_orders").fetchone()[0])
    else:
        seq = int(seq_row[0])

    conn.execute(
        """
        INSERT OR REPLACE INTO sales_orders (
            id, order_date, sales_person, customer_name, mobile_number, email, city, map_link,
            po_number, po_file_name, po_file_data,
            total_weight_kg, sub_total, vat_amount, grand_total, status, created_seq
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            order.id,
            order.order_date,
            order.sales_person,
            order.customer_name,
            order.mobile_number,
            order.email,
            order.city,
            order.map_link,
            order.po_number,
            order.po_file_name,
            order.po_file_data,
            float(order.total_weight_kg),
            float(order.sub_total),
            float(order.vat_amount),
            float(order.grand_total),
            order.status,
            seq,
        ),
    )
    conn.execute("DELETE FROM sales_order_items WHERE order_id=?", (order.id,))
    for n, item in enumerate(order.items):
        conn.execute(
            """
            INSERT INTO sales_order_items (
                order_id, line_no, product_id, product_name, size,
                quantity_ctn, calculated_weight_kg, price_per_kg, item_value, assigned_batch
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                order.id,
                n,
                item.product_id,
                item.product_name,
                item.size,
                float(item.quantity_ctn),
                float(item.calculated_weight_kg),
                float(item.price_per_kg),
                float(item.item_value),
                item.assigned_batch,
            ),
        )


def save_order(conn, order: SalesOrder) -> str:
    """Upsert the header and replace all lines of the order."""
    with conn:
        _write_order(conn, order)
    return order.id


def delete_order(conn, order_id: str) -> None:
    x(conn, "DELETE FROM sales_orders WHERE id=?", (order_id,))


def delete_orders(conn, order_ids: Iterable[str]) -> None:
    with conn:
        conn.executemany("DELETE FROM sales_orders WHERE id=?", [(i,) for i in order_ids])


# -------------------------
# Customers
# -------------------------

def _row_to_customer(r: sqlite3.Row) -> Customer:
    return Customer(
        id=r["id"],
        name=r["name"],
        mobile=r["mobile"] or "",
        email=r["email"] or "",
        city=r["city"] or "",
        map_link=r["map_link"] or "",
        order_history=json.loads(r["order_history"] or "[]"),
    )


def list_customers(conn) -> list[Customer]:
    rows = q(conn, "SELECT * FROM customers ORDER BY rowid DESC")
    return [_row_to_customer(r) for r in rows]


def _write_customer(conn, customer: Customer) -> None:
    rows = q(conn, "SELECT * FROM customers WHERE id=?", (customer.id,))
    if rows:
        old = _row_to_customer(rows[0])
        history = list(old.order_history)
        history += [o for o in customer.order_history if o not in history]
        conn.execute(
            """
            UPDATE customers SET name=?, mobile=?, email=?, city=?, map_link=?, order_history=?
            WHERE id=?
            """,
            (
                customer.name or old.name,
                customer.mobile or old.mobile,
                customer.email or old.email,
                customer.city or old.city,
                customer.map_link or old.map_link,
                json.dumps(history),
                customer.id,
            ),
        )
    else:
        conn.execute(
            """
            INSERT INTO customers (id, name, mobile, email, city, map_link, order_history)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                customer.id,
                customer.name,
                customer.mobile,
                customer.email,
                customer.city,
                customer.map_link,
                json.dumps(list(customer.order_history)),
            ),
        )


def save_customer(conn, customer: Customer) -> str:
    """
    Insert or update by id. Blank fields on an update keep the stored value
    and order history is merged.
    """
    with conn:
        _write_customer(conn, customer)
    return customer.id


def delete_customer(conn, customer_id: str) -> None:
    x(conn, "DELETE FROM customers WHERE id=?", (customer_id,))


# -------------------------
# Stock transactions
# -------------------------

def list_transactions(conn) -> list[StockTransaction]:
    rows = q(conn, "SELECT * FROM stock_transactions ORDER BY created_seq DESC")
    return [
        StockTransaction(
            id=r["id"],
            item_id=r["item_id"],
            date=r["date"],
            qty=float(r["qty"]),
            type=r["type"],
            notes=r["notes"] or "",
        )
        for r in rows
    ]


def _next_txn_seq(conn) -> int:
    return int(q(conn, "SELECT COALESCE(MAX(created_seq), 0) + 1 AS n FROM stock_transactions")[0]["n"])


def _check_transaction(txn: StockTransaction) -> None:
    if float(txn.qty) == 0:
        raise ValueError("Quantity must not be zero.")


def _write_transaction(conn, txn: StockTransaction) -> None:
    conn.execute(
        """
        INSERT INTO stock_transactions (id, item_id, date, qty, type, notes, created_seq)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            item_id=excluded.item_id,
            date=excluded.date,
            qty=excluded.qty,
            type=excluded.type,
            notes=excluded.notes
        """,
        (txn.id, txn.item_id, txn.date, float(txn.qty), txn.type, txn.notes or None, _next_txn_seq(conn)),
    )


def save_transaction(conn, txn: StockTransaction) -> str:
    _check_transaction(txn)
    with conn:
        _write_transaction(conn, txn)
    return txn.id


def delete_transaction(conn, txn_id: str) -> None:
    x(conn, "DELETE FROM stock_transactions WHERE id=?", (txn_id,))


# -------------------------
# Whole-store document (sync)
# -------------------------

def get_all_data(conn) -> dict:
    return {
        "records": [r.to_dict() for r in list_records(conn)],
        "orders": [o.to_dict() for o in list_orders(conn)],
        "customers": [c.to_dict() for c in list_customers(conn)],
        "transactions": [t.to_dict() for t in list_transactions(conn)],
        "timestamp": now_ms(),
    }


def _parse_document(data: dict) -> dict[str, list]:
    parsed: dict[str, list] = {}

    if isinstance(data.get("records"), list):
        parsed["records"] = [ProductionRecord.from_dict(d) for d in data["records"]]
    if isinstance(data.get("orders"), list):
        parsed["orders"] = [SalesOrder.from_dict(d) for d in data["orders"]]
    if isinstance(data.get("customers"), list):
        parsed["customers"] = [Customer.from_dict(d) for d in data["customers"]]
    if isinstance(data.get("transactions"), list):
        txns = [StockTransaction.from_dict(d) for d in data["transactions"]]
        for t in txns:
            _check_transaction(t)
        parsed["transactions"] = txns

    return parsed


def import_data(conn, data: dict) -> dict[str, int]:
    """
    Replace each collection present in ``data`` with its contents. Missing
    or non-list collections leave the local copy untouched.

    The whole document is parsed before anything is written, and the writes
    share one transaction: a bad document raises and the store is unchanged.
    """
    if not data:
        return {}

    parsed = _parse_document(data)
    writers = {
        "records": ("production_records", _write_record),
        "orders": ("sales_orders", _write_order),
        "customers": ("customers", _write_customer),
        "transactions": ("stock_transactions", _write_transaction),
    }

    with conn:
        for name, items in parsed.items():
            table, write = writers[name]
            conn.execute(f"DELETE FROM {table}")
            # stored newest first; insert oldest first so list order round-trips
            for item in reversed(items):
                write(conn, item)

    counts = {name: len(items) for name, items in parsed.items()}
    logger.info("Imported %s", counts)
    return counts
