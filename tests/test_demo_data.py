from __future__ import annotations

from factoryflow.services.balances import finished_goods_balances, packing_balances
from factoryflow.services.demo_data import load_demo_data, wipe_all
from factoryflow.services.dispatch import build_queues
from factoryflow.services.records import list_customers, list_orders, list_records, list_transactions


def test_demo_data_loads_and_reconciles(conn):
    load_demo_data(conn)

    records = list_records(conn)
    orders = list_orders(conn)
    transactions = list_transactions(conn)
    assert records and orders and transactions
    assert list_customers(conn)
    assert {o.status for o in orders} == {"Pending", "Processing", "Dispatched", "Delivered"}

    for o in orders:
        assert o.total_weight_kg == sum(i.calculated_weight_kg for i in o.items)

    # every demo product has a packing rule
    packing_balances(records, transactions, "2025-12-10", strict=True)
    finished_goods_balances(records, orders, "2025-12-10")
    assert build_queues(records)


def test_wipe_all(conn):
    load_demo_data(conn)
    wipe_all(conn)
    assert list_records(conn) == []
    assert list_orders(conn) == []
    assert list_customers(conn) == []
    assert list_transactions(conn) == []
