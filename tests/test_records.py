from __future__ import annotations

import pytest

from conftest import make_order, make_record
from factoryflow.models import PRODUCTION, Customer, StockTransaction
from factoryflow.services.orders import build_order_item, recompute_totals
from factoryflow.services.production import new_record
from factoryflow.services.records import (
    clear_records,
    delete_customer,
    delete_order,
    delete_orders,
    delete_record,
    delete_transaction,
    get_all_data,
    get_order,
    get_record,
    import_data,
    list_customers,
    list_orders,
    list_records,
    list_transactions,
    save_customer,
    save_order,
    save_record,
    save_transaction,
)


def _strip_ts(data):
    return {k: v for k, v in data.items() if k != "timestamp"}


def test_records_newest_first_and_upsert(conn):
    a = make_record("2025-12-01", batch="A")
    b = make_record("2025-12-02", batch="B")
    save_record(conn, a)
    save_record(conn, b)
    assert [r.batch_no for r in list_records(conn)] == ["B", "A"]

    a.weight_kg = 1.5
    save_record(conn, a)
    assert get_record(conn, a.id).weight_kg == 1.5
    assert len(list_records(conn)) == 2

    delete_record(conn, a.id)
    assert get_record(conn, a.id) is None


def test_order_round_trip_with_lines(conn):
    order = make_order("2025-12-03", [("SPARKWELD 6013", "3.2 x 350", 160), ("VACUUM 7018", "3.2 x 350", 40)])
    order.items[1].assigned_batch = "B9"
    save_order(conn, order)

    loaded = get_order(conn, order.id)
    assert loaded.to_dict() == order.to_dict()


def test_status_change_keeps_list_position(conn):
    first = make_order("2025-12-01", [("SPARKWELD 6013", "3.2 x 350", 16)])
    second = make_order("2025-12-02", [("SPARKWELD 6013", "3.2 x 350", 16)])
    save_order(conn, first)
    save_order(conn, second)

    first.status = "Delivered"
    save_order(conn, first)

    orders = list_orders(conn)
    assert [o.id for o in orders] == [second.id, first.id]
    assert orders[1].status == "Delivered"
    assert len(orders[1].items) == 1


def test_delete_order_removes_lines(conn):
    order = make_order("2025-12-01", [("SPARKWELD 6013", "3.2 x 350", 16)])
    save_order(conn, order)
    delete_order(conn, order.id)
    assert list_orders(conn) == []
    assert conn.execute("SELECT COUNT(*) FROM sales_order_items").fetchone()[0] == 0


def test_customer_update_merges(conn):
    save_customer(conn, Customer(id="c1", name="Gulf Steel", mobile="050", city="Dammam", order_history=["o1"]))
    save_customer(conn, Customer(id="c1", name="Gulf Steel Works", order_history=["o1", "o2"]))
    (c,) = list_customers(conn)
    assert c.name == "Gulf Steel Works"
    assert c.city == "Dammam"
    assert c.order_history == ["o1", "o2"]


def test_zero_quantity_transaction_is_rejected(conn):
    with pytest.raises(ValueError):
        save_transaction(conn, StockTransaction(id="t1", item_id="PD1001", date="2025-12-01", qty=0))


def test_transactions_newest_first(conn):
    for n in range(3):
        save_transaction(conn, StockTransaction(id=f"t{n}", item_id="PD1001", date="2025-12-01", qty=n + 1))
    assert [t.id for t in list_transactions(conn)] == ["t2", "t1", "t0"]


def test_export_import_round_trip(conn, other_conn):
    save_record(conn, make_record("2025-12-01", batch="A"))
    save_record(conn, make_record("2025-12-02", batch="B", is_return=True))
    save_order(conn, make_order("2025-12-02", [("SPARKWELD 6013", "3.2 x 350", 16)], status="Dispatched"))
    save_order(conn, make_order("2025-12-03", [("SPARKWELD 7018", "2.5 x 350", 20)]))
    save_customer(conn, Customer(id="c1", name="Red Sea Marine", order_history=["x"]))
    save_transaction(conn, StockTransaction(id="t1", item_id="PC1005", date="2025-12-01", qty=-4, type="ADJUSTMENT"))
    save_transaction(conn, StockTransaction(id="t2", item_id="RM1001", date="2025-12-01", qty=50, type="ISSUE"))

    exported = get_all_data(conn)
    counts = import_data(other_conn, exported)

    assert counts == {"records": 2, "orders": 2, "customers": 1, "transactions": 2}
    assert _strip_ts(get_all_data(other_conn)) == _strip_ts(exported)


def test_import_leaves_missing_collections_alone(conn):
    save_record(conn, make_record("2025-12-01"))
    counts = import_data(conn, {"orders": [make_order("2025-12-02", []).to_dict()]})
    assert counts == {"orders": 1}
    assert len(list_records(conn)) == 1


def test_import_rejects_unknown_status(conn):
    bad = make_order("2025-12-02", []).to_dict()
    bad["status"] = "Lost"
    with pytest.raises(ValueError):
        import_data(conn, {"orders": [bad]})


def test_bulk_and_single_deletes(conn):
    orders = [make_order("2025-12-0%d" % d, [("SPARKWELD 6013", "3.2 x 350", 16)]) for d in (1, 2, 3)]
    for o in orders:
        save_order(conn, o)
    delete_orders(conn, [orders[0].id, orders[2].id])
    assert [o.id for o in list_orders(conn)] == [orders[1].id]

    save_customer(conn, Customer(id="c1", name="Al Noor"))
    delete_customer(conn, "c1")
    assert list_customers(conn) == []

    save_transaction(conn, StockTransaction(id="t1", item_id="PD1001", date="2025-12-01", qty=5))
    delete_transaction(conn, "t1")
    assert list_transactions(conn) == []

    save_record(conn, make_record("2025-12-01"))
    clear_records(conn)
    assert list_records(conn) == []


def test_import_validates_whole_document_before_writing(conn):
    save_record(conn, make_record("2025-12-01", batch="KEEP"))
    save_transaction(conn, StockTransaction(id="t1", item_id="PC1005", date="2025-12-01", qty=10, type="INWARD"))
    document = {
        "records": [make_record("2025-12-03", batch="NEW").to_dict()],
        "transactions": [{"id": "t2", "itemId": "PC1005", "date": "2025-12-02", "qty": 0}],
    }

    with pytest.raises(ValueError):
        import_data(conn, document)

    assert [r.batch_no for r in list_records(conn)] == ["KEEP"]
    assert [t.id for t in list_transactions(conn)] == ["t1"]


def test_editing_an_entry_replaces_it_in_place(conn):
    older = make_record("2025-12-01", batch="A")
    newer = make_record("2025-12-02", batch="B")
    save_record(conn, older)
    save_record(conn, newer)

    edited = new_record(
        entry_type=PRODUCTION,
        date="2025-12-03",
        product_name="SPARKWELD 7018",
        batch_no="a2",
        size="2.5 x 350",
        weight_kg=200,
        carton_ctn=10,
        record_id=older.id,
        timestamp=older.timestamp,
    )
    save_record(conn, edited)

    assert [r.batch_no for r in list_records(conn)] == ["B", "A2"]
    loaded = get_record(conn, older.id)
    assert loaded.product_name == "SPARKWELD 7018"
    assert loaded.timestamp == older.timestamp


def test_editing_an_order_keeps_id_and_position(conn):
    first = make_order("2025-12-01", [("SPARKWELD 6013", "3.2 x 350", 16)])
    second = make_order("2025-12-02", [("SPARKWELD 6013", "3.2 x 350", 16)])
    save_order(conn, first)
    save_order(conn, second)

    draft = get_order(conn, first.id)
    draft.items.append(build_order_item("SPARKWELD 7018", "2.5 x 350", 5, 7.5))
    draft.po_number = "PO-9"
    recompute_totals(draft)
    save_order(conn, draft)

    assert [o.id for o in list_orders(conn)] == [second.id, first.id]
    loaded = get_order(conn, first.id)
    assert loaded.po_number == "PO-9"
    assert [i.product_name for i in loaded.items] == ["SPARKWELD 6013", "SPARKWELD 7018"]
    assert loaded.total_weight_kg == 116
