from __future__ import annotations

import pytest

from conftest import make_order
from factoryflow.master_data import RAW_MATERIALS
from factoryflow.services.balances import raw_material_balances
from factoryflow.services.orders import (
    OUT_OF_STOCK,
    PARTIAL,
    READY,
    assign_batch,
    attach_po_file,
    build_order_item,
    classify_order,
    material_alerts,
    pending_orders,
    po_attachment,
    production_priorities,
    recompute_totals,
    remove_item,
    set_status,
    update_item_quantity,
    validate_order,
)
from factoryflow.models import SalesOrder
from factoryflow.utils import stock_key

A = ("SPARKWELD 6013", "3.2 x 350")
B = ("SPARKWELD 7018", "2.5 x 350")


class TestClassifyOrder:
    def test_partial_with_one_missing_line(self):
        snapshot = {stock_key(*A): 500.0, stock_key(*B): 100.0}
        order = make_order("2025-12-05", [(*A, 200), (*B, 400)])
        result = classify_order(order, snapshot)
        assert result.status == PARTIAL
        (missing,) = result.missing_items
        assert missing.product_name == "SPARKWELD 7018"
        assert missing.required == 400
        assert missing.available == 100
        assert missing.shortfall == 300

    def test_ready(self):
        snapshot = {stock_key(*A): 500.0}
        result = classify_order(make_order("2025-12-05", [(*A, 500)]), snapshot)
        assert result.status == READY
        assert result.is_ready
        assert result.missing_items == []

    def test_out_of_stock(self):
        result = classify_order(make_order("2025-12-05", [(*A, 10), (*B, 10)]), {})
        assert result.status == OUT_OF_STOCK
        assert len(result.missing_items) == 2

    def test_lookup_ignores_spelling(self):
        snapshot = {stock_key("SPARKWELD 6013", "3.2 X 350"): 50.0}
        assert classify_order(make_order("2025-12-05", [("sparkweld 6013", "3.2x350", 50)]), snapshot).is_ready

    def test_negative_stock_shortfall_exceeds_requirement(self):
        snapshot = {stock_key(*A): -50.0}
        (missing,) = classify_order(make_order("2025-12-05", [(*A, 100)]), snapshot).missing_items
        assert missing.shortfall == 150

    def test_empty_order_is_ready(self):
        assert classify_order(make_order("2025-12-05", []), {}).status == READY


class TestOrderArithmetic:
    def test_build_item_from_carton_weight(self):
        item = build_order_item("SPARKWELD 7018", "2.5 x 350", 5, 7.5)
        assert item.calculated_weight_kg == 100
        assert item.item_value == 750
        assert item.product_id == "7018-Normal"

    def test_build_item_with_explicit_weight(self):
        item = build_order_item("CUSTOM ROD", "3.2 x 350", 2, 10, weight_kg=30)
        assert item.calculated_weight_kg == 30
        assert item.item_value == 300
        assert item.product_id == ""

    @pytest.mark.parametrize("qty,price", [(0, 5), (-1, 5), (1, -1)])
    def test_build_item_rejects_bad_input(self, qty, price):
        with pytest.raises(ValueError):
            build_order_item("SPARKWELD 7018", "2.5 x 350", qty, price)

    def test_unknown_product_needs_weight(self):
        with pytest.raises(ValueError, match="enter the weight"):
            build_order_item("CUSTOM ROD", "3.2 x 350", 2, 10)

    def test_totals(self):
        order = SalesOrder(id="o1", order_date="2025-12-05")
        order.items = [
            build_order_item("SPARKWELD 7018", "2.5 x 350", 5, 7.5),
            build_order_item("SPARKWELD 6013", "3.2 x 350", 2, 6.0),
        ]
        recompute_totals(order)
        assert order.total_weight_kg == 132
        assert order.sub_total == 942
        assert order.vat_amount == pytest.approx(141.3)
        assert order.grand_total == pytest.approx(1083.3)

    def test_update_quantity_recomputes_and_clears_batch(self):
        order = SalesOrder(id="o1", order_date="2025-12-05", items=[build_order_item("SPARKWELD 7018", "2.5 x 350", 5, 7.5)])
        recompute_totals(order)
        assign_batch(order, 0, " b12 ")
        assert order.items[0].assigned_batch == "B12"

        update_item_quantity(order, 0, 10)
        assert order.items[0].calculated_weight_kg == 200
        assert order.items[0].item_value == 1500
        assert order.items[0].assigned_batch is None
        assert order.total_weight_kg == 200
        assert order.grand_total == pytest.approx(1725)

    def test_update_quantity_off_catalog_keeps_ratio(self):
        order = SalesOrder(id="o1", order_date="2025-12-05", items=[build_order_item("CUSTOM ROD", "x", 2, 10, weight_kg=30)])
        update_item_quantity(order, 0, 4)
        assert order.items[0].calculated_weight_kg == 60

    def test_update_quantity_keeps_entered_weight_on_catalog_product(self):
        # catalog carton weight is 20 kg; the line was entered at 25 kg/CTN
        order = SalesOrder(id="o1", order_date="2025-12-05", items=[build_order_item(*B, 4, 7.0, weight_kg=100)])
        update_item_quantity(order, 0, 6)
        assert order.items[0].calculated_weight_kg == 150
        assert order.items[0].item_value == 1050

    @pytest.mark.parametrize("qty", [0, -1])
    def test_update_quantity_must_be_positive(self, qty):
        order = SalesOrder(id="o1", order_date="2025-12-05", items=[build_order_item(*A, 1, 1)])
        with pytest.raises(ValueError):
            update_item_quantity(order, 0, qty)
        assert order.items[0].quantity_ctn == 1

    def test_remove_item(self):
        order = SalesOrder(
            id="o1",
            order_date="2025-12-05",
            items=[build_order_item(*A, 1, 1), build_order_item(*B, 1, 1)],
        )
        remove_item(order, 0)
        assert [i.product_name for i in order.items] == ["SPARKWELD 7018"]
        assert order.total_weight_kg == 20

    def test_set_status(self):
        order = make_order("2025-12-05", [(*A, 10)])
        assert set_status(order, "Dispatched").deducts_stock
        with pytest.raises(ValueError):
            set_status(order, "Shipped")

    def test_validate_order(self):
        with pytest.raises(ValueError, match="Customer"):
            validate_order(SalesOrder(id="o1", order_date="2025-12-05", items=[build_order_item(*A, 1, 1)]))
        order = make_order("2025-12-05", [])
        with pytest.raises(ValueError, match="item"):
            validate_order(order)


class TestPlanning:
    def test_pending_orders_oldest_first(self):
        orders = [
            make_order("2025-12-07", [(*A, 10)]),
            make_order("2025-12-03", [(*A, 10)], status="Processing"),
            make_order("2025-12-01", [(*A, 10)], status="Delivered"),
        ]
        assert [o.order_date for o in pending_orders(orders)] == ["2025-12-03", "2025-12-07"]

    def test_priorities_sum_short_lines(self):
        snapshot = {stock_key(*A): 100.0, stock_key(*B): 1000.0}
        orders = [
            make_order("2025-12-07", [(*A, 150)]),
            make_order("2025-12-03", [(*A, 120), (*B, 50)]),
            make_order("2025-12-01", [(*A, 999)], status="Dispatched"),
        ]
        (p,) = production_priorities(orders, snapshot)
        assert p.product_name == "SPARKWELD 6013"
        assert p.total_needed == 270
        assert p.available == 100
        assert p.shortfall == 170
        assert p.first_order_date == "2025-12-03"

    def test_material_alerts(self):
        rows = raw_material_balances([], "2025-12-01")
        low = {r.key for r in material_alerts(rows)}
        expected = {m.key for m in RAW_MATERIALS if m.opening < 500}
        assert low == expected
        assert "RM1026" in low and "RM1001" not in low


class TestPoAttachment:
    def test_attached_file_reads_back(self):
        order = make_order("2025-12-05", [(*A, 10)])
        attach_po_file(order, "po-1001.pdf", b"%PDF-1.4 test", "application/pdf")

        assert order.po_file_name == "po-1001.pdf"
        assert order.po_file_data.startswith("data:application/pdf;base64,")
        assert po_attachment(order) == ("po-1001.pdf", "application/pdf", b"%PDF-1.4 test")
        assert SalesOrder.from_dict(order.to_dict()).po_file_data == order.po_file_data

    def test_no_attachment(self):
        assert po_attachment(make_order("2025-12-05", [(*A, 10)])) is None

    def test_unknown_mime_defaults(self):
        order = attach_po_file(make_order("2025-12-05", [(*A, 10)]), "scan", b"\x00\x01")
        assert po_attachment(order)[1] == "application/octet-stream"

    def test_rejects_non_data_url(self):
        order = make_order("2025-12-05", [(*A, 10)])
        order.po_file_data = "https://example.invalid/po.pdf"
        with pytest.raises(ValueError):
            po_attachment(order)
