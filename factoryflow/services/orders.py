from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from factoryflow.catalog import carton_weight, cartons_to_weight, find_product
from factoryflow.models import ORDER_STATUSES, SalesOrder, SalesOrderItem
from factoryflow.services.balances import BalanceRow
from factoryflow.utils import stock_key

DEFAULT_VAT_RATE = 0.15

READY = "Ready"
PARTIAL = "Partial"
OUT_OF_STOCK = "Out of Stock"

PENDING_STATUSES = frozenset({"Pending", "Processing"})


# -------------------------
# Order arithmetic
# -------------------------

def build_order_item(
    product_name: str,
    size: str,
    quantity_ctn: float,
    price_per_kg: float,
    *,
    weight_kg: Optional[float] = None,
) -> SalesOrderItem:
    """
    One order line. Weight comes from the catalog carton weight unless it is
    entered explicitly.
    """
    if float(quantity_ctn) <= 0:
        raise ValueError("Quantity (CTN) must be > 0.")
    if float(price_per_kg) < 0:
        raise ValueError("Price per kg cannot be negative.")

    if weight_kg is None:
        ctn_w = carton_weight(product_name, size)
        if ctn_w <= 0:
            raise ValueError(f"No carton weight known for {product_name} {size}; enter the weight.")
        weight_kg = cartons_to_weight(quantity_ctn, ctn_w)

    product = find_product(product_name)
    weight = float(weight_kg)
    return SalesOrderItem(
        product_id=f"{product.family}-{product.type}" if product else "",
        product_name=product_name,
        size=size,
        quantity_ctn=float(quantity_ctn),
        calculated_weight_kg=weight,
        price_per_kg=float(price_per_kg),
        item_value=round(weight * float(price_per_kg), 2),
    )


def recompute_totals(order: SalesOrder, vat_rate: float = DEFAULT_VAT_RATE) -> SalesOrder:
    """Re-derive weight and money totals from the lines (never trust stored totals)."""
    order.total_weight_kg = sum(float(i.calculated_weight_kg) for i in order.items)
    order.sub_total = round(sum(float(i.item_value) for i in order.items), 2)
    order.vat_amount = round(order.sub_total * float(vat_rate), 2)
    order.grand_total = round(order.sub_total + order.vat_amount, 2)
    return order


def update_item_quantity(
    order: SalesOrder,
    index: int,
    quantity_ctn: float,
    vat_rate: float = DEFAULT_VAT_RATE,
) -> SalesOrder:
    """
    Change the carton count of one line. A line whose weight was entered
    by hand keeps its own kg-per-carton ratio; the catalog carton weight is
    used only when the line has no usable ratio.
    """
    if float(quantity_ctn) <= 0:
        raise ValueError("Quantity (CTN) must be > 0.")

    item = order.items[index]
    if item.quantity_ctn > 0 and item.calculated_weight_kg > 0:
        ctn_w = item.calculated_weight_kg / item.quantity_ctn
    else:
        ctn_w = carton_weight(item.product_name, item.size)

    item.quantity_ctn = float(quantity_ctn)
    item.calculated_weight_kg = cartons_to_weight(quantity_ctn, ctn_w)
    item.item_value = round(item.calculated_weight_kg * item.price_per_kg, 2)
    item.assigned_batch = None
    return recompute_totals(order, vat_rate)


def remove_item(order: SalesOrder, index: int, vat_rate: float = DEFAULT_VAT_RATE) -> SalesOrder:
    del order.items[index]
    return recompute_totals(order, vat_rate)


def assign_batch(order: SalesOrder, index: int, batch_no: str) -> SalesOrder:
    order.items[index].assigned_batch = batch_no.strip().upper() or None
    return order


def set_status(order: SalesOrder, status: str) -> SalesOrder:
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status}")
    order.status = status
    return order


def attach_po_file(order: SalesOrder, file_name: str, raw: bytes, mime: str = "") -> SalesOrder:
    # Stored as a data URL so the sync document carries the file inline.
    encoded = base64.b64encode(raw).decode("ascii")
    order.po_file_name = file_name
    order.po_file_data = f"data:{mime or 'application/octet-stream'};base64,{encoded}"
    return order


def po_attachment(order: SalesOrder) -> Optional[tuple[str, str, bytes]]:
    """(file name, mime type, bytes) of the attached PO, or None."""
    data = order.po_file_data
    if not data:
        return None
    header, sep, payload = data.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("PO attachment is not a base64 data URL.")
    mime = header[len("data:"):-len(";base64")] or "application/octet-stream"
    return order.po_file_name or "po", mime, base64.b64decode(payload, validate=True)


def validate_order(order: SalesOrder) -> None:
    if not order.customer_name.strip():
        raise ValueError("Customer name is required.")
    if not order.order_date:
        raise ValueError("Order date is required.")
    if not order.items:
        raise ValueError("Add at least one item to the order.")


# -------------------------
# Fulfillment
# -------------------------

@dataclass(frozen=True)
class MissingItem:
    product_name: str
    size: str
    required: float
    available: float

    @property
    def shortfall(self) -> float:
        # Negative stock makes the shortfall exceed the requirement.
        return self.required - self.available


@dataclass(frozen=True)
class FulfillmentResult:
    status: str
    missing_items: list[MissingItem] = field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        return self.status == READY


def classify_order(order: SalesOrder, snapshot: Mapping[str, float]) -> FulfillmentResult:
    missing: list[MissingItem] = []
    satisfied = 0

    for item in order.items:
        available = float(snapshot.get(stock_key(item.product_name, item.size), 0.0))
        required = float(item.calculated_weight_kg)
        if available >= required:
            satisfied += 1
        else:
            missing.append(MissingItem(item.product_name, item.size, required, available))

    if not missing:
        status = READY
    elif satisfied:
        status = PARTIAL
    else:
        status = OUT_OF_STOCK
    return FulfillmentResult(status=status, missing_items=missing)


def pending_orders(orders: Iterable[SalesOrder]) -> list[SalesOrder]:
    """Pending/Processing orders, oldest order date first."""
    return sorted((o for o in orders if o.status in PENDING_STATUSES), key=lambda o: o.order_date)


@dataclass
class ProductionPriority:
    product_name: str
    size: str
    total_needed: float
    available: float
    first_order_date: str

    @property
    def shortfall(self) -> float:
        return max(0.0, self.total_needed - self.available)


def production_priorities(orders: Iterable[SalesOrder], snapshot: Mapping[str, float]) -> list[ProductionPriority]:
    """
    What to produce next: every product line short for some pending order,
    with the summed demand of the short lines, ranked by the earliest order
    waiting on it.
    """
    by_key: dict[str, ProductionPriority] = {}

    for order in pending_orders(orders):
        for item in order.items:
            key = stock_key(item.product_name, item.size)
            available = float(snapshot.get(key, 0.0))
            if available >= item.calculated_weight_kg:
                continue
            p = by_key.get(key)
            if p is None:
                p = by_key[key] = ProductionPriority(
                    product_name=item.product_name,
                    size=item.size,
                    total_needed=0.0,
                    available=available,
                    first_order_date=order.order_date,
                )
            p.total_needed += float(item.calculated_weight_kg)

    return sorted(by_key.values(), key=lambda p: p.first_order_date)


def material_alerts(rows: Iterable[BalanceRow], threshold: float = 500) -> list[BalanceRow]:
    return [r for r in rows if r.closing < threshold]
