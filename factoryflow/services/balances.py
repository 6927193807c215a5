"""
Date-based stock reconciliation.

Balances are never stored. Each report replays the full event log against the
static opening baselines from ``factoryflow.master_data``:

    opening(D) = master opening + inflow before D - outflow before D
    closing(D) = opening(D) + inflow on D - outflow on D

Events dated before an item's baseline are skipped (they are already part of
the master opening). Dates are ISO ``YYYY-MM-DD`` strings and compare
lexically.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional

from factoryflow.master_data import FINISHED_GOODS, PACKING_MATERIALS, RAW_MATERIALS, MasterItem
from factoryflow.models import DISPATCH, ProductionRecord, SalesOrder, StockTransaction
from factoryflow.services.materials import materials_consumed
from factoryflow.utils import stock_key


@dataclass(frozen=True)
class Movement:
    key: str
    date: str
    inflow: float = 0.0
    outflow: float = 0.0
    source: str = ""


@dataclass(frozen=True)
class BalanceRow:
    key: str
    name: str
    size: str
    unit: str
    opening: float
    inflow: float
    outflow: float
    closing: float
    master_opening: float
    item_no: str = ""
    remark: str = ""
    low_stock_threshold: Optional[float] = None

    @property
    def is_low(self) -> bool:
        if self.low_stock_threshold:
            return self.closing <= self.low_stock_threshold
        return self.closing <= 0


def project(items: Iterable[MasterItem], movements: Iterable[Movement], as_of: str) -> list[BalanceRow]:
    by_key: dict[str, list[Movement]] = defaultdict(list)
    for m in movements:
        by_key[m.key].append(m)

    rows: list[BalanceRow] = []
    for item in items:
        opening = float(item.opening)
        inflow = 0.0
        outflow = 0.0

        for m in by_key.get(item.key, ()):
            if m.date < item.baseline:
                continue
            if m.date < as_of:
                opening += m.inflow - m.outflow
            elif m.date == as_of:
                inflow += m.inflow
                outflow += m.outflow

        rows.append(
            BalanceRow(
                key=item.key,
                name=item.name,
                size=item.size,
                unit=item.unit,
                opening=opening,
                inflow=inflow,
                outflow=outflow,
                closing=opening + inflow - outflow,
                master_opening=float(item.opening),
                item_no=item.item_no,
                remark=item.remark,
                low_stock_threshold=item.low_stock_threshold,
            )
        )
    return rows


# -------------------------
# Event adapters
# -------------------------

def record_movements(records: Iterable[ProductionRecord]) -> list[Movement]:
    out: list[Movement] = []
    for r in records:
        key = stock_key(r.product_name, r.size)
        if r.kind == DISPATCH:
            out.append(Movement(key, r.date, outflow=float(r.weight_kg), source=r.kind))
        else:
            # production and customer returns both add to FG
            out.append(Movement(key, r.date, inflow=float(r.weight_kg), source=r.kind))
    return out


def order_movements(orders: Iterable[SalesOrder]) -> list[Movement]:
    out: list[Movement] = []
    for o in orders:
        if not o.deducts_stock:
            continue
        for item in o.items:
            out.append(
                Movement(
                    stock_key(item.product_name, item.size),
                    o.order_date,
                    outflow=float(item.calculated_weight_kg),
                    source=f"order:{o.id}",
                )
            )
    return out


def finished_goods_movements(records: Iterable[ProductionRecord], orders: Iterable[SalesOrder]) -> list[Movement]:
    return record_movements(records) + order_movements(orders)


def transaction_movements(transactions: Iterable[StockTransaction]) -> list[Movement]:
    return [
        Movement(t.item_id, t.date, inflow=t.inflow, outflow=t.outflow, source=t.type)
        for t in transactions
    ]


def consumption_movements(records: Iterable[ProductionRecord], *, strict: bool = False) -> list[Movement]:
    out: list[Movement] = []
    for r in records:
        for item_id, qty in materials_consumed(r, strict=strict).items():
            out.append(Movement(item_id, r.date, outflow=qty, source="consumption"))
    return out


def packing_movements(
    records: Iterable[ProductionRecord],
    transactions: Iterable[StockTransaction],
    *,
    strict: bool = False,
) -> list[Movement]:
    return transaction_movements(transactions) + consumption_movements(records, strict=strict)


# -------------------------
# Reports
# -------------------------

def finished_goods_balances(
    records: Iterable[ProductionRecord],
    orders: Iterable[SalesOrder],
    as_of: str,
    items: Iterable[MasterItem] = FINISHED_GOODS,
) -> list[BalanceRow]:
    return project(items, finished_goods_movements(records, orders), as_of)


def packing_balances(
    records: Iterable[ProductionRecord],
    transactions: Iterable[StockTransaction],
    as_of: str,
    *,
    strict: bool = False,
    items: Iterable[MasterItem] = PACKING_MATERIALS,
) -> list[BalanceRow]:
    return project(items, packing_movements(records, transactions, strict=strict), as_of)


def raw_material_balances(
    transactions: Iterable[StockTransaction],
    as_of: str,
    items: Iterable[MasterItem] = RAW_MATERIALS,
) -> list[BalanceRow]:
    return project(items, transaction_movements(transactions), as_of)


def stock_snapshot(rows: Iterable[BalanceRow]) -> dict[str, float]:
    """Closing balance per key; the lookup used for order fulfillment."""
    return {r.key: r.closing for r in rows}

