"""
Sales and production analytics for the dashboard: customer buying cycles,
product-family mix and dispatch trend over a trailing date window.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from factoryflow.catalog import find_product
from factoryflow.models import DISPATCH, PRODUCTION, Customer, ProductionRecord, SalesOrder

HEALTHY = "Healthy"
DRIFTING = "Drifting"
AT_RISK = "At Risk"
NEW = "New"

WINDOWS = {"7D": 7, "30D": 30, "3M": 90, "ALL": None}


def _days_between(a: str, b: str) -> int:
    return (date.fromisoformat(b) - date.fromisoformat(a)).days


def _round_half_up(v: float) -> int:
    return int(v + 0.5) if v >= 0 else -int(-v + 0.5)


@dataclass(frozen=True)
class CustomerInsight:
    customer_name: str
    city: str
    total_volume_kg: float
    order_count: int
    last_order_date: str
    avg_days_between_orders: int
    status: str
    next_expected_date: Optional[str]
    preferred_product: str


def customer_behaviour(
    orders: Iterable[SalesOrder],
    customers: Iterable[Customer],
    today: str,
) -> list[CustomerInsight]:
    """
    Buying pattern per known customer, largest volume first.

    Orders are matched to a customer by name, ignoring case. With two or more
    orders the average gap between first and last order predicts the next
    one; a customer silent for more than 1.2 gaps is drifting and for more
    than two gaps is at risk. Customers without orders are left out.
    """
    orders = list(orders)
    out: list[CustomerInsight] = []

    for customer in customers:
        name = customer.name.strip().lower()
        mine = sorted(
            (o for o in orders if o.customer_name.strip().lower() == name),
            key=lambda o: o.order_date,
        )
        if not mine:
            continue

        first, last = mine[0], mine[-1]
        volume = sum(float(o.total_weight_kg) for o in mine)

        by_product: dict[str, float] = {}
        for o in mine:
            for item in o.items:
                by_product[item.product_name] = by_product.get(item.product_name, 0.0) + float(item.calculated_weight_kg)
        preferred = max(by_product, key=by_product.get) if by_product else "N/A"

        avg_gap = 0
        next_date = None
        status = NEW
        if len(mine) > 1:
            avg_gap = _round_half_up(_days_between(first.order_date, last.order_date) / (len(mine) - 1))
            next_date = (date.fromisoformat(last.order_date) + timedelta(days=avg_gap)).isoformat()
            silent = _days_between(last.order_date, today)
            if silent > avg_gap * 2:
                status = AT_RISK
            elif silent > avg_gap * 1.2:
                status = DRIFTING
            else:
                status = HEALTHY

        out.append(
            CustomerInsight(
                customer_name=customer.name,
                city=customer.city,
                total_volume_kg=volume,
                order_count=len(mine),
                last_order_date=last.order_date,
                avg_days_between_orders=avg_gap,
                status=status,
                next_expected_date=next_date,
                preferred_product=preferred,
            )
        )

    return sorted(out, key=lambda c: c.total_volume_kg, reverse=True)


def in_window(records: Iterable[ProductionRecord], today: str, days: Optional[int]) -> list[ProductionRecord]:
    """Ledger lines dated on or after ``today - days``; every line when ``days`` is None."""
    if days is None:
        return list(records)
    cutoff = (date.fromisoformat(today) - timedelta(days=days)).isoformat()
    return [r for r in records if r.date >= cutoff]


def product_family(product_name: str) -> str:
    p = find_product(product_name)
    if p is not None:
        return p.family
    return (product_name.split() or ["Other"])[0]


def family_mix(records: Iterable[ProductionRecord]) -> dict[str, float]:
    """Produced kg per product family, largest first."""
    mix: dict[str, float] = {}
    for r in records:
        if r.kind != PRODUCTION:
            continue
        fam = product_family(r.product_name)
        mix[fam] = mix.get(fam, 0.0) + r.weight_kg
    return dict(sorted(mix.items(), key=lambda kv: kv[1], reverse=True))


def dispatch_series(records: Iterable[ProductionRecord]) -> list[dict]:
    days: dict[str, dict] = {}
    for r in records:
        if r.kind != DISPATCH:
            continue
        d = days.setdefault(r.date, {"date": r.date, "weightKg": 0.0, "entries": 0})
        d["weightKg"] += r.weight_kg
        d["entries"] += 1
    return sorted(days.values(), key=lambda d: d["date"])
