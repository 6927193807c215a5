"""Shared fixtures: a throwaway SQLite store and small builders for ledger data."""
from __future__ import annotations

import itertools

import pytest

from factoryflow.db import _connect, ensure_schema
from factoryflow.models import ProductionRecord, SalesOrder, SalesOrderItem

_ids = itertools.count(1)


@pytest.fixture
def conn(tmp_path):
    c = _connect(tmp_path / "test.db")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def other_conn(tmp_path):
    c = _connect(tmp_path / "other.db")
    ensure_schema(c)
    yield c
    c.close()


def make_record(
    date: str,
    *,
    product: str = "SPARKWELD 6013",
    size: str = "3.2 x 350",
    batch: str = "B1",
    weight: float = 160.0,
    rejected: float = 0.0,
    pkt: int = 40,
    ctn: int = 10,
    is_return: bool = False,
    is_dispatch: bool = False,
) -> ProductionRecord:
    n = next(_ids)
    return ProductionRecord(
        id=f"rec-{n}",
        date=date,
        product_name=product,
        batch_no=batch,
        size=size,
        weight_kg=weight,
        rejected_kg=rejected,
        duples_pkt=pkt,
        carton_ctn=ctn,
        timestamp=1_764_547_200_000 + n,
        is_return=is_return,
        is_dispatch=is_dispatch,
    )


def make_order(
    date: str,
    lines: list[tuple[str, str, float]],
    *,
    status: str = "Pending",
    order_id: str | None = None,
) -> SalesOrder:
    """Order whose lines are (product, size, weight_kg) triples."""
    items = [
        SalesOrderItem(product_name=p, size=s, quantity_ctn=w / 20, calculated_weight_kg=w, price_per_kg=7.0, item_value=w * 7.0)
        for p, s, w in lines
    ]
    return SalesOrder(
        id=order_id or f"ord-{next(_ids)}",
        order_date=date,
        items=items,
        status=status,
        customer_name="Test Customer",
        total_weight_kg=sum(w for _, _, w in lines),
    )
