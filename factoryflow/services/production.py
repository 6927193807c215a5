from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from factoryflow.catalog import find_product, pallets
from factoryflow.master_data import FG_BASELINE
from factoryflow.models import DISPATCH, PRODUCTION, RETURN, ProductionRecord
from factoryflow.utils import now_ms, safe_div

ENTRY_TYPES = (PRODUCTION, RETURN, DISPATCH)


@dataclass(frozen=True)
class ProductionSummary:
    total_weight: float
    total_rejected: float
    total_cartons: int
    rejection_rate: float
    batches_processed: int

    @property
    def total_pallets(self) -> float:
        return pallets(self.total_weight)


def _production_only(records: Iterable[ProductionRecord]) -> list[ProductionRecord]:
    return [r for r in records if r.kind == PRODUCTION]


def production_summary(records: Iterable[ProductionRecord]) -> ProductionSummary:
    prod = _production_only(records)
    weight = sum(r.weight_kg for r in prod)
    rejected = sum(r.rejected_kg for r in prod)
    return ProductionSummary(
        total_weight=weight,
        total_rejected=rejected,
        total_cartons=int(sum(r.carton_ctn for r in prod)),
        rejection_rate=round(safe_div(rejected, weight + rejected) * 100.0, 2),
        batches_processed=len({r.batch_no for r in prod}),
    )


def daily_series(records: Iterable[ProductionRecord], last: int = 7) -> list[dict]:
    """Good and rejected kg per production day, the most recent ``last`` days."""
    days: dict[str, dict] = {}
    for r in _production_only(records):
        d = days.setdefault(r.date, {"date": r.date, "weightKg": 0.0, "rejectedKg": 0.0})
        d["weightKg"] += r.weight_kg
        d["rejectedKg"] += r.rejected_kg
    ordered = sorted(days.values(), key=lambda d: d["date"])
    return ordered[-last:] if last else ordered


@dataclass
class BatchSummary:
    batch_no: str
    product_name: str
    size: str
    total_weight: float = 0.0
    total_rejected: float = 0.0
    total_cartons: int = 0
    first_date: str = ""
    last_date: str = ""
    entry_count: int = 0


def batch_registry(records: Iterable[ProductionRecord], since: Optional[str] = FG_BASELINE) -> list[BatchSummary]:
    out: dict[str, BatchSummary] = {}
    for r in records:
        if since and r.date < since:
            continue
        batch_no = r.batch_no.strip().upper()
        s = out.get(batch_no)
        if s is None:
            s = out[batch_no] = BatchSummary(
                batch_no=batch_no,
                product_name=r.product_name,
                size=r.size,
                first_date=r.date,
                last_date=r.date,
            )
        s.total_weight += r.weight_kg
        s.total_rejected += r.rejected_kg
        s.total_cartons += int(r.carton_ctn)
        s.entry_count += 1
        s.first_date = min(s.first_date, r.date)
        s.last_date = max(s.last_date, r.date)
    return sorted(out.values(), key=lambda s: s.first_date)


def new_record(
    *,
    entry_type: str,
    date: str,
    product_name: str,
    batch_no: str,
    size: str,
    weight_kg: float,
    rejected_kg: float = 0.0,
    duples_pkt: int = 0,
    carton_ctn: int = 0,
    notes: str = "",
    record_id: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> ProductionRecord:
    """
    Validated ledger line from the entry form. Returns and dispatches carry
    no packet/carton counts.
    """
    if entry_type not in ENTRY_TYPES:
        raise ValueError(f"Unknown entry type: {entry_type}")
    if not date:
        raise ValueError("Date is required.")
    if not str(batch_no).strip():
        raise ValueError("Batch number is required.")
    if find_product(product_name) is None:
        raise ValueError(f"Unknown product: {product_name}")
    if not size:
        raise ValueError("Size is required.")
    if float(weight_kg) <= 0:
        raise ValueError("Weight (kg) must be > 0.")

    is_movement = entry_type != PRODUCTION
    if not is_movement and (int(duples_pkt) < 0 or int(carton_ctn) < 0 or float(rejected_kg) < 0):
        raise ValueError("Counts and rejected weight cannot be negative.")

    return ProductionRecord(
        id=record_id or str(uuid.uuid4()),
        date=str(date),
        product_name=product_name,
        batch_no=str(batch_no).strip().upper(),
        size=size,
        weight_kg=float(weight_kg),
        rejected_kg=float(rejected_kg or 0),
        duples_pkt=0 if is_movement else int(duples_pkt),
        carton_ctn=0 if is_movement else int(carton_ctn),
        notes=notes or "",
        timestamp=timestamp if timestamp is not None else now_ms(),
        is_return=entry_type == RETURN,
        is_dispatch=entry_type == DISPATCH,
    )
