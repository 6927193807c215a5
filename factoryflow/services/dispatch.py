from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from factoryflow.catalog import pallets
from factoryflow.models import PRODUCTION, ProductionRecord
from factoryflow.utils import normalize


@dataclass
class BatchStock:
    batch_no: str
    date: str
    cartons: float = 0.0
    weight: float = 0.0

    @property
    def pallets(self) -> float:
        return pallets(self.weight)


@dataclass
class ProductQueue:
    product_key: str
    product_name: str
    size: str
    total_cartons: float = 0.0
    total_weight: float = 0.0
    batches: list[BatchStock] = field(default_factory=list)

    @property
    def priority(self) -> Optional[BatchStock]:
        """The batch to dispatch first."""
        return self.batches[0] if self.batches else None

    @property
    def waiting(self) -> list[BatchStock]:
        return self.batches[1:]

    @property
    def pallets(self) -> float:
        return pallets(self.total_weight)


def build_queues(records: Iterable[ProductionRecord], *, production_only: bool = False) -> list[ProductQueue]:
    """
    FIFO dispatch queues, one per (product, size), oldest batch first.

    Ledger lines for the same batch accumulate; the batch keeps its earliest
    date. Return and dispatch lines are grouped like production lines unless
    ``production_only`` is set. Groups with no carton stock are dropped.
    """
    grouped: dict[str, ProductQueue] = {}
    # batch lookup per group, keeps first-seen order for the stable sort
    index: dict[str, dict[str, BatchStock]] = {}

    for r in records:
        if production_only and r.kind != PRODUCTION:
            continue

        key = f"{r.product_name}|{r.size}"
        group = grouped.get(key)
        if group is None:
            group = grouped[key] = ProductQueue(product_key=key, product_name=r.product_name, size=r.size)
            index[key] = {}

        batch = index[key].get(r.batch_no)
        if batch is None:
            batch = BatchStock(batch_no=r.batch_no, date=r.date)
            index[key][r.batch_no] = batch
            group.batches.append(batch)
        elif r.date < batch.date:
            batch.date = r.date

        batch.cartons += r.carton_ctn
        batch.weight += r.weight_kg
        group.total_cartons += r.carton_ctn
        group.total_weight += r.weight_kg

    out: list[ProductQueue] = []
    for group in grouped.values():
        group.batches.sort(key=lambda b: b.date)
        if group.total_cartons > 0:
            out.append(group)
    return out


def search_queues(queues: Iterable[ProductQueue], term: str) -> list[ProductQueue]:
    t = (term or "").strip().lower()
    if not t:
        return list(queues)
    return [q for q in queues if t in q.product_name.lower() or t in q.size.lower()]


def fifo_batches(records: Iterable[ProductionRecord], product_name: str, size: str) -> list[BatchStock]:
    """
    Batch hints for one order line on delivery prep, oldest first.
    Matching ignores case and whitespace.
    """
    want_product = normalize(product_name)
    want_size = normalize(size)

    batches: dict[str, BatchStock] = {}
    for r in records:
        if normalize(r.product_name) != want_product or normalize(r.size) != want_size:
            continue
        b = batches.get(r.batch_no)
        if b is None:
            b = batches[r.batch_no] = BatchStock(batch_no=r.batch_no, date=r.date)
        elif r.date < b.date:
            b.date = r.date
        b.cartons += r.carton_ctn
        b.weight += r.weight_kg

    return sorted(batches.values(), key=lambda b: b.date)
