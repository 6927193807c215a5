from __future__ import annotations

import random
import uuid
from datetime import date, timedelta

from factoryflow.catalog import PRODUCT_CATALOG
from factoryflow.db import DATA_TABLES, ensure_schema
from factoryflow.master_data import FG_BASELINE, PACKING_MATERIALS, RAW_MATERIALS
from factoryflow.models import ADJUSTMENT, INWARD, ISSUE, Customer, SalesOrder, StockTransaction
from factoryflow.services.orders import build_order_item, recompute_totals
from factoryflow.services.production import new_record
from factoryflow.services.records import save_customer, save_order, save_record, save_transaction

DEMO_CUSTOMERS = [
    ("Al Noor Fabrication", "0501111111", "Riyadh"),
    ("Gulf Steel Works", "0502222222", "Dammam"),
    ("Red Sea Marine", "0503333333", "Jeddah"),
]


def wipe_all(conn) -> None:
    # Keep schema, delete data
    for t in DATA_TABLES:
        conn.execute(f"DELETE FROM {t};")
    conn.commit()


def load_demo_data(conn, *, seed: int = 7, days: int = 10) -> None:
    random.seed(seed)
    ensure_schema(conn)

    start = date.fromisoformat(FG_BASELINE)
    products = [p for p in PRODUCT_CATALOG if p.family in {"6013", "7018", "Ni", "NiFe"}]
    stamp = 1_764_547_200_000  # 2025-12-01T00:00Z in ms

    # Production runs, one or two batches per day
    for i in range(days):
        run_date = (start + timedelta(days=i)).isoformat()
        for n in range(random.randint(1, 2)):
            p = random.choice(products)
            size = random.choice(p.sizes)
            ctn_w = p.get_ctn_weight(size)
            pkt_w = p.get_pkt_weight(size)
            cartons = random.randint(10, 60)
            weight = cartons * ctn_w
            stamp += 60_000
            save_record(
                conn,
                new_record(
                    entry_type="production",
                    date=run_date,
                    product_name=p.display_name,
                    batch_no=f"B{run_date.replace('-', '')[2:]}{n + 1}",
                    size=size,
                    weight_kg=weight,
                    rejected_kg=round(weight * random.uniform(0.005, 0.03), 1),
                    duples_pkt=int(weight / pkt_w),
                    carton_ctn=cartons,
                    notes="Demo production run",
                    timestamp=stamp,
                ),
            )

    # A return and a manual dispatch
    stamp += 60_000
    save_record(
        conn,
        new_record(
            entry_type="return",
            date=(start + timedelta(days=3)).isoformat(),
            product_name="SPARKWELD 6013",
            batch_no="RET001",
            size="3.2 x 350",
            weight_kg=48,
            notes="Customer return",
            timestamp=stamp,
        ),
    )
    stamp += 60_000
    save_record(
        conn,
        new_record(
            entry_type="dispatch",
            date=(start + timedelta(days=4)).isoformat(),
            product_name="SPARKWELD 7018",
            batch_no="DSP001",
            size="2.5 x 350",
            weight_kg=200,
            notes="Sample shipment",
            timestamp=stamp,
        ),
    )

    # Customers and orders across every status
    statuses = ["Pending", "Processing", "Dispatched", "Delivered", "Pending"]
    for i, status in enumerate(statuses):
        name, mobile, city = DEMO_CUSTOMERS[i % len(DEMO_CUSTOMERS)]
        order = SalesOrder(
            id=str(uuid.uuid4()),
            order_date=(start + timedelta(days=2 + i)).isoformat(),
            sales_person="Demo",
            customer_name=name,
            mobile_number=mobile,
            city=city,
            po_number=f"PO-{1000 + i}",
            status=status,
        )
        for _ in range(random.randint(1, 3)):
            p = random.choice(products)
            size = random.choice(p.sizes)
            order.items.append(build_order_item(p.display_name, size, random.randint(5, 80), round(random.uniform(6, 9), 2)))
        recompute_totals(order)
        save_order(conn, order)
        save_customer(
            conn,
            Customer(
                id=f"CUST-{mobile}",
                name=name,
                mobile=mobile,
                city=city,
                order_history=[order.id],
            ),
        )

    # Packing inwards and raw-material movements
    for m in random.sample(PACKING_MATERIALS, 4):
        save_transaction(
            conn,
            StockTransaction(
                id=str(uuid.uuid4()),
                item_id=m.key,
                date=(start + timedelta(days=random.randint(0, days - 1))).isoformat(),
                qty=float(random.choice([500, 1000, 2000])),
                type=INWARD,
                notes="Supplier delivery",
            ),
        )
    for m in random.sample(RAW_MATERIALS, 6):
        save_transaction(
            conn,
            StockTransaction(
                id=str(uuid.uuid4()),
                item_id=m.key,
                date=(start + timedelta(days=random.randint(0, days - 1))).isoformat(),
                qty=float(random.choice([25, 50, 100, 250])),
                type=random.choice([INWARD, ISSUE]),
                notes="Demo movement",
            ),
        )
    save_transaction(
        conn,
        StockTransaction(
            id=str(uuid.uuid4()),
            item_id="PC1005",
            date=(start + timedelta(days=5)).isoformat(),
            qty=-12.0,
            type=ADJUSTMENT,
            notes="Stocktake: damaged cartons",
        ),
    )
