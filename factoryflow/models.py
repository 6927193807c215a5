"""
Plain data records shared by the repository, the sync transport and the
reconciliation services.

Field names follow Python conventions; ``to_dict``/``from_dict`` speak the
camelCase document shape used by the remote sync blob.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

PRODUCTION = "production"
RETURN = "return"
DISPATCH = "dispatch"

ORDER_STATUSES = ("Pending", "Processing", "Dispatched", "Delivered")
# Only these statuses take goods out of finished-goods stock.
STOCK_DEDUCTING_STATUSES = frozenset({"Dispatched", "Delivered"})

INWARD = "INWARD"
ISSUE = "ISSUE"
ADJUSTMENT = "ADJUSTMENT"
TRANSACTION_TYPES = (INWARD, ISSUE, ADJUSTMENT)


def _num(v: Any, default: float = 0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


@dataclass
class ProductionRecord:
    id: str
    date: str
    product_name: str
    batch_no: str
    size: str
    weight_kg: float
    rejected_kg: float = 0.0
    duples_pkt: int = 0
    carton_ctn: int = 0
    notes: str = ""
    timestamp: int = 0
    is_return: bool = False
    is_dispatch: bool = False

    def __post_init__(self) -> None:
        if self.is_return and self.is_dispatch:
            raise ValueError("A ledger line cannot be both a return and a dispatch.")

    @property
    def kind(self) -> str:
        if self.is_return:
            return RETURN
        if self.is_dispatch:
            return DISPATCH
        return PRODUCTION

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "productName": self.product_name,
            "batchNo": self.batch_no,
            "size": self.size,
            "weightKg": self.weight_kg,
            "rejectedKg": self.rejected_kg,
            "duplesPkt": self.duples_pkt,
            "cartonCtn": self.carton_ctn,
            "notes": self.notes,
            "timestamp": self.timestamp,
            "isReturn": self.is_return,
            "isDispatch": self.is_dispatch,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ProductionRecord":
        return cls(
            id=str(d["id"]),
            date=str(d["date"]),
            product_name=str(d.get("productName", "")),
            batch_no=str(d.get("batchNo", "")),
            size=str(d.get("size", "")),
            weight_kg=_num(d.get("weightKg")),
            rejected_kg=_num(d.get("rejectedKg")),
            duples_pkt=int(_num(d.get("duplesPkt"))),
            carton_ctn=int(_num(d.get("cartonCtn"))),
            notes=str(d.get("notes") or ""),
            timestamp=int(_num(d.get("timestamp"))),
            is_return=bool(d.get("isReturn", False)),
            is_dispatch=bool(d.get("isDispatch", False)),
        )


@dataclass
class SalesOrderItem:
    product_name: str
    size: str
    quantity_ctn: float
    calculated_weight_kg: float
    price_per_kg: float = 0.0
    item_value: float = 0.0
    product_id: str = ""
    assigned_batch: Optional[str] = None

    def to_dict(self) -> dict:
        d = {
            "productId": self.product_id,
            "productName": self.product_name,
            "size": self.size,
            "quantityCtn": self.quantity_ctn,
            "calculatedWeightKg": self.calculated_weight_kg,
            "pricePerKg": self.price_per_kg,
            "itemValue": self.item_value,
        }
        if self.assigned_batch:
            d["assignedBatch"] = self.assigned_batch
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SalesOrderItem":
        return cls(
            product_id=str(d.get("productId") or ""),
            product_name=str(d.get("productName", "")),
            size=str(d.get("size", "")),
            quantity_ctn=_num(d.get("quantityCtn")),
            calculated_weight_kg=_num(d.get("calculatedWeightKg")),
            price_per_kg=_num(d.get("pricePerKg")),
            item_value=_num(d.get("itemValue")),
            assigned_batch=d.get("assignedBatch") or None,
        )


@dataclass
class SalesOrder:
    id: str
    order_date: str
    items: list[SalesOrderItem] = field(default_factory=list)
    status: str = "Pending"
    sales_person: str = ""
    customer_name: str = ""
    mobile_number: str = ""
    email: str = ""
    city: str = ""
    map_link: str = ""
    po_number: str = ""
    po_file_name: Optional[str] = None
    po_file_data: Optional[str] = None
    total_weight_kg: float = 0.0
    sub_total: float = 0.0
    vat_amount: float = 0.0
    grand_total: float = 0.0

    @property
    def deducts_stock(self) -> bool:
        return self.status in STOCK_DEDUCTING_STATUSES

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "orderDate": self.order_date,
            "salesPerson": self.sales_person,
            "customerName": self.customer_name,
            "mobileNumber": self.mobile_number,
            "email": self.email,
            "city": self.city,
            "mapLink": self.map_link,
            "poNumber": self.po_number,
            "items": [i.to_dict() for i in self.items],
            "totalWeightKg": self.total_weight_kg,
            "subTotal": self.sub_total,
            "vatAmount": self.vat_amount,
            "grandTotal": self.grand_total,
            "status": self.status,
        }
        if self.po_file_name:
            d["poFileName"] = self.po_file_name
        if self.po_file_data:
            d["poFileData"] = self.po_file_data
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SalesOrder":
        status = str(d.get("status") or "Pending")
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status: {status}")
        return cls(
            id=str(d["id"]),
            order_date=str(d.get("orderDate", "")),
            sales_person=str(d.get("salesPerson") or ""),
            customer_name=str(d.get("customerName") or ""),
            mobile_number=str(d.get("mobileNumber") or ""),
            email=str(d.get("email") or ""),
            city=str(d.get("city") or ""),
            map_link=str(d.get("mapLink") or ""),
            po_number=str(d.get("poNumber") or ""),
            po_file_name=d.get("poFileName") or None,
            po_file_data=d.get("poFileData") or None,
            items=[SalesOrderItem.from_dict(i) for i in d.get("items") or []],
            total_weight_kg=_num(d.get("totalWeightKg")),
            sub_total=_num(d.get("subTotal")),
            vat_amount=_num(d.get("vatAmount")),
            grand_total=_num(d.get("grandTotal")),
            status=status,
        )


@dataclass
class Customer:
    id: str
    name: str
    mobile: str = ""
    email: str = ""
    city: str = ""
    map_link: str = ""
    order_history: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "mobile": self.mobile,
            "email": self.email,
            "city": self.city,
            "mapLink": self.map_link,
            "orderHistory": list(self.order_history),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Customer":
        return cls(
            id=str(d["id"]),
            name=str(d.get("name", "")),
            mobile=str(d.get("mobile") or ""),
            email=str(d.get("email") or ""),
            city=str(d.get("city") or ""),
            map_link=str(d.get("mapLink") or ""),
            order_history=[str(o) for o in d.get("orderHistory") or []],
        )


@dataclass
class StockTransaction:
    id: str
    item_id: str
    date: str
    qty: float
    type: str = INWARD
    notes: str = ""

    def __post_init__(self) -> None:
        if self.type not in TRANSACTION_TYPES:
            raise ValueError(f"Unknown transaction type: {self.type}")

    @property
    def inflow(self) -> float:
        if self.type == INWARD:
            return float(self.qty)
        if self.type == ADJUSTMENT and self.qty > 0:
            return float(self.qty)
        return 0.0

    @property
    def outflow(self) -> float:
        if self.type == ISSUE:
            return float(self.qty)
        if self.type == ADJUSTMENT and self.qty < 0:
            return -float(self.qty)
        return 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "itemId": self.item_id,
            "date": self.date,
            "qty": self.qty,
            "type": self.type,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "StockTransaction":
        return cls(
            id=str(d["id"]),
            item_id=str(d["itemId"]),
            date=str(d["date"]),
            qty=_num(d.get("qty")),
            type=str(d.get("type") or INWARD).upper(),
            notes=str(d.get("notes") or ""),
        )
