from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from factoryflow.utils import normalize, safe_div

NORMAL = "Normal"
VACUUM = "Vacuum"
CONTAINER = "Container"

PALLET_KG = 1000.0

STANDARD_SIZES_B = ("2.5 x 350", "3.2 x 350", "3.2 x 450", "4.0 x 350", "4.0 x 450", "5.0 x 350", "5.0 x 450")
VACUUM_SIZES = ("2.5 x 350", "3.2 x 350", "4.0 x 350")


def _fixed(kg: float) -> Callable[[str], float]:
    return lambda size: kg


@dataclass(frozen=True)
class ProductDefinition:
    family: str
    type: str
    display_name: str
    sizes: tuple[str, ...]
    pkt_weight: Callable[[str], float]
    ctn_weight: Callable[[str], float]
    container_color: Optional[str] = None

    def get_pkt_weight(self, size: str) -> float:
        return float(self.pkt_weight(size))

    def get_ctn_weight(self, size: str) -> float:
        return float(self.ctn_weight(size))

    def has_size(self, size: str) -> bool:
        return normalize(size) in {normalize(s) for s in self.sizes}


PRODUCT_CATALOG: tuple[ProductDefinition, ...] = (
    ProductDefinition(
        "6013", NORMAL, "SPARKWELD 6013",
        ("2.6 x 350", "3.2 x 350", "4.0 x 350", "4.0 x 400", "5.0 x 350"),
        pkt_weight=lambda size: 2 if size.strip().startswith("2.6") else 4,
        ctn_weight=_fixed(16),
    ),
    ProductDefinition("7018", NORMAL, "SPARKWELD 7018", STANDARD_SIZES_B, _fixed(5), _fixed(20)),
    ProductDefinition("7018", VACUUM, "VACUUM 7018", VACUUM_SIZES + ("5.0 x 350",), _fixed(2), _fixed(20)),
    ProductDefinition("7018-1", NORMAL, "SPARKWELD 7018-1", STANDARD_SIZES_B, _fixed(5), _fixed(20)),
    ProductDefinition("7018-1", VACUUM, "VACUUM 7018-1", VACUUM_SIZES, _fixed(2), _fixed(20)),
    ProductDefinition("Ni", CONTAINER, "SPARKWELD Ni", VACUUM_SIZES, _fixed(1), _fixed(10), container_color="Gold"),
    ProductDefinition("NiFe", CONTAINER, "SPARKWELD NiFe", VACUUM_SIZES, _fixed(1), _fixed(10), container_color="Silver"),
    ProductDefinition("8018-C3", NORMAL, "SPARKWELD 8018-C3", VACUUM_SIZES, _fixed(5), _fixed(20)),
    ProductDefinition("8018-C3", VACUUM, "VACUUM 8018-C3", VACUUM_SIZES, _fixed(2), _fixed(20)),
    ProductDefinition(
        "7024", VACUUM, "SPARKWELD 7024",
        ("2.6 x 350", "3.2 x 350", "4.0 x 450", "5.0 x 350"),
        _fixed(2), _fixed(20),
    ),
    ProductDefinition("8018-B2", VACUUM, "VACUUM 8018-B2", VACUUM_SIZES, _fixed(2), _fixed(20)),
    ProductDefinition("10018-M", VACUUM, "VACUUM 10018-M", ("3.2 x 350",), _fixed(2), _fixed(20)),
    ProductDefinition("10018-G", VACUUM, "VACUUM 10018-G", ("3.2 x 350",), _fixed(2), _fixed(20)),
    ProductDefinition("10018-D2", VACUUM, "VACUUM 10018-D2", ("4.0 x 350",), _fixed(2), _fixed(20)),
    ProductDefinition("8018-G", VACUUM, "VACUUM 8018-G", VACUUM_SIZES, _fixed(2), _fixed(20)),
)

_BY_NAME = {normalize(p.display_name): p for p in PRODUCT_CATALOG}


def families() -> list[str]:
    seen: list[str] = []
    for p in PRODUCT_CATALOG:
        if p.family not in seen:
            seen.append(p.family)
    return seen


def types_for_family(family: str) -> list[ProductDefinition]:
    return [p for p in PRODUCT_CATALOG if p.family == family]


def get_product_def(family: str, pack_type: str) -> Optional[ProductDefinition]:
    return next((p for p in PRODUCT_CATALOG if p.family == family and p.type == pack_type), None)


def find_product(product_name: str) -> Optional[ProductDefinition]:
    """Catalog entry whose display name matches, ignoring case and whitespace."""
    return _BY_NAME.get(normalize(product_name))


# -------------------------
# Unit conversions
# -------------------------

def carton_weight(product_name: str, size: str) -> float:
    p = find_product(product_name)
    return p.get_ctn_weight(size) if p else 0.0


def packet_weight(product_name: str, size: str) -> float:
    p = find_product(product_name)
    return p.get_pkt_weight(size) if p else 0.0


def packets_per_carton(product_name: str, size: str) -> float:
    return safe_div(carton_weight(product_name, size), packet_weight(product_name, size))


def cartons_to_weight(quantity_ctn: float, ctn_weight: float) -> float:
    return float(quantity_ctn) * float(ctn_weight)


def weight_to_cartons(weight_kg: float, ctn_weight: float) -> float:
    return safe_div(weight_kg, ctn_weight)


def pallets(weight_kg: float) -> float:
    return float(weight_kg) / PALLET_KG


@dataclass(frozen=True)
class PackSuggestion:
    cartons: float
    packets: float
    pallets: float
    full_cartons: int
    remainder_packets: int


def suggest_counts(weight_kg: float, product_name: str, size: str) -> Optional[PackSuggestion]:
    """
    Theoretical carton/packet counts for a produced weight, used as a hint on
    the production entry form. None when the product/size has no unit weights.
    """
    ctn_w = carton_weight(product_name, size)
    pkt_w = packet_weight(product_name, size)
    if not weight_kg or not ctn_w or not pkt_w:
        return None

    raw_ctn = float(weight_kg) / ctn_w
    return PackSuggestion(
        cartons=raw_ctn,
        packets=float(weight_kg) / pkt_w,
        pallets=pallets(weight_kg),
        full_cartons=int(raw_ctn),
        remainder_packets=int(round((float(weight_kg) % ctn_w) / pkt_w)),
    )
