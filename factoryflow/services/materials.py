from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from factoryflow.catalog import CONTAINER, NORMAL, PRODUCT_CATALOG, VACUUM, ProductDefinition, find_product
from factoryflow.master_data import (
    CONTAINER_GOLD,
    CONTAINER_SILVER,
    CTN_6013,
    CTN_7018,
    CTN_VACUUM,
    FOIL_BAG,
    PACKING_IDS,
    PKT_6013,
    PKT_7018_2_5KG,
    PKT_7018_5KG,
    PKT_VACUUM,
)
from factoryflow.models import PRODUCTION, ProductionRecord
from factoryflow.utils import safe_div

logger = logging.getLogger(__name__)

PacketSelector = Callable[[ProductionRecord], Optional[str]]


class UnmappedProductError(ValueError):
    """A production line whose product has no packing-material rule."""


@dataclass(frozen=True)
class MaterialUsage:
    packet_id: Optional[str]
    carton_id: Optional[str]

    @property
    def mapped(self) -> bool:
        return self.packet_id is not None or self.carton_id is not None


@dataclass(frozen=True)
class MaterialRule:
    carton_id: str
    packet: PacketSelector
    # Every id ``packet`` can return; checked against the packing master list.
    packet_ids: tuple[str, ...]


UNMAPPED = MaterialUsage(None, None)


def approx_packet_weight(record: ProductionRecord) -> float:
    return safe_div(record.weight_kg, record.duples_pkt)


def _fixed_packet(packet_id: str) -> PacketSelector:
    return lambda record: packet_id


def _vacuum_packet(record: ProductionRecord) -> Optional[str]:
    if "7018" in record.product_name.upper() and "350" in record.size.upper():
        return PKT_VACUUM
    w = approx_packet_weight(record)
    return PKT_VACUUM if 1.5 <= w <= 2.5 else None


def _normal_7018_packet(record: ProductionRecord) -> Optional[str]:
    w = approx_packet_weight(record)
    if w > 4.5:
        return PKT_7018_5KG
    if 2.0 <= w <= 3.0:
        return PKT_7018_2_5KG
    return PKT_7018_5KG


RULE_6013 = MaterialRule(CTN_6013, _fixed_packet(PKT_6013), (PKT_6013,))
RULE_7018 = MaterialRule(CTN_7018, _normal_7018_packet, (PKT_7018_5KG, PKT_7018_2_5KG))
RULE_VACUUM = MaterialRule(CTN_VACUUM, _vacuum_packet, (PKT_VACUUM,))
# Ni/NiFe containers go into the 6013 carton.
RULE_GOLD_CONTAINER = MaterialRule(CTN_6013, _fixed_packet(CONTAINER_GOLD), (CONTAINER_GOLD,))
RULE_SILVER_CONTAINER = MaterialRule(CTN_6013, _fixed_packet(CONTAINER_SILVER), (CONTAINER_SILVER,))

MATERIAL_RULES: dict[tuple[str, str], MaterialRule] = {
    ("6013", NORMAL): RULE_6013,
    ("7018", NORMAL): RULE_7018,
    ("7018-1", NORMAL): RULE_7018,
    ("8018-C3", NORMAL): RULE_7018,
    ("7018", VACUUM): RULE_VACUUM,
    ("7018-1", VACUUM): RULE_VACUUM,
    ("8018-C3", VACUUM): RULE_VACUUM,
    ("7024", VACUUM): RULE_VACUUM,
    ("8018-B2", VACUUM): RULE_VACUUM,
    ("10018-M", VACUUM): RULE_VACUUM,
    ("10018-G", VACUUM): RULE_VACUUM,
    ("10018-D2", VACUUM): RULE_VACUUM,
    ("8018-G", VACUUM): RULE_VACUUM,
    ("Ni", CONTAINER): RULE_GOLD_CONTAINER,
    ("NiFe", CONTAINER): RULE_SILVER_CONTAINER,
}


def _substring_rule(product_name: str) -> Optional[MaterialRule]:
    """Fallback for names that are not in the catalog (legacy ledger lines)."""
    name = product_name.upper()
    if "NIFE" in name:
        return RULE_SILVER_CONTAINER
    if "NI" in name:
        return RULE_GOLD_CONTAINER
    if "VACUUM" in name:
        return RULE_VACUUM
    if "6013" in name:
        return RULE_6013
    if "7018" in name:
        return RULE_7018
    return None


def rule_for(product_name: str) -> Optional[MaterialRule]:
    product = find_product(product_name)
    if product is not None:
        rule = MATERIAL_RULES.get((product.family, product.type))
        if rule is not None:
            return rule
    return _substring_rule(product_name)


def resolve_materials(record: ProductionRecord, *, strict: bool = False) -> MaterialUsage:
    """
    Packet and carton ids a ledger line draws from packing stock.

    Unknown products resolve to (None, None) so nothing is deducted; with
    ``strict`` they raise UnmappedProductError instead.
    """
    rule = rule_for(record.product_name)
    if rule is None:
        if strict:
            raise UnmappedProductError(f"No packing-material rule for product '{record.product_name}'.")
        logger.warning("No packing-material rule for %r; consumption not tracked", record.product_name)
        return UNMAPPED
    return MaterialUsage(packet_id=rule.packet(record), carton_id=rule.carton_id)


def materials_consumed(record: ProductionRecord, *, strict: bool = False) -> dict[str, float]:
    """
    Quantities drawn from each packing item by one ledger line.
    Returns and manual dispatches consume no packing material.
    """
    if record.kind != PRODUCTION:
        return {}

    usage = resolve_materials(record, strict=strict)
    out: dict[str, float] = {}
    if usage.packet_id:
        out[usage.packet_id] = out.get(usage.packet_id, 0.0) + float(record.duples_pkt)
        # One foil bag per vacuum packet.
        if usage.packet_id == PKT_VACUUM:
            out[FOIL_BAG] = out.get(FOIL_BAG, 0.0) + float(record.duples_pkt)
    if usage.carton_id:
        out[usage.carton_id] = out.get(usage.carton_id, 0.0) + float(record.carton_ctn)
    return out


def validate_material_rules(
    catalog: Iterable[ProductDefinition] = PRODUCT_CATALOG,
    rules: Optional[dict[tuple[str, str], MaterialRule]] = None,
    packing_ids: Iterable[str] = PACKING_IDS,
) -> None:
    rules = MATERIAL_RULES if rules is None else rules
    known = set(packing_ids)
    problems: list[str] = []

    for p in catalog:
        if (p.family, p.type) not in rules:
            problems.append(f"{p.display_name} ({p.family}/{p.type}) has no material rule")

    for key, rule in rules.items():
        for item_id in (rule.carton_id, *rule.packet_ids):
            if item_id not in known:
                problems.append(f"rule {key} references unknown packing item {item_id}")

    if problems:
        raise ValueError("Packing-material rules are incomplete: " + "; ".join(problems))


validate_material_rules()
