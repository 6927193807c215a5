from __future__ import annotations

from factoryflow.catalog import (
    PRODUCT_CATALOG,
    carton_weight,
    cartons_to_weight,
    families,
    find_product,
    get_product_def,
    packet_weight,
    packets_per_carton,
    pallets,
    suggest_counts,
    types_for_family,
    weight_to_cartons,
)
from factoryflow.master_data import FINISHED_GOODS
from factoryflow.utils import stock_key


def test_cartons_and_weight_convert_both_ways():
    assert cartons_to_weight(5, 20) == 100
    assert weight_to_cartons(100, 20) == 5
    assert weight_to_cartons(100, 0) == 0


def test_stock_key_ignores_case_and_whitespace():
    assert stock_key("SPARKWELD 6013", "3.2 X 350") == stock_key("sparkweld6013", "3.2x350")
    assert stock_key("SPARKWELD 6013", "3.2 x 350") != stock_key("SPARKWELD 6013", "3.2 x 450")


def test_6013_packet_weight_depends_on_size():
    assert packet_weight("SPARKWELD 6013", "2.6 x 350") == 2
    assert packet_weight("SPARKWELD 6013", "3.2 x 350") == 4
    assert carton_weight("SPARKWELD 6013", "3.2 x 350") == 16
    assert packets_per_carton("SPARKWELD 6013", "3.2 x 350") == 4


def test_unknown_product_has_no_weights():
    assert carton_weight("MYSTERY ROD", "1 x 1") == 0
    assert packets_per_carton("MYSTERY ROD", "1 x 1") == 0
    assert suggest_counts(100, "MYSTERY ROD", "1 x 1") is None


def test_lookup():
    assert find_product("  vacuum   7018 ").display_name == "VACUUM 7018"
    assert get_product_def("NiFe", "Container").container_color == "Silver"
    assert [p.type for p in types_for_family("7018")] == ["Normal", "Vacuum"]
    assert families()[0] == "6013"
    assert len(families()) == len({p.family for p in PRODUCT_CATALOG})


def test_suggest_counts():
    s = suggest_counts(110, "SPARKWELD 7018", "2.5 x 350")
    assert s.cartons == 5.5
    assert s.full_cartons == 5
    assert s.remainder_packets == 2
    assert s.packets == 22
    assert s.pallets == 0.11


def test_pallets():
    assert pallets(2500) == 2.5


def test_finished_goods_master_matches_catalog():
    for item in FINISHED_GOODS:
        product = find_product(item.name)
        assert product is not None, item.name
        assert product.has_size(item.size), (item.name, item.size)


def test_finished_goods_keys_are_unique():
    keys = [item.key for item in FINISHED_GOODS]
    assert len(keys) == len(set(keys))
