"""
Opening balances (BF Qty) for finished goods, packing materials and raw
materials.

Every projection reads from this one module. Events dated before an item's
baseline are already reflected in its opening number and are never replayed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from factoryflow.utils import stock_key

FG_BASELINE = "2025-12-01"
PACKING_BASELINE = "2025-12-01"
RAW_MATERIAL_BASELINE = "2025-11-01"


@dataclass(frozen=True)
class MasterItem:
    key: str
    name: str
    opening: float
    baseline: str
    unit: str = "KG"
    size: str = ""
    item_no: str = ""
    remark: str = ""
    low_stock_threshold: Optional[float] = None


def _fg(product: str, size: str, opening: float) -> MasterItem:
    return MasterItem(
        key=stock_key(product, size),
        name=product,
        size=size,
        opening=float(opening),
        baseline=FG_BASELINE,
        unit="KG",
    )


def _pm(item_id: str, item_no: str, name: str, opening: float, remark: str = "", low: Optional[float] = None) -> MasterItem:
    return MasterItem(
        key=item_id,
        name=name,
        opening=float(opening),
        baseline=PACKING_BASELINE,
        unit="PCS",
        item_no=item_no,
        remark=remark,
        low_stock_threshold=low,
    )


def _rm(item_id: str, name: str, opening: float, remark: str = "") -> MasterItem:
    return MasterItem(
        key=item_id,
        name=name,
        opening=float(opening),
        baseline=RAW_MATERIAL_BASELINE,
        unit="KGS",
        remark=remark,
    )


# Finished goods, kg on hand as of the baseline morning.
FINISHED_GOODS: tuple[MasterItem, ...] = (
    _fg("SPARKWELD 6013", "2.6 x 350", 2214),
    _fg("SPARKWELD 6013", "3.2 x 350", 4204),
    _fg("SPARKWELD 6013", "4.0 x 350", 3388),
    _fg("SPARKWELD 6013", "4.0 x 400", 1575),
    _fg("SPARKWELD 6013", "5.0 x 350", 148),
    _fg("SPARKWELD 7018", "2.5 x 350", 2465),
    _fg("SPARKWELD 7018", "3.2 X 350", 725),
    _fg("SPARKWELD 7018", "3.2 x 450", 2265),
    _fg("SPARKWELD 7018", "4.0 X 350", 2220),
    _fg("SPARKWELD 7018", "4.0 x 450", 0),
    _fg("SPARKWELD 7018", "5.0 x 350", 235),
    _fg("SPARKWELD 7018", "5.0 x 450", 135),
    _fg("SPARKWELD 7018-1", "2.5 x 350", 0),
    _fg("SPARKWELD 7018-1", "3.2 x 350", 0),
    _fg("SPARKWELD 7018-1", "3.2 X 450", 15),
    _fg("SPARKWELD 7018-1", "4.0 X 350", 265),
    _fg("SPARKWELD 7018-1", "4.0 X 450", 35),
    _fg("SPARKWELD 7018-1", "5.0 X 350", 0),
    _fg("SPARKWELD 7018-1", "5.0 X 450", 0),
    _fg("VACUUM 7018", "2.5 X 350", 0),
    _fg("VACUUM 7018", "3.2 X 350", 40),
    _fg("VACUUM 7018", "4.0 X 350", 154),
    _fg("VACUUM 7018", "5.0 X 350", 2),
    _fg("VACUUM 7018-1", "2.5 X 350", 532),
    _fg("VACUUM 7018-1", "3.2 X 350", 298),
    _fg("VACUUM 7018-1", "4.0 X 350", 8),
    _fg("SPARKWELD Ni", "2.5 x 350", 0),
    _fg("SPARKWELD Ni", "3.2 x 350", 268),
    _fg("SPARKWELD Ni", "4.0 x 350", 15),
    _fg("SPARKWELD NiFe", "2.5 x 350", 0),
    _fg("SPARKWELD NiFe", "3.2 x 350", 156),
    _fg("SPARKWELD NiFe", "4.0 x 350", 93),
    _fg("VACUUM 8018-C3", "2.5 x 350", 2),
    _fg("VACUUM 8018-C3", "3.2 x 350", 2834),
    _fg("VACUUM 8018-C3", "4.0 x 350", 534),
    _fg("SPARKWELD 8018-C3", "2.5 x 350", 0),
    _fg("SPARKWELD 8018-C3", "3.2 x 350", 0),
    _fg("SPARKWELD 8018-C3", "4.0 x 350", 0),
    _fg("SPARKWELD 7024", "2.6 x 350", 0),
    _fg("SPARKWELD 7024", "3.2 x 350", 156),
    _fg("SPARKWELD 7024", "4.0 x 450", 880),
    _fg("SPARKWELD 7024", "5.0 x 350", 0),
    _fg("VACUUM 8018-B2", "2.5 x 350", 0),
    _fg("VACUUM 8018-B2", "3.2 x 350", 318),
    _fg("VACUUM 8018-B2", "4.0 x 350", 106),
    _fg("VACUUM 10018-M", "3.2 x 350", 92),
    _fg("VACUUM 10018-G", "3.2 x 350", 0),
    _fg("VACUUM 10018-D2", "4.0 x 350", 30),
    _fg("VACUUM 8018-G", "2.5 x 350", 106),
    _fg("VACUUM 8018-G", "3.2 x 350", 86),
    _fg("VACUUM 8018-G", "4.0 x 350", 284),
)

# Packing material ids referenced by the consumption rules.
PKT_6013 = "PD1001"
PKT_7018_5KG = "PD1002"
PKT_7018_2_5KG = "PD1004"
PKT_VACUUM = "PD1006"
CTN_7018 = "PC1002"
CTN_6013 = "PC1003"
CTN_VACUUM = "PC1005"
FOIL_BAG = "VP1002"
CONTAINER_SILVER = "PB1001"
CONTAINER_GOLD = "PB1002"

PACKING_MATERIALS: tuple[MasterItem, ...] = (
    # Packets (PD)
    _pm("PD1001", "101458CD004", "PACKETS 6013 - 50 X 70 X 360", 28669, "Each Carton 300pcs 4.0kg"),
    _pm("PD1002", "2700011918", "PACKETS 7018 - 60 X 75 X 360 (5.0 KG)", 5378, "Each Carton 350pcs 5.0kg", low=5400),
    _pm("PD1003", "", "PACKETS 7018 - 50 X 75 X 460", 11193, "Each Carton 200pcs 5.0kg"),
    _pm("PD1004", "101458CD003", "PACKETS 7018 - 40 X 60 X 360 (2.5 KG)", 16500, "Each Carton 300pcs 2.5kg"),
    _pm("PD1005", "101458CD005", "PACKETS 6013 - 50 X 3.5 X 360", 46011, "Each Carton 375pcs 2.0kg"),
    _pm("PD1006", "101458CD005", "PLAIN Vac-PACKETS - 50 X 3.5 X 360", 12750, "Each Carton 300pcs 2.0kg", low=12500),
    _pm("PD1007", "101458CD006", "PACKETS 6013 - 50 X 65 X 400", 6785, "Each Carton 250pcs 5.0kg"),
    _pm("PD1008", "", "PLAIN PACKETS - 50 X 70 X 460", 5700, "Each Carton 200pcs 5.0kg"),
    # Cartons (PC)
    _pm("PC1001", "101458CC002", "CARTON - 7018 - 80 X 28 X 470", 0, "Each Carton 60pcs", low=10),
    _pm("PC1002", "101458CC001", "CARTON - 7018 - 90 X 25 X 370", 5376, "Each Carton 50pcs"),
    _pm("PC1003", "101458CC004", "CARTON - 6013 - 70 X 22 X 370", 12631, "Shared by 6013 & Ni containers"),
    _pm("PC1004", "101458CC005", "CARTON - 7018 - 70 X 22 X 470", 7150, "Each Carton 50pcs"),
    _pm("PC1005", "101458CC007", "CARTON - VACUUM - 30.2X39X8", 12732, "Each Carton 50pcs"),
    _pm("PC1006", "101458CD001", "CARTON - 6013 - 70 X 213 X 420 (20KG)", 2250, "Each Carton 50pcs"),
    # Vacuum foil (VP)
    _pm("VP1001", "", "VACUUM FOIL BAG 20K pcs", 18200),
    _pm("VP1002", "", "VACUUM Aluminium FOIL BAG 20K pcs", 2434, "Each Carton 1200 bags"),
    # Containers (PB)
    _pm("PB1001", "", "Plastic container Silver colour NiFe", 5793, "Each Carton 500 box"),
    _pm("PB1002", "", "Plastic container Gold colour Ni", 2620, "Each Carton 666 box"),
)

RAW_MATERIALS: tuple[MasterItem, ...] = (
    _rm("RM1001", "PLAIN WIRE ROD 5.5 mm", 27660, "Per coil 1844 kg"),
    _rm("RM1002", "PLAIN WIRE ROD 5.5 mm AISI/SAE1006", 25574, "Per coil 1826.26 kg"),
    _rm("RM1003", "POTASSIUM SODIUM SILICATE (LIQUID)Mix", 28420, "Per drum 290 kg"),
    _rm("RM1004", "POTASSIUM SILICATE (LIQUID)", 18810, "Per drum 285 kg"),
    _rm("RM1005", "SODIUM SILICATE (LIQUID)", 240, "Per drum 280 kg"),
    _rm("RM1006", "CELLULOSE POWDER (Grade-Special)", 6750, "Each bag 25kg"),
    _rm("RM1007", "FERRO MANGANESE HC", 1000, "Each bag 1000kg"),
    _rm("RM1008", "FERRO MANGANESE LC", 2000, "Each bag 1000kg"),
    _rm("RM1009", "CALCIUM ALGINATE", 765, "Each bag 25/500kg"),
    _rm("RM1010", "SODIUM CMC", 580, "Each bag 500kg"),
    _rm("RM1011", "QUARTZ", 10000, "Each bag 50/1000kg"),
    _rm("RM1012", "POTASH FELDSPAR", 6000, "Each bag 50/1000kg"),
    _rm("RM1013", "CHINA CLAY", 4000, "Each bag 500/40kg"),
    _rm("RM1014", "MICA POWDER", 7820, "Each bag 500/40kg"),
    _rm("RM1015", "IRON POWDER (Grade: 40.29)", 5000, "Each bag 1000kg"),
    _rm("RM1016", "RUTILE SAND", 19000, "Each bag 1000kg"),
    _rm("RM1017", "FERRO SILICON POWDER 45%STABILISED", 5000, "Each bag 1000kg"),
    _rm("RM1018", "ACID GRADE FLUORSPAR", 6000, "Each bag 1000kg"),
    _rm("RM1019", "CALCIUM CARBONATE", 2000, "Each bag 1000kg"),
    _rm("RM1020", "GRAPHITE POWDER (200)", 450, "Each bag 25kg"),
    _rm("RM1021", "CALCINED ALUMINA", 495, "Each Bag 500kg"),
    _rm("RM1022", "BARIUM CARBONATE", 1950, "Each bag 1000kg"),
    _rm("RM1023", "FERRO TITANIUM", 200, "Each Tin 250kg"),
    _rm("RM1024", "NICKEL METAL POWDER", 400, "Each Tin 250kg"),
    _rm("RM1025", "MICACEOUS IRON OXIDE", 400, "Each Bag 500kg"),
    _rm("RM1026", "NICKEL WIRE - 3.2 X350 MM", 0, "Each Box 25kg"),
    _rm("RM1027", "NICKEL WIRE - 4.0 X 350MM", 100, "Each Box 25kg"),
    _rm("RM1028", "NICKEL IRON WIRE - 3.2 X 350MM", 175, "Each Box 25kg"),
    _rm("RM1029", "NICKEL IRON WIRE - 4.0 X 350MM", 411, "Each Box 25kg"),
    _rm("RM1030", "FERRO MOLYBDENUM", 70, "Each Tin 50kg"),
    _rm("RM1031", "CHROMIUM POWDER", 90, "Each Tin 50kg"),
    _rm("RM1032", "ARABIC GUM POWDER", 998, "Each bag 500kg"),
    _rm("RM1033", "ELECTROLYTIC MANGANESE", 246, "Each Tin 250kg"),
    _rm("RM1034", "IRON POWDER (Grade: 40.37)", 948, "Each bag 1000kg"),
    _rm("RM1035", "MANGANESE CARBONATE", 1965, "Each bag 1000kg"),
    _rm("RM1036", "CELLULOSE POWDER (Special)", 25, "Each bag 25kg"),
    _rm("RM1037", "TITANIUM DIOXIDE", 1000, "Each bag 25kg"),
    _rm("RM1038", "CELLULOSE SPECIAL", 50, "Each bag 25kg"),
)

PACKING_IDS = frozenset(m.key for m in PACKING_MATERIALS)
RAW_MATERIAL_IDS = frozenset(m.key for m in RAW_MATERIALS)
