from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

_WS = re.compile(r"\s+")


def iso_today() -> str:
    return date.today().isoformat()


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def next_day(iso_date: str) -> str:
    return (date.fromisoformat(iso_date) + timedelta(days=1)).isoformat()


def safe_div(n: float, d: float) -> float:
    return float(n) / float(d) if d else 0.0


def normalize(text: str) -> str:
    """Lowercase and drop every whitespace character ("3.2 X 350" -> "3.2x350")."""
    return _WS.sub("", str(text or "")).lower()


def stock_key(product: str, size: str) -> str:
    return f"{normalize(product)}|{normalize(size)}"
