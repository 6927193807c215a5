from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "FACTORYFLOW_DATA_DIR"
ENV_SYNC_URL = "FACTORYFLOW_SYNC_URL"
ENV_STRICT_MATERIALS = "FACTORYFLOW_STRICT_MATERIALS"
ENV_LOG_LEVEL = "FACTORYFLOW_LOG_LEVEL"

SESSION_DATA_DIR = "factoryflow_data_dir"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    sync_url: str = ""
    currency: str = "SAR"
    vat_rate: float = 0.15
    strict_materials: bool = False
    sync_timeout: float = 30.0


def _default_data_dir() -> Path:
    return Path.home() / ".factoryflow"


def _truthy(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", cfg)
            return {}
    return {}


def persist_settings(data_dir_str: str, *, sync_url: Optional[str] = None) -> Path:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    cfg = data_dir / CONFIG_FILE_NAME
    payload = _load_persisted_settings(data_dir)
    payload["data_dir"] = str(data_dir)
    if sync_url is not None:
        payload["sync_url"] = sync_url.strip()
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return data_dir


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = persist_settings(data_dir_str)
    # Update session for immediate effect
    st.session_state[SESSION_DATA_DIR] = str(data_dir)


def load_settings(session_dir: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    # Priority order:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    env = os.environ if environ is None else environ

    if session_dir:
        data_dir = Path(session_dir).expanduser().resolve()
    elif env.get(ENV_DATA_DIR):
        data_dir = Path(env.get(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        default_dir = _default_data_dir()
        persisted = _load_persisted_settings(default_dir)
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    data_dir.mkdir(parents=True, exist_ok=True)
    persisted = _load_persisted_settings(data_dir)

    sync_url = env.get(ENV_SYNC_URL) or persisted.get("sync_url", "")
    strict = _truthy(env.get(ENV_STRICT_MATERIALS)) or bool(persisted.get("strict_materials", False))

    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "factoryflow.db",
        sync_url=str(sync_url).strip(),
        strict_materials=strict,
    )


@st.cache_resource
def get_settings() -> Settings:
    configure_logging()
    return load_settings(st.session_state.get(SESSION_DATA_DIR))


def configure_logging(level: Optional[str] = None) -> None:
    name = (level or os.getenv(ENV_LOG_LEVEL) or "INFO").upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)
