"""
Mirror of the whole local store to one remote JSON document.

Push replaces the remote blob with the local data; pull replaces local
collections with the remote ones. Last write wins, there is no merge.
Local writes never wait on this module, and failures come back as
``SyncStatus.ERROR`` rather than exceptions.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from enum import Enum

import requests

from factoryflow.services.records import get_all_data, import_data

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SyncResult:
    status: SyncStatus
    message: str = ""
    counts: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == SyncStatus.SUCCESS


def push(conn, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> SyncResult:
    url = (url or "").strip()
    if not url:
        return SyncResult(SyncStatus.IDLE, "Sync URL not configured")

    payload = get_all_data(conn)
    try:
        # text/plain keeps spreadsheet-script endpoints happy (no preflight)
        response = requests.post(
            url,
            data=json.dumps(payload),
            headers={"Content-Type": "text/plain"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.exceptions.Timeout:
        logger.error("Sync push timed out: %s", url)
        return SyncResult(SyncStatus.ERROR, "Request timeout")
    except requests.exceptions.ConnectionError:
        logger.error("Sync push could not connect: %s", url)
        return SyncResult(SyncStatus.ERROR, "Connection failed")
    except requests.RequestException as e:
        logger.error("Sync push failed: %s", e)
        return SyncResult(SyncStatus.ERROR, str(e))

    counts = {k: len(payload[k]) for k in ("records", "orders", "customers", "transactions")}
    logger.info("Sync push sent %s", counts)
    return SyncResult(SyncStatus.SUCCESS, "Data sent to cloud", counts)


def pull(conn, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> SyncResult:
    url = (url or "").strip()
    if not url:
        return SyncResult(SyncStatus.IDLE, "Sync URL not configured")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout:
        logger.error("Sync pull timed out: %s", url)
        return SyncResult(SyncStatus.ERROR, "Request timeout")
    except requests.exceptions.ConnectionError:
        logger.error("Sync pull could not connect: %s", url)
        return SyncResult(SyncStatus.ERROR, "Connection failed")
    except requests.RequestException as e:
        logger.error("Sync pull failed: %s", e)
        return SyncResult(SyncStatus.ERROR, str(e))
    except ValueError:
        logger.error("Sync pull got a non-JSON response from %s", url)
        return SyncResult(SyncStatus.ERROR, "Remote response is not JSON")

    if not isinstance(data, dict) or not (data.get("records") or data.get("orders")):
        return SyncResult(SyncStatus.ERROR, "Remote document has no records or orders")

    try:
        counts = import_data(conn, data)
    except (KeyError, TypeError, ValueError, sqlite3.Error) as e:
        logger.error("Sync pull could not import remote document: %s", e)
        return SyncResult(SyncStatus.ERROR, f"Remote document is malformed: {e}")

    return SyncResult(SyncStatus.SUCCESS, "Data received from cloud", counts)
