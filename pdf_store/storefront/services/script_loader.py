# storefront/services/script_loader.py
"""
HOSTED SCRIPT ACQUISITION

Single-shot fetch of an external script resource.
Resolves to True/False; never raises to the caller.
"""

from __future__ import annotations

import logging
from typing import Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

ScriptLoader = Callable[[str], bool]


def _probe_timeout() -> int:
    cfg = getattr(settings, "STOREFRONT", {}) or {}
    try:
        return int(cfg.get("SCRIPT_PROBE_TIMEOUT") or DEFAULT_TIMEOUT)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT


def load_script(src: str, *, timeout: int | None = None) -> bool:
    src = str(src or "").strip()
    if not src.lower().startswith("https://"):
        logger.warning("Refusing to load non-https script", extra={"src": src})
        return False

    req = Request(
        src,
        headers={
            "Accept": "application/javascript, */*;q=0.8",
            "User-Agent": "Mozilla/5.0 (PdfStore; +https://example.local) Python-urllib",
        },
        method="GET",
    )

    try:
        with urlopen(req, timeout=timeout or _probe_timeout()) as resp:
            status = getattr(resp, "status", 200)
            body = resp.read(1)
    except HTTPError as e:
        logger.warning("Script load rejected", extra={"src": src, "status": e.code})
        return False
    except URLError as e:
        logger.warning("Script load failed", extra={"src": src, "error": str(e.reason)})
        return False
    except Exception as e:
        logger.warning("Script load failed", extra={"src": src, "error": str(e)})
        return False

    if status >= 400 or not body:
        logger.warning("Script load returned no content", extra={"src": src, "status": status})
        return False

    return True


def get_script_loader() -> ScriptLoader:
    cfg = getattr(settings, "STOREFRONT", {}) or {}
    dotted = str(cfg.get("SCRIPT_LOADER") or "").strip()
    if not dotted:
        return load_script
    return import_string(dotted)
