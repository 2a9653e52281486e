from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

from ..errors import PreflightError
from .env import PATHS

logger = logging.getLogger(__name__)


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        out[key.strip()] = value.strip().strip('"').strip("'")
    return out


def check_root() -> None:
    if os.geteuid() != 0:
        raise PreflightError("This tool must be run as root (use sudo)")


def check_ubuntu(os_release_path: str = PATHS.os_release) -> Dict[str, str]:
    p = Path(os_release_path)
    if not p.exists():
        raise PreflightError("Cannot detect OS version")

    info = parse_os_release(p.read_text(encoding="utf-8"))
    if info.get("ID") != "ubuntu":
        raise PreflightError(f"This tool is designed for Ubuntu. Detected: {info.get('ID') or 'unknown'}")

    logger.info("Detected Ubuntu %s", info.get("VERSION", "?"))
    return info
