from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def write_file(path: str | Path, contents: str, *, mode: int | None = None, dry_run: bool = False) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    # Write to a sibling then rename so readers never see a partial file.
    tmp = p.with_name(p.name + ".tmp")
    tmp.write_text(contents, encoding="utf-8")
    if mode is not None:
        os.chmod(tmp, mode)
    os.replace(tmp, p)
    logger.info("Wrote %s", str(p))


def backup_once(path: str | Path, *, dry_run: bool = False) -> Path:
    """Copy path to path.backup unless a backup already exists."""

    p = Path(path)
    backup = p.with_name(p.name + ".backup")
    if backup.exists():
        return backup
    if dry_run:
        logger.info("Would back up %s -> %s", str(p), str(backup))
        return backup
    shutil.copy2(p, backup)
    logger.info("Backed up %s -> %s", str(p), str(backup))
    return backup


def ensure_dir(path: str | Path, *, mode: int | None = None, dry_run: bool = False) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would create directory %s", str(p))
        return
    p.mkdir(parents=True, exist_ok=True)
    if mode is not None:
        os.chmod(p, mode)
