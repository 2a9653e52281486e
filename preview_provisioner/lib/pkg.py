from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "update"], env=APT_ENV, dry_run=dry_run)


def apt_upgrade(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "upgrade", "-y"], env=APT_ENV, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(["apt-get", "install", "-y", *packages], env=APT_ENV, dry_run=dry_run)


def php_packages(version: str, extensions: Sequence[str]) -> list[str]:
    return [f"php{version}-{ext}" for ext in extensions]
