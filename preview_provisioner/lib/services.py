from __future__ import annotations

from .command import run_cmd


def enable_and_start(unit: str, *, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "enable", unit], dry_run=dry_run)
    run_cmd(["systemctl", "start", unit], dry_run=dry_run)


def enable_and_restart(unit: str, *, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "enable", unit], dry_run=dry_run)
    run_cmd(["systemctl", "restart", unit], dry_run=dry_run)
