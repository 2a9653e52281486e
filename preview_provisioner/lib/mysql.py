from __future__ import annotations

from typing import Optional

from ..config import SetupConfig
from .command import CmdResult, run_cmd

ROOT_PASSWORD_FILE = ".mysql_root_password"
MY_CNF_FILE = ".my.cnf"


def sql_quote(value: str) -> str:
    """Escape a value for use inside a single-quoted MySQL string literal."""

    return value.replace("\\", "\\\\").replace("'", "\\'")


def read_root_password(cfg: SetupConfig) -> Optional[str]:
    path = cfg.secret_path(ROOT_PASSWORD_FILE)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip() or None


def run_root_sql(sql: str, *, password: Optional[str] = None, dry_run: bool = False) -> CmdResult:
    """Pipe SQL to `mysql -u root`.

    Without a password the server's socket auth is used (fresh install).
    The password travels in MYSQL_PWD so it never shows up in argv or the log.
    """

    return run_cmd(
        ["mysql", "-u", "root"],
        input_text=sql,
        env={"MYSQL_PWD": password} if password else None,
        secret_input=True,
        dry_run=dry_run,
    )
