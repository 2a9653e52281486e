from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
    secret_input: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - stdout/stderr go to the log at DEBUG.
    - dry_run logs but does not execute.
    - secret_input keeps input_text (SQL with passwords) out of the log.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))
    if input_text and not secret_input:
        logger.debug("STDIN %s", input_text.strip())

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
        timeout=timeout,
    )

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def require_commands(names: Sequence[str], *, dry_run: bool = False) -> None:
    """Raise if any of the named binaries is missing from PATH."""

    if dry_run:
        return
    missing = [n for n in names if not command_exists(n)]
    if missing:
        raise CommandError(["which", *missing], 1, f"Required command not found: {', '.join(missing)}")
