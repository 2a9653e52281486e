from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default
FALLBACK_LOG_NAME = "preview-provisioner.log"

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

# Handlers installed by configure_logging(); anything else on the root logger
# (pytest's caplog, an embedding application) is left alone.
_HANDLERS: List[logging.Handler] = []


def reset_logging() -> None:
    root = logging.getLogger()
    while _HANDLERS:
        h = _HANDLERS.pop()
        root.removeHandler(h)
        h.close()


def _open_log_file(log_path: str) -> logging.FileHandler:
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        # No root, or a read-only /var/log: keep a log next to the operator.
        return logging.FileHandler(Path.cwd() / FALLBACK_LOG_NAME, encoding="utf-8")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    *,
    verbose: bool = False,
    also_console: bool = True,
) -> str:
    """Send everything to the setup log and progress to the console.

    The file gets DEBUG, which includes command stdout/stderr from run_cmd,
    so a failed step can be diagnosed after the fact. The console shows INFO
    unless verbose is set.

    Calling again replaces the previous handlers, so a new log_path takes
    effect. Returns the path actually written to.
    """

    reset_logging()

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = _open_log_file(log_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    _HANDLERS.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(logging.DEBUG if verbose else logging.INFO)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        _HANDLERS.append(console)

    for h in _HANDLERS:
        root.addHandler(h)

    chosen_path = file_handler.baseFilename
    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, log_path)
    return chosen_path
