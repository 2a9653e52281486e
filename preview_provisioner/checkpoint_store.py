from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .errors import CheckpointReadError, CheckpointWriteError

logger = logging.getLogger(__name__)

START = "start"
COMPLETE = "complete"
SENTINELS = (START, COMPLETE)


@dataclass(frozen=True)
class Checkpoint:
    """Name of the last successfully completed step (or a sentinel)."""

    step: str = START

    @property
    def is_start(self) -> bool:
        return self.step == START

    @property
    def is_complete(self) -> bool:
        return self.step == COMPLETE

    def __str__(self) -> str:
        return self.step


class CheckpointStore(Protocol):
    """Durable home of the checkpoint value.

    read() returns None when nothing has been persisted yet.
    """

    def read(self) -> Optional[str]:
        ...

    def write(self, step: str) -> None:
        ...

    def clear(self) -> None:
        ...


class FileCheckpointStore:
    """One line of text at a well-known path; a missing file means start."""

    def __init__(self, path: str) -> None:
        self.path = path

    def read(self) -> Optional[str]:
        p = Path(self.path)
        if not p.exists():
            return None
        try:
            text = p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CheckpointReadError(self.path, str(e)) from e

        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if len(lines) != 1:
            raise CheckpointReadError(self.path, f"expected one step name, found {len(lines)} lines")
        return lines[0]

    def write(self, step: str) -> None:
        p = Path(self.path)
        tmp = p.with_name(p.name + ".tmp")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                f.write(step + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, p)
        except OSError as e:
            raise CheckpointWriteError(self.path, step, str(e)) from e
        logger.info("Checkpoint saved: %s", step)

    def clear(self) -> None:
        p = Path(self.path)
        if p.exists():
            p.unlink()
            logger.info("Checkpoint cleared: %s", self.path)


class MemoryCheckpointStore:
    def __init__(self, initial: Optional[str] = None) -> None:
        self.value = initial
        self.writes: list[str] = []

    def read(self) -> Optional[str]:
        return self.value

    def write(self, step: str) -> None:
        self.value = step
        self.writes.append(step)

    def clear(self) -> None:
        self.value = None
