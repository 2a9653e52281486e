from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .checkpoint_store import COMPLETE, SENTINELS, START, Checkpoint, CheckpointStore
from .errors import (
    CheckpointWriteError,
    InvalidStepSequenceError,
    StepFailedError,
    UnknownCheckpointError,
    UnknownStepError,
)

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: Any) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    checkpoint: Checkpoint
    ran_steps: List[str]
    skipped_steps: List[str]


class Orchestrator:
    """Run a fixed step sequence once, resuming from the persisted checkpoint.

    The sequence is the contract: adding, removing or reordering steps after
    a partial run is the operator's responsibility (reset the checkpoint).
    One run per host at a time; the checkpoint file is not locked.
    """

    def __init__(self, steps: Sequence[Step], store: CheckpointStore) -> None:
        if not steps:
            raise InvalidStepSequenceError("Step sequence is empty")

        ordinals: Dict[str, int] = {START: -1}
        for i, step in enumerate(steps):
            name = step.step_id
            if name in SENTINELS:
                raise InvalidStepSequenceError(f"Step name {name!r} is reserved")
            if name in ordinals:
                raise InvalidStepSequenceError(f"Duplicate step name {name!r}")
            ordinals[name] = i
        ordinals[COMPLETE] = len(steps)

        self.steps: tuple = tuple(steps)
        self.store = store
        self._ordinals = ordinals

    @property
    def step_ids(self) -> List[str]:
        return [s.step_id for s in self.steps]

    def checkpoint(self) -> Checkpoint:
        value = self.store.read()
        if value is None:
            return Checkpoint(START)
        if value not in self._ordinals:
            raise UnknownCheckpointError(value, list(self._ordinals))
        return Checkpoint(value)

    def ordinal(self, name: str) -> int:
        try:
            return self._ordinals[name]
        except KeyError:
            raise UnknownStepError(f"Unknown step {name!r}") from None

    def is_step_completed(self, name: str) -> bool:
        target = self.ordinal(name)
        return target <= self._ordinals[self.checkpoint().step]

    def reset(self) -> None:
        logger.info("Discarding checkpoint; next run starts from scratch")
        self.store.clear()

    def _commit(self, name: str, last_good: Checkpoint) -> None:
        try:
            self.store.write(name)
        except CheckpointWriteError as e:
            raise CheckpointWriteError(e.path, name, e.reason, last_good=last_good.step) from e

    def run(self, ctx: Any = None, *, stop_after: Optional[str] = None) -> PipelineResult:
        """Run pending steps in order, committing the checkpoint after each."""

        if stop_after is not None:
            self.ordinal(stop_after)

        current = self.checkpoint()
        if current.is_complete:
            logger.info("Checkpoint is %s; nothing to do", COMPLETE)
            return PipelineResult(checkpoint=current, ran_steps=[], skipped_steps=self.step_ids)

        if not current.is_start:
            logger.info("Resuming from checkpoint: %s", current)

        done_through = self._ordinals[current.step]
        ran: List[str] = []
        skipped: List[str] = []

        for i, step in enumerate(self.steps):
            if i <= done_through:
                logger.info("Skipping step %s (already completed)", step.step_id)
                skipped.append(step.step_id)
                if step.step_id == stop_after:
                    logger.info("Stopping after %s", stop_after)
                    return PipelineResult(checkpoint=current, ran_steps=ran, skipped_steps=skipped)
                continue

            logger.info("Running step %s", step.step_id)
            try:
                step.run(ctx)
            except Exception as e:
                raise StepFailedError(step.step_id, current.step, e) from e

            self._commit(step.step_id, current)
            current = Checkpoint(step.step_id)
            ran.append(step.step_id)

            if stop_after is not None and step.step_id == stop_after:
                logger.info("Stopping after %s", stop_after)
                return PipelineResult(checkpoint=current, ran_steps=ran, skipped_steps=skipped)

        self._commit(COMPLETE, current)
        return PipelineResult(checkpoint=Checkpoint(COMPLETE), ran_steps=ran, skipped_steps=skipped)
