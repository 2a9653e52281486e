from __future__ import annotations

from typing import Optional, Sequence


class ProvisionError(RuntimeError):
    pass


class ConfigError(ProvisionError):
    pass


class CommandError(ProvisionError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}\n{stderr}")


class PreflightError(ProvisionError):
    pass


class InvalidStepSequenceError(ProvisionError):
    pass


class UnknownStepError(ProvisionError):
    pass


class CheckpointError(ProvisionError):
    pass


class CheckpointReadError(CheckpointError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read checkpoint {path}: {reason}")


class CheckpointWriteError(CheckpointError):
    """A step succeeded but its checkpoint could not be saved.

    last_good is the checkpoint still on disk; the next run resumes right
    after it, so `step` runs again.
    """

    def __init__(self, path: str, step: str, reason: str, last_good: Optional[str] = None) -> None:
        self.path = path
        self.step = step
        self.reason = reason
        self.last_good = last_good
        msg = f"Cannot save checkpoint {step!r} to {path}: {reason}"
        if last_good is not None:
            msg += f" (step {step} completed; saved checkpoint is still {last_good}, next run resumes at {step})"
        super().__init__(msg)


class UnknownCheckpointError(CheckpointError):
    """The persisted checkpoint names a step that is not in the sequence.

    Usually the step list changed between runs. The operator has to decide
    whether to reset; we never guess.
    """

    def __init__(self, value: str, known: Sequence[str]) -> None:
        self.value = value
        self.known = list(known)
        super().__init__(
            f"Unknown checkpoint {value!r} (known: {', '.join(self.known)}); "
            "reset the checkpoint to start over"
        )


class StepFailedError(ProvisionError):
    def __init__(self, step_id: str, checkpoint: str, cause: BaseException) -> None:
        self.step_id = step_id
        self.checkpoint = checkpoint
        self.cause = cause
        super().__init__(
            f"Step {step_id} failed: {cause} (checkpoint: {checkpoint}, "
            f"next run resumes at {step_id})"
        )
