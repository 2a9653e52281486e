import pytest

from preview_provisioner.checkpoint_store import (
    COMPLETE,
    START,
    FileCheckpointStore,
    MemoryCheckpointStore,
)
from preview_provisioner.errors import (
    CheckpointWriteError,
    InvalidStepSequenceError,
    StepFailedError,
    UnknownCheckpointError,
    UnknownStepError,
)
from preview_provisioner.pipeline import Orchestrator


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_empty_sequence_rejected_before_any_write():
    store = MemoryCheckpointStore()
    with pytest.raises(InvalidStepSequenceError):
        Orchestrator([], store)
    assert store.writes == []
    assert store.value is None


def test_duplicate_names_rejected(recorder):
    with pytest.raises(InvalidStepSequenceError, match="Duplicate"):
        Orchestrator(recorder.steps("a", "b", "a"), MemoryCheckpointStore())


@pytest.mark.parametrize("reserved", [START, COMPLETE])
def test_sentinel_names_rejected(recorder, reserved):
    with pytest.raises(InvalidStepSequenceError, match="reserved"):
        Orchestrator(recorder.steps("a", reserved), MemoryCheckpointStore())


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [1, 2, 5])
def test_single_run_executes_each_step_once_in_order(recorder, n):
    names = [f"s{i}" for i in range(n)]
    store = MemoryCheckpointStore()

    result = Orchestrator(recorder.steps(*names), store).run()

    assert recorder.calls == names
    assert result.ran_steps == names
    assert result.skipped_steps == []
    assert result.checkpoint.is_complete
    assert store.value == COMPLETE
    assert store.writes == names + [COMPLETE]


@pytest.mark.parametrize("k", [0, 1, 3])
def test_resume_after_failure_runs_only_remaining_steps(recorder, k):
    names = ["s0", "s1", "s2", "s3", "s4"]
    store = MemoryCheckpointStore()

    failing = recorder.steps(*names)
    failing[k].fail = True
    with pytest.raises(StepFailedError):
        Orchestrator(failing, store).run()

    recorder.calls.clear()
    result = Orchestrator(recorder.steps(*names), store).run()

    assert recorder.calls == names[k:]
    assert result.skipped_steps == names[:k]
    assert store.value == COMPLETE


def test_failure_scenario_a_b_c(recorder):
    store = MemoryCheckpointStore()
    steps = recorder.steps("a", "b", "c")
    steps[1].fail = True

    with pytest.raises(StepFailedError) as exc_info:
        Orchestrator(steps, store).run()

    err = exc_info.value
    assert err.step_id == "b"
    assert err.checkpoint == "a"
    assert isinstance(err.__cause__, RuntimeError)
    assert "boom in b" in str(err)
    assert store.value == "a"

    steps[1].fail = False
    result = Orchestrator(steps, store).run()

    assert result.ran_steps == ["b", "c"]
    assert store.value == COMPLETE
    assert recorder.calls.count("a") == 1
    assert recorder.calls == ["a", "b", "b", "c"]


def test_failure_on_first_step_leaves_start(recorder):
    store = MemoryCheckpointStore()
    steps = recorder.steps("a", "b")
    steps[0].fail = True

    with pytest.raises(StepFailedError) as exc_info:
        Orchestrator(steps, store).run()

    assert exc_info.value.checkpoint == START
    assert store.value is None
    assert store.writes == []


class UnwritableStore(MemoryCheckpointStore):
    """Accepts writes until the given step name, then fails like a full disk."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    def write(self, step):
        if step == self.fail_on:
            raise CheckpointWriteError("/var/lib/checkpoint", step, "No space left on device")
        super().write(step)


def test_checkpoint_write_failure_names_step_and_last_good(recorder):
    store = UnwritableStore(fail_on="b")

    with pytest.raises(CheckpointWriteError) as exc_info:
        Orchestrator(recorder.steps("a", "b", "c"), store).run()

    err = exc_info.value
    assert recorder.calls == ["a", "b"]
    assert err.step == "b"
    assert err.last_good == "a"
    assert "next run resumes at b" in str(err)
    assert store.value == "a"


def test_complete_write_failure_keeps_last_step(recorder):
    store = UnwritableStore(fail_on=COMPLETE)

    with pytest.raises(CheckpointWriteError) as exc_info:
        Orchestrator(recorder.steps("a"), store).run()

    assert exc_info.value.step == COMPLETE
    assert exc_info.value.last_good == "a"
    assert store.value == "a"


def test_complete_is_absorbing(recorder):
    store = MemoryCheckpointStore()
    steps = recorder.steps("a", "b")
    Orchestrator(steps, store).run()
    recorder.calls.clear()

    result = Orchestrator(steps, store).run()

    assert recorder.calls == []
    assert result.ran_steps == []
    assert result.skipped_steps == ["a", "b"]
    assert result.checkpoint.is_complete


def test_context_is_passed_to_each_step():
    seen = []

    class Step:
        step_id = "only"

        def run(self, ctx):
            seen.append(ctx)

    ctx = object()
    Orchestrator([Step()], MemoryCheckpointStore()).run(ctx)
    assert seen == [ctx]


def test_stop_after_halts_with_checkpoint_on_that_step(recorder):
    store = MemoryCheckpointStore()
    steps = recorder.steps("a", "b", "c")

    result = Orchestrator(steps, store).run(stop_after="b")

    assert recorder.calls == ["a", "b"]
    assert result.checkpoint.step == "b"
    assert store.value == "b"


def test_stop_after_unknown_step_rejected_before_running(recorder):
    store = MemoryCheckpointStore()
    with pytest.raises(UnknownStepError):
        Orchestrator(recorder.steps("a"), store).run(stop_after="nope")
    assert recorder.calls == []


# ---------------------------------------------------------------------------
# Checkpoint lookups
# ---------------------------------------------------------------------------

def test_is_step_completed_tracks_checkpoint(recorder):
    names = ["a", "b", "c"]
    store = MemoryCheckpointStore()
    orch = Orchestrator(recorder.steps(*names), store)

    assert [orch.is_step_completed(n) for n in names] == [False, False, False]

    for i, name in enumerate(names):
        store.write(name)
        assert [orch.is_step_completed(n) for n in names] == [j <= i for j in range(3)]

    store.write(COMPLETE)
    assert all(orch.is_step_completed(n) for n in names)


def test_is_step_completed_unknown_name(recorder):
    orch = Orchestrator(recorder.steps("a"), MemoryCheckpointStore())
    with pytest.raises(UnknownStepError):
        orch.is_step_completed("zzz")


def test_unknown_checkpoint_is_a_distinct_error(recorder):
    store = MemoryCheckpointStore("b_old")
    orch = Orchestrator(recorder.steps("a", "b", "c"), store)

    with pytest.raises(UnknownCheckpointError) as exc_info:
        orch.run()

    assert exc_info.value.value == "b_old"
    assert recorder.calls == []
    assert store.writes == []

    with pytest.raises(UnknownCheckpointError):
        orch.is_step_completed("a")


def test_reset_discards_checkpoint(recorder):
    store = MemoryCheckpointStore("b_old")
    orch = Orchestrator(recorder.steps("a"), store)

    orch.reset()

    assert orch.checkpoint().is_start
    orch.run()
    assert recorder.calls == ["a"]


def test_checkpoint_survives_new_process(tmp_path, recorder):
    path = str(tmp_path / "checkpoint")
    steps = recorder.steps("a", "b", "c")
    steps[2].fail = True

    with pytest.raises(StepFailedError):
        Orchestrator(steps, FileCheckpointStore(path)).run()

    # A fresh store and orchestrator stand in for a restarted process.
    orch = Orchestrator(recorder.steps("a", "b", "c"), FileCheckpointStore(path))
    assert orch.checkpoint().step == "b"
    assert orch.is_step_completed("b")
    assert not orch.is_step_completed("c")
