from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Optional, Sequence

from .checkpoint_store import CheckpointStore, FileCheckpointStore, MemoryCheckpointStore
from .config import load_setup_config
from .context import SetupCtx
from .errors import (
    CheckpointError,
    ConfigError,
    InvalidStepSequenceError,
    PreflightError,
    StepFailedError,
    UnknownStepError,
)
from .lib.env import PATHS
from .lib.mysql import ROOT_PASSWORD_FILE
from .lib.preflight import check_root, check_ubuntu
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import Orchestrator, PipelineResult, Step
from .prompts import MYSQL_PASSWORD_FILE, confirm
from .steps import (
    ConfigureFirewallStep,
    ConfigureNginxStep,
    ConfigurePhpStep,
    CreateDirectoriesStep,
    CreateMysqlPreviewUserStep,
    CreatePreviewUserStep,
    InstallHelperScriptsStep,
    InstallPackagesStep,
    SecureMysqlStep,
    SetupSslStep,
    UpdateSystemStep,
)
from .steps.step_70_configure_nginx import TEMPLATE_NAME

logger = logging.getLogger(__name__)


DEFAULT_CHECKPOINT_PATH = PATHS.checkpoint_default

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CRITICAL = 2


def build_steps() -> List[Step]:
    return [
        UpdateSystemStep(),
        InstallPackagesStep(),
        SecureMysqlStep(),
        CreateMysqlPreviewUserStep(),
        CreatePreviewUserStep(),
        CreateDirectoriesStep(),
        ConfigureNginxStep(),
        ConfigurePhpStep(),
        SetupSslStep(),
        ConfigureFirewallStep(),
        InstallHelperScriptsStep(),
    ]


def log_summary(ctx: SetupCtx, *, checkpoint_path: str, log_path: str) -> None:
    cfg = ctx.cfg
    lines = [
        "Preview environment server setup complete",
        f"  Preview user: {cfg.preview_user}",
        f"  Preview directory: {cfg.preview_dir}",
        f"  Base domain: {cfg.domain or '(see ' + str(cfg.secret_path('.preview_domain')) + ')'}",
        f"  PHP version: {cfg.php_version}",
        "Next steps:",
        f"  1. Add the deploy SSH public key to {cfg.home_root}/{cfg.preview_user}/.ssh/authorized_keys",
        "  2. Create a wildcard DNS A record for the preview subdomains",
        "  3. Add PREVIEW_SSH_KEY, PREVIEW_HOST and PREVIEW_DB_PASSWORD to the repository secrets",
        "Important files:",
        f"  Log: {log_path}",
        f"  Checkpoint: {checkpoint_path}",
        f"  MySQL root password: {cfg.secret_path(ROOT_PASSWORD_FILE)}",
        f"  MySQL preview password: {cfg.secret_path(MYSQL_PASSWORD_FILE)}",
        f"  Nginx template: {cfg.nginx_sites_dir}/{TEMPLATE_NAME}",
        "Helper commands: preview-info, preview-cleanup <id>, preview-cleanup-old [days]",
    ]
    for line in lines:
        logger.info(line)


def format_status(orchestrator: Orchestrator) -> List[str]:
    current = orchestrator.checkpoint()
    out = [f"checkpoint: {current}"]
    for step_id in orchestrator.step_ids:
        mark = "done" if orchestrator.is_step_completed(step_id) else "pending"
        out.append(f"  [{mark:7}] {step_id}")
    return out


def run(
    *,
    checkpoint_path: str = DEFAULT_CHECKPOINT_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    config_path: Optional[str] = None,
    dry_run: bool = False,
    assume_yes: bool = False,
    reset: bool = False,
    stop_after: Optional[str] = None,
    skip_preflight: bool = False,
    verbose: bool = False,
    steps: Optional[Sequence[Step]] = None,
    store: Optional[CheckpointStore] = None,
    input_fn: Callable[[str], str] = input,
) -> PipelineResult:
    """Run the setup steps, resuming from the persisted checkpoint."""

    actual_log_path = configure_logging(log_path=log_path, verbose=verbose)

    cfg = load_setup_config(config_path)
    ctx = SetupCtx(cfg=cfg, dry_run=dry_run, input_fn=input_fn)

    if not (skip_preflight or dry_run):
        check_root()
        check_ubuntu()

    if store is None:
        store = FileCheckpointStore(checkpoint_path)
    if dry_run:
        # Dry runs plan from the real checkpoint but never advance it.
        store = MemoryCheckpointStore(store.read())

    orchestrator = Orchestrator(build_steps() if steps is None else steps, store)

    if reset:
        orchestrator.reset()

    current = orchestrator.checkpoint()
    if not (current.is_start or current.is_complete):
        logger.info("Resuming from checkpoint: %s", current)
        if not assume_yes and not confirm("Continue from last checkpoint?", input_fn=input_fn):
            logger.info("Starting fresh installation...")
            orchestrator.reset()

    try:
        result = orchestrator.run(ctx, stop_after=stop_after)
    except StepFailedError as e:
        logger.error("Installation failed at step %s: %s", e.step_id, e.cause)
        logger.error("Current checkpoint: %s", e.checkpoint)
        logger.error("Re-run to resume from step %s. Log file: %s", e.step_id, actual_log_path)
        raise

    if result.checkpoint.is_complete:
        log_summary(ctx, checkpoint_path=checkpoint_path, log_path=actual_log_path)
    else:
        logger.info("Stopped at checkpoint %s", result.checkpoint)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="preview-provisioner")
    p.add_argument("--config", default=None, help="Path to YAML setup config")
    p.add_argument("--checkpoint", default=DEFAULT_CHECKPOINT_PATH, help="Path to checkpoint file")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to setup log")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    p.add_argument("--yes", action="store_true", help="Resume from the checkpoint without asking")
    p.add_argument("--reset", action="store_true", help="Discard the checkpoint and start over")
    p.add_argument("--status", action="store_true", help="Show the checkpoint and step progress")
    p.add_argument("--stop-after", default=None, help="Stop after step (e.g. mysql_secured)")
    p.add_argument("--skip-preflight", action="store_true", help="Skip root and OS checks")
    p.add_argument("--verbose", action="store_true", help="Show command output on the console")

    args = p.parse_args(argv)

    try:
        if args.status:
            for line in format_status(Orchestrator(build_steps(), FileCheckpointStore(args.checkpoint))):
                print(line)
            return EXIT_OK

        run(
            checkpoint_path=args.checkpoint,
            log_path=args.log,
            config_path=args.config,
            dry_run=bool(args.dry_run),
            assume_yes=bool(args.yes),
            reset=bool(args.reset),
            stop_after=args.stop_after,
            skip_preflight=bool(args.skip_preflight),
            verbose=bool(args.verbose),
        )
    except StepFailedError:
        return EXIT_FAILED
    except (
        CheckpointError,
        ConfigError,
        InvalidStepSequenceError,
        PreflightError,
        UnknownStepError,
    ) as e:
        logger.error("%s", e)
        return EXIT_CRITICAL
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
