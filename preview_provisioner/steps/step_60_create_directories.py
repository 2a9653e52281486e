from __future__ import annotations

import logging

from ..context import SetupCtx
from ..lib.command import run_cmd
from ..lib.files import ensure_dir

logger = logging.getLogger(__name__)


class CreateDirectoriesStep:
    step_id = "directories_created"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg
        ensure_dir(cfg.preview_dir, mode=0o755, dry_run=ctx.dry_run)
        run_cmd(["chown", f"{cfg.preview_user}:www-data", cfg.preview_dir], dry_run=ctx.dry_run)
        ensure_dir(cfg.bin_dir, dry_run=ctx.dry_run)
        logger.info("Directory structure created")
