from __future__ import annotations

import logging
from pathlib import Path

from ..context import SetupCtx
from ..lib.files import write_file
from ..lib.templates import render_template
from ..prompts import get_domain

logger = logging.getLogger(__name__)

HELPER_SCRIPTS = {
    "preview-info": "Show preview environment information",
    "preview-cleanup": "Clean up one preview: preview-cleanup <id>",
    "preview-cleanup-old": "Clean up previews older than N days (default: 7)",
}


class InstallHelperScriptsStep:
    step_id = "scripts_installed"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg
        domain = get_domain(cfg, dry_run=ctx.dry_run, input_fn=ctx.input_fn)
        values = ctx.template_values(domain=domain)

        for name, summary in HELPER_SCRIPTS.items():
            write_file(Path(cfg.bin_dir) / name, render_template(name, values), mode=0o755, dry_run=ctx.dry_run)
            logger.info("  - %s: %s", name, summary)
