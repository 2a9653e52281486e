from __future__ import annotations

import logging
from pathlib import Path

from ..context import SetupCtx
from ..lib.command import run_cmd
from ..lib.files import write_file
from ..lib.services import enable_and_restart
from ..lib.templates import render_template
from ..prompts import get_domain

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "preview-template"


class ConfigureNginxStep:
    step_id = "nginx_configured"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg

        domain = get_domain(cfg, dry_run=ctx.dry_run, input_fn=ctx.input_fn)
        write_file(
            Path(cfg.nginx_sites_dir) / TEMPLATE_NAME,
            render_template("nginx-preview.conf", ctx.template_values(domain=domain)),
            dry_run=ctx.dry_run,
        )

        default_site = Path(cfg.nginx_enabled_dir) / "default"
        if default_site.exists() or default_site.is_symlink():
            if ctx.dry_run:
                logger.info("Would remove %s", str(default_site))
            else:
                default_site.unlink()

        # A failing config test aborts the step before nginx is restarted.
        run_cmd(["nginx", "-t"], dry_run=ctx.dry_run)
        enable_and_restart("nginx", dry_run=ctx.dry_run)
        logger.info("Nginx configured and started successfully")
