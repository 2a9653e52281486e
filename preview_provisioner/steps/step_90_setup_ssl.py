from __future__ import annotations

import logging
from pathlib import Path

from ..context import SetupCtx
from ..lib.command import run_cmd
from ..lib.files import write_file
from ..lib.templates import render_template
from ..prompts import get_certbot_email, get_domain

logger = logging.getLogger(__name__)

RENEW_CRON = "0 3 * * * /usr/bin/certbot renew --quiet --post-hook 'systemctl reload nginx'"


def ensure_renew_cron(*, dry_run: bool = False) -> None:
    current = run_cmd(["crontab", "-l"], check=False, dry_run=dry_run)
    existing = current.stdout if current.returncode == 0 else ""
    if "certbot renew" in existing:
        logger.info("Certbot renewal already scheduled")
        return
    lines = [line for line in existing.splitlines() if line.strip()]
    lines.append(RENEW_CRON)
    run_cmd(["crontab", "-"], input_text="\n".join(lines) + "\n", dry_run=dry_run)


class SetupSslStep:
    step_id = "ssl_setup"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg
        get_domain(cfg, dry_run=ctx.dry_run, input_fn=ctx.input_fn)
        email = get_certbot_email(cfg, dry_run=ctx.dry_run, input_fn=ctx.input_fn)

        write_file(
            Path(cfg.bin_dir) / "preview-ssl.sh",
            render_template("preview-ssl.sh", {}),
            mode=0o755,
            dry_run=ctx.dry_run,
        )
        ensure_renew_cron(dry_run=ctx.dry_run)

        logger.info("SSL automation configured (certbot email: %s)", email)
