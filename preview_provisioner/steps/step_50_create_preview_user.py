from __future__ import annotations

import logging
from pathlib import Path

from ..context import SetupCtx
from ..lib.command import run_cmd
from ..lib.files import ensure_dir, write_file
from ..lib.templates import render_template

logger = logging.getLogger(__name__)


def user_exists(username: str, *, dry_run: bool = False) -> bool:
    if dry_run:
        return False
    return run_cmd(["id", username], check=False).returncode == 0


class CreatePreviewUserStep:
    step_id = "preview_user_created"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg
        user = cfg.preview_user

        if user_exists(user, dry_run=ctx.dry_run):
            logger.info("User %s already exists", user)
        else:
            run_cmd(["adduser", "--disabled-password", "--gecos", "", user], dry_run=ctx.dry_run)
            run_cmd(["usermod", "-aG", "www-data", user], dry_run=ctx.dry_run)

        ssh_dir = Path(cfg.home_root) / user / ".ssh"
        keys = ssh_dir / "authorized_keys"
        if not keys.exists():
            ensure_dir(ssh_dir, mode=0o700, dry_run=ctx.dry_run)
            write_file(keys, "", mode=0o600, dry_run=ctx.dry_run)
            run_cmd(["chown", "-R", f"{user}:{user}", str(ssh_dir)], dry_run=ctx.dry_run)

        sudoers = Path(cfg.sudoers_dir) / user
        if not sudoers.exists():
            write_file(sudoers, render_template("sudoers", ctx.template_values()), mode=0o440, dry_run=ctx.dry_run)

        logger.info("Preview user ready: %s", user)
        logger.info("SSH public key should be added to: %s", str(keys))
