from __future__ import annotations

import logging

from ..context import SetupCtx
from ..lib.command import command_exists, run_cmd
from ..lib.pkg import apt_install

logger = logging.getLogger(__name__)

UFW_RULES = [
    ["--force", "reset"],
    ["default", "deny", "incoming"],
    ["default", "allow", "outgoing"],
    ["allow", "ssh"],
    ["allow", "Nginx Full"],
    ["--force", "enable"],
]


class ConfigureFirewallStep:
    step_id = "firewall_configured"

    def run(self, ctx: SetupCtx) -> None:
        if not ctx.dry_run and not command_exists("ufw"):
            apt_install(["ufw"])

        for rule in UFW_RULES:
            run_cmd(["ufw", *rule], dry_run=ctx.dry_run)
        logger.info("Firewall configured and enabled")
