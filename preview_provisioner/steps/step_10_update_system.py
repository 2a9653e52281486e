from __future__ import annotations

import logging

from ..context import SetupCtx
from ..lib.pkg import apt_install, apt_update, apt_upgrade

logger = logging.getLogger(__name__)

BASE_PACKAGES = [
    "curl",
    "wget",
    "git",
    "unzip",
    "software-properties-common",
    "apt-transport-https",
    "ca-certificates",
    "gnupg",
    "lsb-release",
]


class UpdateSystemStep:
    step_id = "system_updated"

    def run(self, ctx: SetupCtx) -> None:
        apt_update(dry_run=ctx.dry_run)
        apt_upgrade(dry_run=ctx.dry_run)
        apt_install(BASE_PACKAGES, dry_run=ctx.dry_run)
        logger.info("System update complete")
