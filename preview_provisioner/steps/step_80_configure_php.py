from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping

from ..context import SetupCtx
from ..errors import ProvisionError
from ..lib.files import backup_once, write_file
from ..lib.services import enable_and_restart

logger = logging.getLogger(__name__)

OPCACHE_MARKER = "; preview-provisioner opcache"
OPCACHE_BLOCK = "\n".join(
    [
        "",
        OPCACHE_MARKER,
        "opcache.memory_consumption=128",
        "opcache.interned_strings_buffer=8",
        "opcache.max_accelerated_files=4000",
        "opcache.revalidate_freq=60",
        "",
    ]
)


def apply_ini_overrides(text: str, overrides: Mapping[str, str]) -> str:
    """Rewrite `key = value` lines in place; keys absent from the file are appended."""

    for key, value in overrides.items():
        pattern = re.compile(rf"^{re.escape(key)}\s*=.*$", re.MULTILINE)
        line = f"{key} = {value}"
        if pattern.search(text):
            text = pattern.sub(lambda _m: line, text)
        else:
            text = text.rstrip("\n") + "\n" + line + "\n"

    if OPCACHE_MARKER not in text:
        text = text.rstrip("\n") + "\n" + OPCACHE_BLOCK
    return text


class ConfigurePhpStep:
    step_id = "php_configured"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg
        ini = Path(cfg.php_ini_path)

        if ctx.dry_run:
            logger.info("Would apply %s to %s", cfg.php_ini, str(ini))
        else:
            if not ini.exists():
                raise ProvisionError(f"PHP config not found: {ini}")
            backup_once(ini)
            write_file(ini, apply_ini_overrides(ini.read_text(encoding="utf-8"), cfg.php_ini))

        enable_and_restart(f"php{cfg.php_version}-fpm", dry_run=ctx.dry_run)
        logger.info("PHP configured successfully")
