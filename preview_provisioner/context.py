from __future__ import annotations

import getpass
from dataclasses import dataclass, field
from typing import Callable

from .config import SetupConfig


@dataclass(frozen=True)
class SetupCtx:
    cfg: SetupConfig = field(default_factory=SetupConfig)
    dry_run: bool = False
    input_fn: Callable[[str], str] = input
    getpass_fn: Callable[[str], str] = getpass.getpass

    def template_values(self, **extra: object) -> dict:
        values = {
            "preview_user": self.cfg.preview_user,
            "preview_dir": self.cfg.preview_dir,
            "php_version": self.cfg.php_version,
            "nginx_sites_dir": self.cfg.nginx_sites_dir,
            "bin_dir": self.cfg.bin_dir,
        }
        values.update(extra)
        return values
