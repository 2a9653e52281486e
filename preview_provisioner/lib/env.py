from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    checkpoint_default: str = "/var/log/preview-setup-checkpoint"
    log_default: str = "/var/log/preview-server-setup.log"
    os_release: str = "/etc/os-release"


PATHS = Paths()
