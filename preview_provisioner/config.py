from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

DEFAULT_PHP_INI = {
    "memory_limit": "256M",
    "upload_max_filesize": "100M",
    "post_max_size": "100M",
    "max_execution_time": "300",
    "max_input_time": "300",
}

DEFAULT_PHP_EXTENSIONS = [
    "fpm",
    "cli",
    "common",
    "mysql",
    "gd",
    "xml",
    "mbstring",
    "curl",
    "zip",
    "intl",
    "bcmath",
    "opcache",
    "apcu",
]


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _get(self, key: str, default: Any) -> Any:
        value = self.raw.get(key)
        return default if value is None else value

    @property
    def preview_user(self) -> str:
        return str(self._get("preview_user", "github-actions"))

    @property
    def preview_dir(self) -> str:
        return str(self._get("preview_dir", "/var/www/previews"))

    @property
    def nginx_sites_dir(self) -> str:
        return str(self._get("nginx_sites_dir", "/etc/nginx/sites-available"))

    @property
    def nginx_enabled_dir(self) -> str:
        return str(self._get("nginx_enabled_dir", "/etc/nginx/sites-enabled"))

    @property
    def php_version(self) -> str:
        return str(self._get("php_version", "8.3"))

    @property
    def php_extensions(self) -> List[str]:
        return [str(e) for e in self._get("php_extensions", DEFAULT_PHP_EXTENSIONS)]

    @property
    def php_ini(self) -> Dict[str, str]:
        overrides = dict(DEFAULT_PHP_INI)
        overrides.update({str(k): str(v) for k, v in (self.raw.get("php_ini") or {}).items()})
        return overrides

    @property
    def php_ini_path(self) -> str:
        return str(self._get("php_ini_path", f"/etc/php/{self.php_version}/fpm/php.ini"))

    @property
    def mysql_preview_user(self) -> str:
        return str(self._get("mysql_preview_user", "preview"))

    @property
    def domain(self) -> Optional[str]:
        value = self.raw.get("domain")
        return str(value) if value else None

    @property
    def certbot_email(self) -> Optional[str]:
        value = self.raw.get("certbot_email")
        return str(value) if value else None

    @property
    def home_root(self) -> str:
        return str(self._get("home_root", "/home"))

    @property
    def secrets_dir(self) -> str:
        return str(self._get("secrets_dir", "/root"))

    @property
    def bin_dir(self) -> str:
        return str(self._get("bin_dir", "/usr/local/bin"))

    @property
    def sudoers_dir(self) -> str:
        return str(self._get("sudoers_dir", "/etc/sudoers.d"))

    def secret_path(self, name: str) -> Path:
        return Path(self.secrets_dir) / name


def load_setup_config(path: Optional[str]) -> SetupConfig:
    """Load YAML config; no path means all defaults."""

    if path is None:
        return SetupConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Setup config not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"Setup config must be YAML (.yaml or .yml): {path}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load setup config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Setup config must contain a mapping/object: {path}")

    return SetupConfig(raw=raw)
