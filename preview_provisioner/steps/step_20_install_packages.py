from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..context import SetupCtx
from ..errors import ProvisionError
from ..lib.command import require_commands, run_cmd
from ..lib.pkg import apt_install, php_packages

logger = logging.getLogger(__name__)

COMPOSER_SIG_URL = "https://composer.github.io/installer.sig"
COMPOSER_INSTALLER_URL = "https://getcomposer.org/installer"


def install_composer(bin_dir: str, *, dry_run: bool = False) -> None:
    """Install composer after verifying the installer's published checksum."""

    target = Path(bin_dir) / "composer"
    if target.exists():
        logger.info("Composer already installed at %s", str(target))
        return

    with tempfile.TemporaryDirectory() as tmp:
        setup = str(Path(tmp) / "composer-setup.php")
        expected = run_cmd(
            ["php", "-r", f"copy('{COMPOSER_SIG_URL}', 'php://stdout');"], dry_run=dry_run
        ).stdout.strip()
        run_cmd(["php", "-r", f"copy('{COMPOSER_INSTALLER_URL}', '{setup}');"], dry_run=dry_run)
        actual = run_cmd(
            ["php", "-r", f"echo hash_file('sha384', '{setup}');"], dry_run=dry_run
        ).stdout.strip()

        if expected != actual:
            raise ProvisionError("Composer installer corrupt (checksum mismatch)")

        run_cmd(
            ["php", setup, "--quiet", f"--install-dir={bin_dir}", "--filename=composer"],
            dry_run=dry_run,
        )


class InstallPackagesStep:
    step_id = "packages_installed"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg

        apt_install(["nginx"], dry_run=ctx.dry_run)
        apt_install(["mysql-server"], dry_run=ctx.dry_run)

        logger.info("Installing PHP %s and extensions", cfg.php_version)
        apt_install(php_packages(cfg.php_version, cfg.php_extensions), dry_run=ctx.dry_run)

        install_composer(cfg.bin_dir, dry_run=ctx.dry_run)

        apt_install(["certbot", "python3-certbot-nginx"], dry_run=ctx.dry_run)

        require_commands(["nginx", "mysql", "php", "composer", "certbot"], dry_run=ctx.dry_run)
        logger.info("Package installation complete")
