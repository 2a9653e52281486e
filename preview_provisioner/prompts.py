"""Operator inputs.

Each answer is asked once and persisted to a 0600 file under the secrets
directory, so a resumed run (or a later step) reuses it without asking.
"""

from __future__ import annotations

import getpass
import logging
import re
from pathlib import Path
from typing import Callable, Optional

from .config import SetupConfig
from .errors import ProvisionError
from .lib.files import write_file

logger = logging.getLogger(__name__)

DOMAIN_RE = re.compile(r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MIN_PASSWORD_LEN = 8

DOMAIN_FILE = ".preview_domain"
MYSQL_PASSWORD_FILE = ".preview_mysql_password"
CERTBOT_EMAIL_FILE = ".certbot_email"

InputFn = Callable[[str], str]


def _read_saved(path: Path) -> Optional[str]:
    if not path.exists():
        return None
    value = path.read_text(encoding="utf-8").strip()
    return value or None


def confirm(prompt: str, *, input_fn: InputFn = input) -> bool:
    ans = input_fn(f"{prompt} (y/n): ").strip().lower()
    return ans in ("y", "yes")


def get_domain(cfg: SetupConfig, *, dry_run: bool = False, input_fn: InputFn = input) -> str:
    path = cfg.secret_path(DOMAIN_FILE)
    saved = _read_saved(path)
    if saved:
        return saved

    domain = cfg.domain
    if domain is None:
        logger.info("Enter the base domain for preview environments")
        logger.info("Example: 'example.com' gives previews at 'preview-pr-1.example.com'")
        domain = input_fn("Domain: ").strip()

    if not DOMAIN_RE.match(domain):
        raise ProvisionError(f"Invalid domain format: {domain!r}")

    write_file(path, domain + "\n", mode=0o600, dry_run=dry_run)
    return domain


def get_mysql_password(
    cfg: SetupConfig,
    *,
    dry_run: bool = False,
    getpass_fn: InputFn = getpass.getpass,
    max_attempts: int = 5,
) -> str:
    path = cfg.secret_path(MYSQL_PASSWORD_FILE)
    saved = _read_saved(path)
    if saved:
        return saved

    for _ in range(max_attempts):
        first = getpass_fn("Enter MySQL password for preview user: ")
        second = getpass_fn("Confirm password: ")
        if first != second:
            logger.error("Passwords do not match. Try again.")
            continue
        if len(first) < MIN_PASSWORD_LEN:
            logger.warning("Password should be at least %d characters", MIN_PASSWORD_LEN)
            continue
        write_file(path, first + "\n", mode=0o600, dry_run=dry_run)
        return first

    raise ProvisionError("No valid MySQL preview password entered")


def get_certbot_email(cfg: SetupConfig, *, dry_run: bool = False, input_fn: InputFn = input) -> str:
    path = cfg.secret_path(CERTBOT_EMAIL_FILE)
    saved = _read_saved(path)
    if saved:
        return saved

    email = cfg.certbot_email or input_fn("Enter email for Let's Encrypt notifications: ").strip()
    if "@" not in email:
        raise ProvisionError(f"Invalid e-mail address: {email!r}")

    write_file(path, email + "\n", mode=0o600, dry_run=dry_run)
    return email
