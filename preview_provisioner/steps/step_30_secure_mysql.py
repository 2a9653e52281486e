from __future__ import annotations

import logging
import secrets

from ..context import SetupCtx
from ..lib.files import write_file
from ..lib.mysql import MY_CNF_FILE, ROOT_PASSWORD_FILE, read_root_password, run_root_sql, sql_quote
from ..lib.services import enable_and_start

logger = logging.getLogger(__name__)


def secure_sql(root_password: str) -> str:
    return "\n".join(
        [
            "ALTER USER 'root'@'localhost' IDENTIFIED WITH mysql_native_password "
            f"BY '{sql_quote(root_password)}';",
            "DELETE FROM mysql.user WHERE User='';",
            "DELETE FROM mysql.user WHERE User='root' AND Host NOT IN ('localhost', '127.0.0.1', '::1');",
            "DROP DATABASE IF EXISTS test;",
            "DELETE FROM mysql.db WHERE Db='test' OR Db='test\\_%';",
            "FLUSH PRIVILEGES;",
            "",
        ]
    )


class SecureMysqlStep:
    step_id = "mysql_secured"

    def run(self, ctx: SetupCtx) -> None:
        cfg = ctx.cfg
        enable_and_start("mysql", dry_run=ctx.dry_run)

        # Reuse a password from an interrupted attempt: ALTER USER may already
        # have applied it.
        saved = read_root_password(cfg)
        if saved:
            root_password = saved
        else:
            root_password = secrets.token_urlsafe(32)
            write_file(cfg.secret_path(ROOT_PASSWORD_FILE), root_password + "\n", mode=0o600, dry_run=ctx.dry_run)

        run_root_sql(secure_sql(root_password), password=saved, dry_run=ctx.dry_run)

        write_file(
            cfg.secret_path(MY_CNF_FILE),
            f"[client]\nuser=root\npassword={root_password}\n",
            mode=0o600,
            dry_run=ctx.dry_run,
        )
        logger.info("MySQL secured successfully")
