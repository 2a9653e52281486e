from __future__ import annotations

import logging

from ..context import SetupCtx
from ..lib.command import run_cmd
from ..lib.mysql import read_root_password, run_root_sql, sql_quote
from ..prompts import get_mysql_password

logger = logging.getLogger(__name__)


def create_user_sql(user: str, password: str) -> str:
    account = f"'{sql_quote(user)}'@'localhost'"
    return "\n".join(
        [
            f"CREATE USER IF NOT EXISTS {account} IDENTIFIED BY '{sql_quote(password)}';",
            f"GRANT ALL PRIVILEGES ON `preview\\_%`.* TO {account};",
            "FLUSH PRIVILEGES;",
            "",
        ]
    )


class CreateMysqlPreviewUserStep:
    step_id = "mysql_user_created"

    def run(self, ctx: SetupCtx) -> None:
        user = ctx.cfg.mysql_preview_user
        password = get_mysql_password(ctx.cfg, dry_run=ctx.dry_run, getpass_fn=ctx.getpass_fn)

        # Root uses mysql_native_password once mysql_secured has run.
        run_root_sql(
            create_user_sql(user, password),
            password=read_root_password(ctx.cfg),
            dry_run=ctx.dry_run,
        )

        # Connection test; password via env so it stays out of the process list.
        run_cmd(
            ["mysql", "-u", user, "-e", "SELECT 1;"],
            env={"MYSQL_PWD": password},
            dry_run=ctx.dry_run,
        )
        logger.info("MySQL preview user %s created and tested", user)
