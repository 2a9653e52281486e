import logging

from preview_provisioner.lib.command import run_cmd
from preview_provisioner.logging_utils import FALLBACK_LOG_NAME, configure_logging


def _flush():
    for h in logging.getLogger().handlers:
        h.flush()


def test_command_output_reaches_the_log_file(fake_run, tmp_path):
    log = tmp_path / "setup.log"
    fake_run.respond(["nginx", "-t"], stdout="syntax is ok")

    assert configure_logging(str(log), also_console=False) == str(log)
    run_cmd(["nginx", "-t"])
    _flush()

    text = log.read_text(encoding="utf-8")
    assert "INFO preview_provisioner.lib.command: CMD nginx -t" in text
    assert "DEBUG preview_provisioner.lib.command: STDOUT syntax is ok" in text


def test_second_call_switches_log_file(tmp_path):
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"

    configure_logging(str(first), also_console=False)
    logging.getLogger("preview_provisioner.test").info("before")
    assert configure_logging(str(second), also_console=False) == str(second)
    logging.getLogger("preview_provisioner.test").info("after")
    _flush()

    assert "after" not in first.read_text(encoding="utf-8")
    assert "after" in second.read_text(encoding="utf-8")
    file_handlers = [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename.startswith(str(tmp_path))
    ]
    assert len(file_handlers) == 1


def test_unwritable_log_falls_back_to_cwd(tmp_path, monkeypatch):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    chosen = configure_logging(str(blocker / "setup.log"), also_console=False)

    assert chosen == str(workdir / FALLBACK_LOG_NAME)
    assert (workdir / FALLBACK_LOG_NAME).exists()


def test_console_level_follows_verbose(tmp_path):
    configure_logging(str(tmp_path / "a.log"))
    console = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    assert [h.level for h in console] == [logging.INFO]

    configure_logging(str(tmp_path / "b.log"), verbose=True)
    console = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    assert [h.level for h in console] == [logging.DEBUG]
