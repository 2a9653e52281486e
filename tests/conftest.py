import subprocess

import pytest

from preview_provisioner.config import SetupConfig
from preview_provisioner.context import SetupCtx
from preview_provisioner.logging_utils import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


class Recorder:
    """Steps that log their invocations into a shared list."""

    def __init__(self):
        self.calls = []

    def step(self, step_id, fail=False):
        recorder = self

        class _Step:
            def __init__(self):
                self.step_id = step_id
                self.fail = fail

            def run(self, ctx):
                recorder.calls.append(self.step_id)
                if self.fail:
                    raise RuntimeError(f"boom in {self.step_id}")

        return _Step()

    def steps(self, *names):
        return [self.step(n) for n in names]


@pytest.fixture
def recorder():
    return Recorder()


class FakeRun:
    def __init__(self):
        self.argvs = []
        self.inputs = []
        self.envs = []
        self.responses = {}

    def respond(self, argv_prefix, returncode=0, stdout="", stderr=""):
        self.responses[tuple(argv_prefix)] = (returncode, stdout, stderr)

    def __call__(self, argv, input=None, env=None, **kwargs):
        self.argvs.append(list(argv))
        self.inputs.append(input)
        self.envs.append(env)
        for prefix, (rc, out, err) in self.responses.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return subprocess.CompletedProcess(argv, rc, out, err)
        return subprocess.CompletedProcess(argv, 0, "", "")

    def ran(self, *argv_prefix):
        return any(a[: len(argv_prefix)] == list(argv_prefix) for a in self.argvs)


@pytest.fixture
def fake_run(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr("preview_provisioner.lib.command.subprocess.run", fake)
    monkeypatch.setattr("preview_provisioner.lib.command.shutil.which", lambda name: f"/usr/bin/{name}")
    return fake


@pytest.fixture
def host_cfg(tmp_path):
    return SetupConfig(
        raw={
            "preview_dir": str(tmp_path / "previews"),
            "nginx_sites_dir": str(tmp_path / "nginx" / "sites-available"),
            "nginx_enabled_dir": str(tmp_path / "nginx" / "sites-enabled"),
            "home_root": str(tmp_path / "home"),
            "php_ini_path": str(tmp_path / "php.ini"),
            "secrets_dir": str(tmp_path / "secrets"),
            "bin_dir": str(tmp_path / "bin"),
            "sudoers_dir": str(tmp_path / "sudoers.d"),
            "domain": "example.com",
            "certbot_email": "ops@example.com",
        }
    )


@pytest.fixture
def ctx(host_cfg):
    return SetupCtx(
        cfg=host_cfg,
        input_fn=lambda prompt: pytest.fail(f"unexpected prompt: {prompt}"),
        getpass_fn=lambda prompt: "s3cret-password",
    )
