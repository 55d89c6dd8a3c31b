import subprocess

import pytest

from compose_monitor import deploy
from compose_monitor.deploy import build_command, run_compose
from compose_monitor.errors import InvocationError


def test_build_command_puts_manifest_before_forwarded_args():
    cmd = build_command("stack.yml", ["up", "-d"])
    assert cmd == ["docker", "compose", "-f", "stack.yml", "up", "-d"]


def test_build_command_without_forwarded_args():
    assert build_command("stack.yml", [], binary="podman") == [
        "podman",
        "compose",
        "-f",
        "stack.yml",
    ]


def test_run_compose_inherits_stdio_and_returns_exit_code(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["kwargs"] = kwargs
        return subprocess.CompletedProcess(cmd, 3)

    monkeypatch.setattr(deploy.subprocess, "run", fake_run)

    assert run_compose("stack.yml", ["up"]) == 3
    assert seen["cmd"] == ["docker", "compose", "-f", "stack.yml", "up"]
    # no capture: stdout/stderr stay inherited
    assert "stdout" not in seen["kwargs"]
    assert "stderr" not in seen["kwargs"]
    assert "capture_output" not in seen["kwargs"]


def test_missing_binary_raises_invocation_error():
    with pytest.raises(InvocationError) as exc:
        run_compose("stack.yml", ["up"], binary="definitely-not-a-real-binary-xyz")

    assert exc.value.details["command"][0] == "definitely-not-a-real-binary-xyz"


def test_permission_denied_raises_invocation_error(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise PermissionError("permission denied")

    monkeypatch.setattr(deploy.subprocess, "run", fake_run)

    with pytest.raises(InvocationError):
        run_compose("stack.yml", [])
