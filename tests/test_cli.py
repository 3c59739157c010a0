from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from bddgen import cli
from bddgen.config.settings import settings
from bddgen.core import generator


def _generate_args(workspace) -> list[str]:
    return [
        "generate",
        "--feature",
        str(workspace["feature"]),
        "--config",
        str(workspace["config"]),
        "--output",
        str(workspace["output"]),
    ]


def test_missing_api_key_exits_non_zero_without_network(monkeypatch: pytest.MonkeyPatch, workspace):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    calls: list[str] = []

    async def _invoke(prompt: str, **kwargs):
        calls.append(prompt)
        raise AssertionError("network call attempted")

    monkeypatch.setattr(generator, "invoke_gemini", _invoke)

    assert cli.main(_generate_args(workspace)) == cli.EXIT_MISSING_CREDENTIAL
    assert calls == []
    assert not workspace["output"].exists()


def test_generate_success(monkeypatch: pytest.MonkeyPatch, workspace, make_response, generated_spec, capsys):
    async def _invoke(prompt: str, **kwargs):
        _ = (prompt, kwargs)
        return make_response(generated_spec)

    monkeypatch.setattr(generator, "invoke_gemini", _invoke)

    assert cli.main(_generate_args(workspace)) == cli.EXIT_OK
    assert workspace["output"].read_text(encoding="utf-8") == generated_spec
    assert "generated successfully" in capsys.readouterr().out


def test_generate_empty_response_exits_with_no_output_code(monkeypatch: pytest.MonkeyPatch, workspace, make_response):
    async def _invoke(prompt: str, **kwargs):
        _ = (prompt, kwargs)
        return make_response("")

    monkeypatch.setattr(generator, "invoke_gemini", _invoke)

    assert cli.main(_generate_args(workspace)) == cli.EXIT_NO_OUTPUT
    assert not workspace["output"].exists()


def test_runner_config_print(capsys):
    assert cli.main(["runner-config", "--print"]) == cli.EXIT_OK
    assert "retries: process.env.CI ? 2 : 0," in capsys.readouterr().out


def test_runner_config_write(tmp_path):
    target = tmp_path / "playwright.config.ts"
    assert cli.main(["runner-config", "--output", str(target)]) == cli.EXIT_OK
    assert "reporter: 'html'," in target.read_text(encoding="utf-8")


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])


def test_missing_api_key_diagnostic_goes_to_stderr(tmp_path):
    repo_root = Path(__file__).resolve().parents[1]
    env = {**os.environ, "GEMINI_API_KEY": "", "LOG_LEVEL": "INFO", "PYTHONPATH": str(repo_root)}
    completed = subprocess.run(
        [sys.executable, "-m", "bddgen.cli", "generate"],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert completed.returncode == cli.EXIT_MISSING_CREDENTIAL
    assert "generate.missing_api_key" in completed.stderr
    assert completed.stdout == ""


def test_main_routes_logging_to_stderr(monkeypatch: pytest.MonkeyPatch):
    streams: list[object] = []
    monkeypatch.setattr(cli, "configure_logging", lambda level, stream=None: streams.append(stream))

    assert cli.main(["runner-config", "--print"]) == cli.EXIT_OK
    assert streams == [sys.stderr]


def test_runner_config_resolved_for_ci(monkeypatch: pytest.MonkeyPatch, capsys):
    monkeypatch.setattr(settings, "CI", "true")
    assert cli.main(["runner-config", "--resolved"]) == cli.EXIT_OK
    resolved = json.loads(capsys.readouterr().out)
    assert (resolved["retries"], resolved["workers"], resolved["forbidOnly"]) == (2, 1, True)
