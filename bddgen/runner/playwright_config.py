from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from bddgen.config.settings import settings
from bddgen.core.file_manager import write_text_file
from bddgen.core.logger import get_logger

logger = get_logger(__name__)

CaptureMode = Literal["on", "off", "retain-on-failure", "on-first-retry", "only-on-failure"]


class CaptureOptions(BaseModel):
    trace: CaptureMode = "on"
    screenshot: CaptureMode = "on"
    video: CaptureMode = "on"


class BrowserProject(BaseModel):
    name: str = "chromium"
    device: str = "Desktop Chrome"


class RunnerConfig(BaseModel):
    """Settings handed to the Playwright test runner.

    The CI-dependent values are stored as a policy: outside CI the runner
    gets no retries and picks its own worker count. ``ci_workers=None``
    leaves the worker count to the runner in CI too.
    """

    test_dir: str = "./tests"
    fully_parallel: bool = True
    forbid_only_on_ci: bool = True
    ci_retries: int = 2
    ci_workers: int | None = 1
    reporter: str = "html"
    use: CaptureOptions = Field(default_factory=CaptureOptions)
    projects: list[BrowserProject] = Field(default_factory=lambda: [BrowserProject()])

    def resolved(self, ci: bool) -> dict[str, Any]:
        """Effective settings the runner will apply for the given CI flag."""
        return {
            "testDir": self.test_dir,
            "fullyParallel": self.fully_parallel,
            "forbidOnly": self.forbid_only_on_ci and ci,
            "retries": self.ci_retries if ci else 0,
            "workers": self.ci_workers if ci else None,
            "reporter": self.reporter,
            "use": self.use.model_dump(),
            "projects": [project.model_dump() for project in self.projects],
        }


def resolve_runner_settings(config: RunnerConfig | None = None, ci: bool | None = None) -> dict[str, Any]:
    return (config or RunnerConfig()).resolved(settings.is_ci if ci is None else ci)


def _ts(value: Any) -> str:
    if value is None:
        return "undefined"
    return json.dumps(value).replace('"', "'")


def render_playwright_config(config: RunnerConfig | None = None) -> str:
    """Render ``playwright.config.ts``.

    The CI-dependent fields are written as ``process.env.CI`` expressions so a
    single file serves local and CI runs.
    """
    config = config or RunnerConfig()
    forbid_only = "!!process.env.CI" if config.forbid_only_on_ci else "false"
    projects = "\n".join(
        "    {\n"
        f"      name: {_ts(project.name)},\n"
        f"      use: {{ ...devices[{_ts(project.device)}] }},\n"
        "    },"
        for project in config.projects
    )
    return (
        "import { defineConfig, devices } from '@playwright/test';\n"
        "\n"
        "export default defineConfig({\n"
        f"  testDir: {_ts(config.test_dir)},\n"
        f"  fullyParallel: {_ts(config.fully_parallel)},\n"
        f"  forbidOnly: {forbid_only},\n"
        f"  retries: process.env.CI ? {_ts(config.ci_retries)} : 0,\n"
        f"  workers: process.env.CI ? {_ts(config.ci_workers)} : undefined,\n"
        f"  reporter: {_ts(config.reporter)},\n"
        "\n"
        "  use: {\n"
        f"    trace: {_ts(config.use.trace)},\n"
        f"    screenshot: {_ts(config.use.screenshot)},\n"
        f"    video: {_ts(config.use.video)},\n"
        "  },\n"
        "\n"
        "  projects: [\n"
        f"{projects}\n"
        "  ],\n"
        "});\n"
    )


def write_playwright_config(path: str | Path | None = None, config: RunnerConfig | None = None) -> Path:
    target = Path(path) if path is not None else settings.playwright_config_path
    write_text_file(target, render_playwright_config(config))
    logger.info("runner_config.written", path=str(target))
    return target
