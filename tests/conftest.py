from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from bddgen.config.settings import settings
from bddgen.schemas.gemini import GeminiResponse

FEATURE_TEXT = """Feature: Browse novels by genre

  Scenario: View genre list
    Given I am on the homepage
    When I click on the 'Genres' tab
    Then I should see a list of available genres like 'Fantasy', 'Romance', 'Sci-fi'
"""

SELECTOR_CONFIG: dict[str, Any] = {
    "baseUrl": "https://novels.example.test/",
    "tagsUrl": "https://novels.example.test/genre/Fantasy",
    "xpaths": {
        "genresTabLink": "//*[@id='nav']/div/div[2]/ul/li[2]/a",
        "genreListPanel": "//*[@id='nav']/div/div[2]/ul/li[2]/div",
    },
}

GENERATED_SPEC = """import { test, expect } from '@playwright/test';
import config from '../config.json';

test('View genre list', async ({ page }) => {
  await page.goto(config.baseUrl);
  const genresTabLocator = page.locator(`xpath=${config.xpaths.genresTabLink}`);
  await expect(genresTabLocator).toBeVisible();
  await genresTabLocator.click();
  const genrePanelLocator = page.locator(`xpath=${config.xpaths.genreListPanel}`);
  await expect(genrePanelLocator).toBeVisible();
  await page.screenshot({ path: 'tests/screenshots/view_genres_list.png', fullPage: true });
});"""


def gemini_body(text: str | None, finish_reason: str = "STOP", **extra: Any) -> dict[str, Any]:
    candidate: dict[str, Any] = {"finishReason": finish_reason, "safetyRatings": []}
    if text is not None:
        candidate["content"] = {"role": "model", "parts": [{"text": text}]}
    body: dict[str, Any] = {"candidates": [candidate]}
    body.update(extra)
    return body


def gemini_response(text: str | None, finish_reason: str = "STOP", **extra: Any) -> GeminiResponse:
    return GeminiResponse.model_validate(gemini_body(text, finish_reason, **extra))


@pytest.fixture(autouse=True)
def _stub_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test_gemini_key")
    monkeypatch.setattr(settings, "CI", "")


@pytest.fixture()
def workspace(tmp_path: Path) -> dict[str, Path]:
    feature = tmp_path / "features" / "novel_actions.feature"
    feature.parent.mkdir(parents=True)
    feature.write_text(FEATURE_TEXT, encoding="utf-8")
    config = tmp_path / "config.json"
    config.write_text(json.dumps(SELECTOR_CONFIG, indent=2), encoding="utf-8")
    return {
        "root": tmp_path,
        "feature": feature,
        "config": config,
        "output": tmp_path / "tests" / "generated_tests.spec.ts",
    }


@pytest.fixture()
def make_body():
    return gemini_body


@pytest.fixture()
def make_response():
    return gemini_response


@pytest.fixture()
def generated_spec() -> str:
    return GENERATED_SPEC


@pytest.fixture()
def selector_config() -> dict[str, Any]:
    return json.loads(json.dumps(SELECTOR_CONFIG))


@pytest.fixture()
def feature_text() -> str:
    return FEATURE_TEXT
