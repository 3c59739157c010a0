from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import httpx

from bddgen.config.settings import settings
from bddgen.core.file_manager import ensure_dirs, read_json_file, read_text_file, write_text_file
from bddgen.core.logger import get_logger
from bddgen.llm.dynamic_parser import strip_code_fences
from bddgen.llm.gemini_client import (
    GenerationFailedError,
    assert_generation_ok,
    invoke_gemini,
    resolve_api_key,
)
from bddgen.prompts.playwright_tests import build_prompt

logger = get_logger(__name__)

GenerationStatus = Literal["written", "empty", "error"]


@dataclass
class GenerationResult:
    status: GenerationStatus
    output_path: Path | None = None
    diagnostics: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "written"


def prepare_output_dirs(output_path: Path) -> None:
    ensure_dirs(output_path.parent, [settings.SCREENSHOTS_SUBDIR])


async def generate_tests(
    *,
    feature_path: str | Path | None = None,
    selector_config_path: str | Path | None = None,
    output_path: str | Path | None = None,
    api_key: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> GenerationResult:
    """Turn the feature file into a Playwright spec file via one Gemini call.

    A missing credential raises ``MissingCredentialError`` before any file or
    network access. Every later failure is logged and reported through the
    returned ``GenerationResult``; in that case no output file is written.
    """
    key = resolve_api_key(api_key)
    feature_file = Path(feature_path) if feature_path is not None else settings.feature_file_path
    config_file = Path(selector_config_path) if selector_config_path is not None else settings.selector_config_path
    target = Path(output_path) if output_path is not None else settings.output_file_path

    try:
        feature_text = read_text_file(feature_file)
        selector_config = read_json_file(config_file)
        prompt = build_prompt(feature_text, selector_config)

        logger.info("generate.request", feature_file=str(feature_file), config_file=str(config_file))
        response = await invoke_gemini(prompt, api_key=key, client=client)

        try:
            generated = strip_code_fences(assert_generation_ok(response))
        except GenerationFailedError as exc:
            logger.error("generate.empty_response", reason=str(exc), **exc.diagnostics)
            return GenerationResult(status="empty", diagnostics=exc.diagnostics, error=str(exc))
        if not generated:
            diagnostics = response.diagnostics()
            logger.error("generate.empty_response", reason="only code fences returned", **diagnostics)
            return GenerationResult(status="empty", diagnostics=diagnostics, error="only code fences returned")

        prepare_output_dirs(target)
        write_text_file(target, generated)
    except Exception as exc:
        logger.exception("generate.error", error=str(exc))
        return GenerationResult(status="error", error=str(exc))

    logger.info("generate.written", output_path=str(target), content_len=len(generated))
    return GenerationResult(status="written", output_path=target)
