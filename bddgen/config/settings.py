from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TEMPERATURE: float = 0.2
    GEMINI_TOP_K: int = 1
    GEMINI_TOP_P: float = 1.0
    GEMINI_MAX_OUTPUT_TOKENS: int = 8192
    GEMINI_TIMEOUT: int = 120

    FEATURE_FILE: str = "features/novel_actions.feature"
    SELECTOR_CONFIG_FILE: str = "config.json"
    OUTPUT_DIR: str = "tests"
    OUTPUT_FILE_NAME: str = "generated_tests.spec.ts"
    SCREENSHOTS_SUBDIR: str = "screenshots"
    PLAYWRIGHT_CONFIG_FILE: str = "playwright.config.ts"

    CI: str = ""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def feature_file_path(self) -> Path:
        return Path(self.FEATURE_FILE).expanduser().resolve()

    @property
    def selector_config_path(self) -> Path:
        return Path(self.SELECTOR_CONFIG_FILE).expanduser().resolve()

    @property
    def output_dir_path(self) -> Path:
        return Path(self.OUTPUT_DIR).expanduser().resolve()

    @property
    def screenshots_dir_path(self) -> Path:
        return self.output_dir_path / self.SCREENSHOTS_SUBDIR

    @property
    def output_file_path(self) -> Path:
        return self.output_dir_path / self.OUTPUT_FILE_NAME

    @property
    def playwright_config_path(self) -> Path:
        return Path(self.PLAYWRIGHT_CONFIG_FILE).expanduser().resolve()

    @property
    def gemini_api_key_present(self) -> bool:
        return bool(str(self.GEMINI_API_KEY or "").strip())

    @property
    def gemini_generate_url(self) -> str:
        base = str(self.GEMINI_API_BASE_URL or "").strip().rstrip("/")
        return f"{base}/models/{self.GEMINI_MODEL}:generateContent"

    @property
    def is_ci(self) -> bool:
        value = str(self.CI or "").strip().lower()
        return value not in {"", "0", "false", "no"}


settings = Settings()
