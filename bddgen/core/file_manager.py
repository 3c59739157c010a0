from __future__ import annotations

from pathlib import Path
import json
from typing import Any


def ensure_dirs(base_path: str | Path, directories: list[str]) -> None:
    for rel in directories:
        (Path(base_path) / rel).mkdir(parents=True, exist_ok=True)


def write_text_file(file_path: str | Path, content: str) -> Path:
    """Write ``content`` to ``file_path``, replacing whatever was there.

    Parent directories are created on demand. The write is not atomic.
    """
    target = Path(file_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


def read_text_file(file_path: str | Path) -> str:
    return Path(file_path).read_text(encoding="utf-8")


def read_json_file(file_path: str | Path) -> Any:
    return json.loads(read_text_file(file_path))
