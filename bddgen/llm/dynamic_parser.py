from __future__ import annotations

import re

FENCE = "```"
_LEADING_FENCE = re.compile(r"^```(?:[\w+-]*[ \t]*\r?\n)?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(raw: str) -> str:
    """Remove fenced-code wrappers (```typescript ... ```) around generated code.

    Fences inside the body are kept. The result never starts or ends with a
    fence marker, so calling this again on its own output is a no-op.
    """
    text = str(raw or "").strip()
    while text.startswith(FENCE) or text.endswith(FENCE):
        if text.startswith(FENCE):
            text = _LEADING_FENCE.sub("", text, count=1).strip()
        if text.endswith(FENCE):
            text = _TRAILING_FENCE.sub("", text, count=1).strip()
    return text
