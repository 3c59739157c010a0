from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _GeminiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Part(_GeminiModel):
    text: str | None = None


class Content(_GeminiModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)


class SafetyRating(_GeminiModel):
    category: str = ""
    probability: str = ""
    blocked: bool = False


class Candidate(_GeminiModel):
    content: Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")
    safety_ratings: list[SafetyRating] = Field(default_factory=list, alias="safetyRatings")


class PromptFeedback(_GeminiModel):
    block_reason: str | None = Field(default=None, alias="blockReason")
    safety_ratings: list[SafetyRating] = Field(default_factory=list, alias="safetyRatings")


class UsageMetadata(_GeminiModel):
    prompt_token_count: int = Field(default=0, alias="promptTokenCount")
    candidates_token_count: int = Field(default=0, alias="candidatesTokenCount")
    total_token_count: int = Field(default=0, alias="totalTokenCount")


class GeminiResponse(_GeminiModel):
    """Subset of the ``generateContent`` response body that the generator reads."""

    candidates: list[Candidate] = Field(default_factory=list)
    prompt_feedback: PromptFeedback | None = Field(default=None, alias="promptFeedback")
    usage_metadata: UsageMetadata | None = Field(default=None, alias="usageMetadata")

    def text(self) -> str:
        if not self.candidates:
            return ""
        content = self.candidates[0].content
        if content is None:
            return ""
        return "".join(part.text or "" for part in content.parts)

    def finish_reason(self) -> str | None:
        if not self.candidates:
            return None
        return self.candidates[0].finish_reason

    def diagnostics(self) -> dict[str, Any]:
        details: dict[str, Any] = {}
        if self.prompt_feedback is not None:
            details["prompt_feedback"] = self.prompt_feedback.model_dump(by_alias=True, exclude_none=True)
        finish_reason = self.finish_reason()
        if self.candidates and finish_reason != "STOP":
            details["finish_reason"] = finish_reason
            details["safety_ratings"] = [
                rating.model_dump(by_alias=True) for rating in self.candidates[0].safety_ratings
            ]
        return details
