"""AI completion capability, prompt building and response parsing.

The generator depends only on :class:`CompletionCapability`, a single
``generate_completion`` coroutine. Transport, authentication and retries are
the adapter's business. Responses are untrusted text: they are validated
against :class:`AIRecommendationPayload` and anything that does not fit
raises :class:`ParsingError`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from insightflow.errors import ParsingError
from insightflow.models.context import RecommendationGenerationContext
from insightflow.models.recommendation import RecommendationOpportunity

logger = logging.getLogger(__name__)

_FENCED = re.compile(r"^```[A-Za-z]*\s*\n(?P<body>.*)\n\s*```$", re.DOTALL)


@runtime_checkable
class CompletionCapability(Protocol):
    """Anything that can turn a prompt into text."""

    async def generate_completion(
        self, prompt: str, options: Optional[Dict[str, Any]] = None
    ) -> str:
        """Generate a completion.

        Args:
            prompt: The full prompt
            options: Generation options such as ``max_tokens`` and ``temperature``

        Returns:
            Raw completion text
        """
        ...


class LLMClient(Protocol):
    """Synchronous text generation client."""

    def generate(self, prompt: str, **kwargs) -> str:
        ...


class LLMClientCompletionAdapter:
    """Expose a synchronous :class:`LLMClient` as a completion capability.

    Calls run in a worker thread so they do not block the event loop.
    """

    def __init__(self, client: LLMClient) -> None:
        self._client = client

    async def generate_completion(
        self, prompt: str, options: Optional[Dict[str, Any]] = None
    ) -> str:
        return await asyncio.to_thread(self._client.generate, prompt, **(options or {}))


class AIRecommendationPayload(BaseModel):
    """Expected shape of an AI-generated recommendation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    description: str
    action_steps: List[str] = Field(alias="actionSteps")
    risks: List[str]
    success_metrics: List[str] = Field(alias="successMetrics")

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("action_steps", "risks", "success_metrics")
    @classmethod
    def _drop_blank_items(cls, value: List[str]) -> List[str]:
        return [item.strip() for item in value if item.strip()]


def build_recommendation_prompt(
    opportunity: RecommendationOpportunity,
    context: RecommendationGenerationContext,
) -> str:
    """Prompt asking for a single recommendation as a JSON object."""
    factors = json.dumps(context.contextual_factors.model_dump(mode="json"), sort_keys=True)
    preferences = context.user_preferences
    return f"""Generate a specific, actionable recommendation based on this insight:

Insight: {opportunity.insight.description}
Type: {opportunity.opportunity_type.value}
Category: {opportunity.insight.category.value}
Reasoning: {opportunity.reasoning}
Context: {factors}
Preferred tone: {preferences.preferred_directness.value}
Detail level: {preferences.detail_level}

Please provide:
1. A clear, specific title
2. A detailed description
3. 3-5 concrete action steps
4. Potential risks and mitigation strategies
5. Success metrics

Respond with JSON only, using exactly this structure:
{{
  "title": "...",
  "description": "...",
  "actionSteps": ["...", "..."],
  "risks": ["...", "..."],
  "successMetrics": ["...", "..."]
}}"""


def _strip_code_fence(text: str) -> str:
    match = _FENCED.match(text)
    return match.group("body") if match else text


def parse_ai_response(response: str) -> AIRecommendationPayload:
    """Validate a completion against :class:`AIRecommendationPayload`.

    Only a surrounding markdown code fence is tolerated; prose around the
    JSON, missing keys or wrong types raise ParsingError.
    """
    if not isinstance(response, str) or not response.strip():
        raise ParsingError("AI response was empty", raw_response=response or "")

    body = _strip_code_fence(response.strip())
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ParsingError(f"AI response is not valid JSON: {exc.msg}", raw_response=response) from exc

    if not isinstance(data, dict):
        raise ParsingError(
            f"AI response must be a JSON object, got {type(data).__name__}",
            raw_response=response,
        )

    try:
        return AIRecommendationPayload.model_validate(data)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise ParsingError(
            f"AI response does not match the expected structure: {', '.join(fields)}",
            raw_response=response,
            details={"fields": fields},
        ) from exc
