"""Funding-lead generation through the Gemini text API."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import TypeAdapter, ValidationError

from fundfinder.config import get_settings
from fundfinder.core.errors import UpstreamError
from fundfinder.schemas.lead import Lead

logger = logging.getLogger(__name__)
settings = get_settings()

SYSTEM_INSTRUCTION = (
    "You are a strict backend API for a funding database. "
    "You never speak. You only output raw JSON arrays."
)

LEADS_PROMPT_TEMPLATE = """CONTEXT:
User Business: {business_type}
Location: {location}
Need: {purpose}

TASK:
Identify 3 real or highly realistic funding sources (Grants, Loans, or Angel Networks) that match this specific user.

OUTPUT FORMAT:
Return ONLY a valid JSON Array. No markdown. No conversational filler.
Follow this exact schema:
[
    {{
        "name": "Name of Grant/Loan",
        "type": "Grant" or "Loan" or "Investor",
        "amount": "e.g. $5,000 - $20,000",
        "deadline": "e.g. Dec 31, 2025 or Rolling",
        "link": "https://example.com",
        "match_reason": "1 short sentence on why this fits."
    }}
]
"""

OPENING_FENCE_RE = re.compile(r"^`{3}(?:json)?", re.MULTILINE | re.IGNORECASE)
CLOSING_FENCE_RE = re.compile(r"`{3}$", re.MULTILINE)

_leads_adapter = TypeAdapter(list[Lead])


@dataclass(frozen=True)
class SearchContext:
    """Validated business profile sent to the AI."""

    business_type: str
    location: str
    purpose: str


@runtime_checkable
class LeadSearchClient(Protocol):
    """Anything that turns a business profile into raw model text."""

    async def complete(self, context: SearchContext) -> str: ...


def build_prompt(context: SearchContext) -> str:
    return SYSTEM_INSTRUCTION + "\n\n" + LEADS_PROMPT_TEMPLATE.format(
        business_type=context.business_type,
        location=context.location,
        purpose=context.purpose,
    )


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences models like to wrap JSON in."""
    text = OPENING_FENCE_RE.sub("", text)
    text = CLOSING_FENCE_RE.sub("", text)
    return text.strip()


def parse_leads(raw_text: str) -> list[Lead]:
    """Strictly parse model output into leads.

    Raises:
        UpstreamError: If the text is not a non-empty JSON array of valid
            leads. The raw text is attached as the diagnostic.
    """
    cleaned = strip_code_fences(raw_text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("AI output was not valid JSON: %s", e)
        raise UpstreamError("AI output was not valid JSON", diagnostic=raw_text) from e

    if not isinstance(data, list):
        raise UpstreamError("AI output was not a JSON array", diagnostic=raw_text)
    if not data:
        raise UpstreamError("AI returned no funding leads", diagnostic=raw_text)

    try:
        return _leads_adapter.validate_python(data)
    except ValidationError as e:
        logger.warning("AI output did not match the lead schema: %s", e.error_count())
        raise UpstreamError("AI output did not match the lead schema", diagnostic=raw_text) from e


class GeminiLeadClient:
    """Gemini ``generateContent`` client."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.api_base = settings.gemini_api_base.rstrip("/")
        self.timeout = settings.gemini_timeout_seconds
        self._transport = transport

    def _payload(self, context: SearchContext) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_prompt(context)}]}],
            "generationConfig": {
                "temperature": settings.gemini_temperature,
                "maxOutputTokens": settings.gemini_max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def complete(self, context: SearchContext) -> str:
        if not self.api_key:
            raise UpstreamError("Server config error: AI API key missing")

        url = f"{self.api_base}/models/{self.model}:generateContent"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    json=self._payload(context),
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": self.api_key,
                    },
                )
        except httpx.HTTPError as e:
            logger.error("Gemini request failed: %s", e)
            raise UpstreamError(f"AI request failed: {type(e).__name__}") from e

        try:
            data = response.json()
        except ValueError:
            data = response.text

        if response.is_error:
            logger.error("Gemini returned HTTP %d", response.status_code)
            raise UpstreamError(
                f"AI service returned HTTP {response.status_code}",
                diagnostic=data,
            )

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("Gemini response had unexpected structure")
            raise UpstreamError("Invalid AI API response structure", diagnostic=data) from e

        if not isinstance(text, str):
            logger.error("Gemini response text was %s, not a string", type(text).__name__)
            raise UpstreamError("Invalid AI API response structure", diagnostic=data)
        return text


# Global instance
gemini_client = GeminiLeadClient()
