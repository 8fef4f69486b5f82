"""
Shared types and base class for image classification providers.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from errors import MalformedResponse

logger = logging.getLogger(__name__)

# ── Prompt (shared across all providers) ──────────────────────────────────────

SHOE_PROMPT = (
    "Determine if this image contains a shoe. If it does, identify its dominant colors. "
    'Classify colors covering 10% or more of the shoe as "mainColors" and colors '
    'covering less than 10% as "sideColors".'
)

# Field name → (JSON type, description). Providers translate this into their
# own schema objects so every backend asks for the same shape.
RESPONSE_FIELDS: dict[str, tuple[str, str]] = {
    "isShoe":     ("boolean",       "Whether the image contains a shoe."),
    "mainColors": ("array<string>", "Colors covering 10% or more of the shoe."),
    "sideColors": ("array<string>", "Colors covering less than 10% of the shoe."),
}


# ── Shared result type ─────────────────────────────────────────────────────────

@dataclass
class ClassificationResult:
    """Raw answer from a single classification call, before validation."""
    provider_name: str          # e.g. "google/gemini-2.5-flash"
    text: str                   # raw response body, expected to be JSON
    latency_ms: int
    input_tokens: int
    output_tokens: int


def parse_json_response(raw: str, provider_name: str) -> Any:
    """
    Parse JSON from a model response, handling markdown fences gracefully.
    Raises MalformedResponse on parse failure.
    """
    text = (raw or "").strip()
    # Strip ```json ... ``` or ``` ... ``` fences if present
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("[%s] Non-JSON response: %s", provider_name, (raw or "")[:300])
        raise MalformedResponse(f"[{provider_name}] JSON parse error: {exc}") from exc


# ── Abstract base ──────────────────────────────────────────────────────────────

class VisionProvider(ABC):
    """Base class all classification providers must implement."""

    name: str           # e.g. "google"
    model_id: str       # e.g. "gemini-2.5-flash"

    @abstractmethod
    async def classify(self, image_bytes: bytes, mime_type: str) -> ClassificationResult:
        """
        Ask the service whether image_bytes shows a shoe and which colors it has.
        Must raise ServiceUnavailable on any transport or service-level failure.
        """
        ...

    @property
    def full_name(self) -> str:
        return f"{self.name}/{self.model_id}"
