"""
Google Gemini classification provider — uses the google-genai SDK.

The request carries a response schema, so Gemini answers with a JSON object
of the shape {isShoe, mainColors, sideColors} instead of free prose.
"""
from __future__ import annotations

import time
import logging

from google import genai
from google.genai import types as genai_types

from errors import ServiceUnavailable
from providers.base import (
    RESPONSE_FIELDS, SHOE_PROMPT, ClassificationResult, VisionProvider,
)

logger = logging.getLogger(__name__)


def _schema_for(json_type: str, description: str) -> genai_types.Schema:
    if json_type == "boolean":
        return genai_types.Schema(type=genai_types.Type.BOOLEAN, description=description)
    if json_type == "array<string>":
        return genai_types.Schema(
            type=genai_types.Type.ARRAY,
            items=genai_types.Schema(type=genai_types.Type.STRING),
            description=description,
        )
    raise ValueError(f"Unsupported schema type: {json_type}")


RESPONSE_SCHEMA = genai_types.Schema(
    type=genai_types.Type.OBJECT,
    properties={
        field: _schema_for(json_type, description)
        for field, (json_type, description) in RESPONSE_FIELDS.items()
    },
)


class GeminiProvider(VisionProvider):

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        self.name     = "google"
        self.model_id = model
        self._client  = genai.Client(api_key=api_key)

    async def classify(self, image_bytes: bytes, mime_type: str) -> ClassificationResult:
        gen_config = genai_types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
            temperature=0,
        )

        t0 = time.monotonic()

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_id,
                contents=[
                    genai_types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    SHOE_PROMPT,
                ],
                config=gen_config,
            )
        except Exception as exc:
            logger.error("[%s] Request failed: %s", self.full_name, exc)
            raise ServiceUnavailable(f"[{self.full_name}] {exc}") from exc

        latency_ms = int((time.monotonic() - t0) * 1000)

        usage         = response.usage_metadata
        input_tokens  = getattr(usage, "prompt_token_count", None) or 0
        output_tokens = getattr(usage, "candidates_token_count", None) or 0

        return ClassificationResult(
            provider_name = self.full_name,
            text          = response.text or "",
            latency_ms    = latency_ms,
            input_tokens  = input_tokens,
            output_tokens = output_tokens,
        )
