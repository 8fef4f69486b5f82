"""
Provider Manager — builds the classification provider once and runs it.

The provider is cached at module level; reset_provider() drops the cache so a
changed GOOGLE_API_KEY / GEMINI_MODEL takes effect on the next call.
"""
from __future__ import annotations

import logging
from typing import Optional

import config
from errors import ServiceUnavailable
from providers.base import ClassificationResult, VisionProvider

logger = logging.getLogger(__name__)

_provider: Optional[VisionProvider] = None


def _build_provider() -> VisionProvider:
    if not config.GOOGLE_API_KEY:
        raise ServiceUnavailable("GOOGLE_API_KEY is not set — no classification provider available.")

    from providers.gemini_provider import GeminiProvider
    provider = GeminiProvider(config.GOOGLE_API_KEY, config.GEMINI_MODEL)
    logger.info("Loaded provider: %s", provider.full_name)
    return provider


def get_provider() -> VisionProvider:
    global _provider
    if _provider is None:
        _provider = _build_provider()
    return _provider


def reset_provider() -> None:
    global _provider
    _provider = None


async def classify_image(image_bytes: bytes, mime_type: str) -> ClassificationResult:
    """Single classification call. No retry: failures go straight to the caller."""
    provider = get_provider()
    result = await provider.classify(image_bytes, mime_type)
    logger.info(
        "[%s] OK — latency=%dms tokens=%d/%d",
        result.provider_name, result.latency_ms, result.input_tokens, result.output_tokens,
    )
    return result
