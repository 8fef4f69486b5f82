"""
image_analyzer.py — turns an uploaded image into a validated ColorAnalysis.

The classification call itself is delegated to providers/manager.py; this
module owns the input checks and the response-shape validation, so nothing
downstream ever sees an unchecked payload.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from errors import (
    InconclusiveAnalysis, MalformedResponse, NoColorsDetected, NotAShoe,
)
from providers.base import parse_json_response
from providers.manager import classify_image

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = frozenset({
    "image/jpeg", "image/png", "image/gif", "image/webp",
    "image/heic", "image/heif", "image/bmp",
})


@dataclass
class ColorAnalysis:
    """Validated classification result for one analysis run."""
    is_shoe: bool
    main_colors: list[str] = field(default_factory=list)   # ≥10% of the shoe
    side_colors: list[str] = field(default_factory=list)   # <10% of the shoe

    @property
    def all_colors(self) -> list[str]:
        return [*self.main_colors, *self.side_colors]


def detect_mime_type(data: bytes) -> str:
    """Guess an image MIME type from magic bytes; JPEG when nothing matches."""
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:4] == b"GIF8":
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:2] == b"BM":
        return "image/bmp"
    if data[4:12] in (b"ftypheic", b"ftypheix", b"ftypmif1"):
        return "image/heic"
    return "image/jpeg"


def _color_list(payload: dict, key: str) -> list[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(c, str) for c in value):
        raise MalformedResponse(f"'{key}' is not a list of strings: {value!r:.100}")
    return list(value)


def validate_payload(payload: Any) -> ColorAnalysis:
    """
    Check a parsed classification payload and build a ColorAnalysis.

    Raises:
        InconclusiveAnalysis: payload is null or has no boolean isShoe.
        MalformedResponse:    payload is not an object, or a color field is not
                              a list of strings.
        NotAShoe:             isShoe is false.
        NoColorsDetected:     a shoe with both color lists empty.
    """
    if payload is None:
        raise InconclusiveAnalysis("Empty payload")
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}")
    if not isinstance(payload.get("isShoe"), bool):
        raise InconclusiveAnalysis("Payload has no boolean 'isShoe'")
    if not payload["isShoe"]:
        raise NotAShoe("No shoe detected in image")

    main_colors = _color_list(payload, "mainColors")
    side_colors = _color_list(payload, "sideColors")
    if not main_colors and not side_colors:
        raise NoColorsDetected("Shoe detected but no colors reported")

    return ColorAnalysis(is_shoe=True, main_colors=main_colors, side_colors=side_colors)


async def analyze(image_bytes: bytes, mime_type: str) -> ColorAnalysis:
    """
    Classify one image and return its validated colors.

    Raises ValueError for bad input (before any network call) and an
    AnalysisError subclass for everything that goes wrong afterwards.
    """
    if not image_bytes:
        raise ValueError("image_bytes must not be empty")
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise ValueError(f"Unsupported image MIME type: {mime_type!r}")

    result = await classify_image(image_bytes, mime_type)
    payload = parse_json_response(result.text, result.provider_name)
    analysis = validate_payload(payload)
    logger.info(
        "[%s] shoe detected — main=%s side=%s",
        result.provider_name, analysis.main_colors, analysis.side_colors,
    )
    return analysis
