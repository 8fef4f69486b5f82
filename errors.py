"""
errors.py — every failure the matcher can surface to a user.

Each class carries a stable `code` (stored in AppState.error) and the
user-facing text shown for it. Analysis errors are terminal for the current
attempt; the user re-invokes the analysis to try again.
"""
from __future__ import annotations


class MatcherError(Exception):
    """Base class for all user-visible failures."""
    code: str = "unknown"
    user_message: str = "Something went wrong. Please try again."


# ── Analysis side ──────────────────────────────────────────────────────────────

class AnalysisError(MatcherError):
    code = "analysis_error"


class ServiceUnavailable(AnalysisError):
    code = "service_unavailable"
    user_message = "The image analysis service is unavailable right now. Please try again later."


class MalformedResponse(AnalysisError):
    code = "malformed_response"
    user_message = (
        "The AI response was not in the expected format. This can happen due to "
        "high traffic. Please try again in a moment."
    )


class InconclusiveAnalysis(AnalysisError):
    code = "inconclusive"
    user_message = "The AI analysis was inconclusive. Please try a different image."


class NotAShoe(AnalysisError):
    code = "not_a_shoe"
    user_message = "Please upload a photo of a shoe. We couldn't detect one in this image."


class NoColorsDetected(AnalysisError):
    code = "no_colors"
    user_message = "We couldn't determine the colors of the shoe. Please try a clearer image."


class AnalysisFailed(AnalysisError):
    """Anything unexpected between the upload and the match result."""
    code = "analysis_failed"
    user_message = "Sorry, we couldn't analyze the image or find matches. Please try another one."


# ── Catalog side ───────────────────────────────────────────────────────────────

class CatalogError(MatcherError):
    code = "catalog_error"


class CatalogUnavailable(CatalogError):
    code = "catalog_unavailable"
    user_message = "Could not load product catalog. Please check the API endpoint."


class CatalogWriteFailed(CatalogError):
    code = "catalog_write_failed"
    user_message = "Could not save the product. Please try again."


_BY_CODE: dict[str, type[MatcherError]] = {
    cls.code: cls
    for cls in (
        ServiceUnavailable, MalformedResponse, InconclusiveAnalysis, NotAShoe,
        NoColorsDetected, AnalysisFailed, CatalogUnavailable, CatalogWriteFailed,
    )
}


def message_for(code: str) -> str:
    """User-facing text for an error code; unknown codes get the generic text."""
    return _BY_CODE.get(code, MatcherError).user_message
