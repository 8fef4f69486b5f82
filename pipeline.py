"""
pipeline.py — the "find matches" run for one user.

  uploaded image → image_analyzer.analyze → matcher.match → AppState transition

One analysis per user at a time. Nothing is cancelled: if the user resets or
sends a new photo mid-run, the result still arrives but is applied to the
*current* session state, where app_state drops it as stale.
"""
from __future__ import annotations

import logging
from typing import Callable

import app_state
from app_state import AppState, UploadedImage
from catalog_backends.base import Product
from errors import AnalysisError, AnalysisFailed
from image_analyzer import ColorAnalysis, analyze
from matcher import detected_colors, match

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory AppState per Telegram user."""

    def __init__(self, factory: Callable[[], AppState] = app_state.initial) -> None:
        self._factory = factory
        self._states: dict[int, AppState] = {}

    def get(self, user_id: int) -> AppState:
        if user_id not in self._states:
            self._states[user_id] = self._factory()
        return self._states[user_id]

    def put(self, user_id: int, state: AppState) -> AppState:
        self._states[user_id] = state
        return state

    def clear(self) -> None:
        self._states.clear()


async def analyse_and_match(
    image: UploadedImage,
    catalog,
) -> tuple[ColorAnalysis, list[Product]]:
    """Analyse the image and filter the catalog. Raises AnalysisError."""
    analysis = await analyze(image.data, image.mime_type)
    matches = match(detected_colors(analysis), catalog)
    logger.info("Matched %d of %d products", len(matches), len(catalog))
    return analysis, matches


async def find_matches(sessions: SessionStore, user_id: int) -> AppState:
    """
    Run one analysis for `user_id` and return the resulting session state.

    Raises ValueError if no image is selected. Returns the state unchanged if
    an analysis is already running for this user.
    """
    state = sessions.get(user_id)
    if state.image is None:
        raise ValueError("No image selected")
    if state.is_analyzing:
        logger.info("Analysis already running for user %s — ignoring", user_id)
        return state

    started = sessions.put(user_id, app_state.analysis_started(state))
    request_id = started.request_id

    try:
        analysis, matches = await analyse_and_match(started.image, started.catalog)
    except AnalysisError as exc:
        logger.warning("Analysis failed for user %s: %s", user_id, exc)
        return sessions.put(user_id, app_state.analysis_failed(sessions.get(user_id), request_id, exc))
    except Exception as exc:
        logger.error("AI analysis or product matching failed: %s", exc, exc_info=True)
        return sessions.put(
            user_id,
            app_state.analysis_failed(sessions.get(user_id), request_id, AnalysisFailed(str(exc))),
        )

    current = sessions.get(user_id)
    if current.request_id != request_id:
        logger.info("Discarding stale analysis result for user %s", user_id)
    return sessions.put(user_id, app_state.analysis_succeeded(current, request_id, analysis, matches))
