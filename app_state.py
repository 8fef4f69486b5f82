"""
app_state.py — the per-user application state and its transitions.

AppState is immutable. Each user action produces a new state from the old
one plus the action's result, so a handler never half-updates a session:

    state = app_state.analysis_started(state)
    ...await...
    state = app_state.analysis_succeeded(current, state.request_id, analysis, matches)

request_id is bumped by every transition that starts or abandons an analysis.
A result carrying an older request_id is stale (the user reset or re-uploaded
while it was in flight) and is dropped.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from catalog_backends.base import Product
from errors import CatalogUnavailable, MatcherError
from image_analyzer import ColorAnalysis


@dataclass(frozen=True)
class UploadedImage:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class AppState:
    catalog: tuple[Product, ...] = ()
    catalog_configured: bool = True
    is_fetching: bool = False

    image: Optional[UploadedImage] = None
    analysis: Optional[ColorAnalysis] = None
    matches: tuple[Product, ...] = ()
    error: Optional[str] = None          # MatcherError.code, see errors.message_for

    is_analyzing: bool = False
    is_submitting: bool = False
    request_id: int = 0


def initial(catalog_configured: bool = True) -> AppState:
    return AppState(catalog_configured=catalog_configured, is_fetching=catalog_configured)


# ── Catalog ────────────────────────────────────────────────────────────────────

def catalog_loaded(state: AppState, products) -> AppState:
    # A successful load clears an earlier load failure, nothing else
    error = None if state.error == CatalogUnavailable.code else state.error
    return replace(state, catalog=tuple(products), is_fetching=False, error=error)


def catalog_failed(state: AppState, error: MatcherError) -> AppState:
    return replace(state, catalog=(), is_fetching=False, error=error.code)


# ── Image / reset ──────────────────────────────────────────────────────────────

def reset(state: AppState) -> AppState:
    """Clear the photo and everything derived from it. Does not cancel requests."""
    return replace(
        state,
        image=None,
        analysis=None,
        matches=(),
        error=None,
        is_analyzing=False,
        request_id=state.request_id + 1,
    )


def image_selected(state: AppState, image: UploadedImage) -> AppState:
    return replace(reset(state), image=image)


# ── Analysis ───────────────────────────────────────────────────────────────────

def analysis_started(state: AppState) -> AppState:
    return replace(
        state,
        is_analyzing=True,
        analysis=None,
        matches=(),
        error=None,
        request_id=state.request_id + 1,
    )


def analysis_succeeded(
    state: AppState,
    request_id: int,
    analysis: ColorAnalysis,
    matches,
) -> AppState:
    if request_id != state.request_id:
        return state
    return replace(
        state,
        is_analyzing=False,
        analysis=analysis,
        matches=tuple(matches),
        error=None,
    )


def analysis_failed(state: AppState, request_id: int, error: MatcherError) -> AppState:
    if request_id != state.request_id:
        return state
    return replace(
        state,
        is_analyzing=False,
        analysis=None,
        matches=(),
        error=error.code,
    )


def is_analysis_complete(state: AppState) -> bool:
    return (
        not state.is_analyzing
        and state.analysis is not None
        and bool(state.analysis.all_colors)
    )


# ── Product submission ─────────────────────────────────────────────────────────

def submit_started(state: AppState) -> AppState:
    return replace(state, is_submitting=True, error=None)


def submit_succeeded(state: AppState, products) -> AppState:
    return replace(state, is_submitting=False, catalog=tuple(products))


def submit_failed(state: AppState, error: MatcherError) -> AppState:
    return replace(state, is_submitting=False, error=error.code)
