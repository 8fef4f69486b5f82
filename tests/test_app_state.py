"""
Tests for app_state.py — AppState transitions.

Covers:
  - initial(): fetching flag follows catalog configuration
  - catalog_loaded / catalog_failed
  - image_selected / reset: clears derived state, bumps request_id
  - analysis_started / succeeded / failed, including stale request ids
  - errors and results are never shown together
  - submit_* transitions
"""
from __future__ import annotations

import app_state
from app_state import AppState, UploadedImage
from catalog_backends.base import Product
from errors import CatalogUnavailable, CatalogWriteFailed, NotAShoe
from image_analyzer import ColorAnalysis

IMAGE = UploadedImage(data=b"\xff\xd8\xff", mime_type="image/jpeg")
ANALYSIS = ColorAnalysis(is_shoe=True, main_colors=["black"], side_colors=["white"])


def make_product(product_id: str) -> Product:
    return Product(
        id=product_id, name=product_id, image_src="", link="", color_tags=("black",),
    )


class TestCatalog:
    def test_initial_configured_is_fetching(self):
        state = app_state.initial(True)
        assert state.is_fetching is True
        assert state.catalog_configured is True

    def test_initial_unconfigured_not_fetching(self):
        state = app_state.initial(False)
        assert state.is_fetching is False
        assert state.catalog_configured is False

    def test_loaded(self):
        state = app_state.catalog_loaded(app_state.initial(), [make_product("1")])
        assert state.is_fetching is False
        assert [p.id for p in state.catalog] == ["1"]

    def test_failed_empties_catalog(self):
        state = app_state.catalog_loaded(app_state.initial(), [make_product("1")])
        state = app_state.catalog_failed(state, CatalogUnavailable("down"))
        assert state.catalog == ()
        assert state.error == "catalog_unavailable"

    def test_loaded_clears_catalog_error_only(self):
        failed = app_state.catalog_failed(app_state.initial(), CatalogUnavailable("down"))
        assert app_state.catalog_loaded(failed, []).error is None

        other = AppState(error="not_a_shoe")
        assert app_state.catalog_loaded(other, []).error == "not_a_shoe"


class TestImageAndReset:
    def test_image_selected_clears_previous_result(self):
        state = AppState(analysis=ANALYSIS, matches=(make_product("1"),), error=None)
        new = app_state.image_selected(state, IMAGE)
        assert new.image == IMAGE
        assert new.analysis is None
        assert new.matches == ()

    def test_reset_clears_everything_but_catalog(self):
        catalog = (make_product("1"),)
        state = AppState(catalog=catalog, image=IMAGE, analysis=ANALYSIS, error="no_colors")
        new = app_state.reset(state)
        assert new.image is None
        assert new.analysis is None
        assert new.error is None
        assert new.catalog == catalog

    def test_reset_bumps_request_id(self):
        state = AppState(request_id=4)
        assert app_state.reset(state).request_id == 5

    def test_transitions_do_not_mutate(self):
        state = AppState(image=IMAGE)
        app_state.reset(state)
        assert state.image == IMAGE


class TestAnalysis:
    def test_started(self):
        state = AppState(image=IMAGE, error="no_colors", request_id=1)
        new = app_state.analysis_started(state)
        assert new.is_analyzing is True
        assert new.error is None
        assert new.request_id == 2

    def test_succeeded(self):
        started = app_state.analysis_started(AppState(image=IMAGE))
        done = app_state.analysis_succeeded(started, started.request_id, ANALYSIS, [make_product("1")])
        assert done.is_analyzing is False
        assert done.analysis == ANALYSIS
        assert [p.id for p in done.matches] == ["1"]
        assert done.error is None
        assert app_state.is_analysis_complete(done)

    def test_failed(self):
        started = app_state.analysis_started(AppState(image=IMAGE))
        done = app_state.analysis_failed(started, started.request_id, NotAShoe("no"))
        assert done.is_analyzing is False
        assert done.error == "not_a_shoe"
        assert done.analysis is None
        assert done.matches == ()
        assert not app_state.is_analysis_complete(done)

    def test_success_after_failure_clears_error(self):
        first = app_state.analysis_started(AppState(image=IMAGE))
        failed = app_state.analysis_failed(first, first.request_id, NotAShoe("no"))
        second = app_state.analysis_started(failed)
        done = app_state.analysis_succeeded(second, second.request_id, ANALYSIS, [])
        assert done.error is None
        assert done.analysis == ANALYSIS

    def test_stale_success_ignored_after_reset(self):
        started = app_state.analysis_started(AppState(image=IMAGE))
        after_reset = app_state.reset(started)
        result = app_state.analysis_succeeded(after_reset, started.request_id, ANALYSIS, [make_product("1")])
        assert result is after_reset

    def test_stale_failure_ignored_after_new_image(self):
        started = app_state.analysis_started(AppState(image=IMAGE))
        new_image = app_state.image_selected(started, IMAGE)
        result = app_state.analysis_failed(new_image, started.request_id, NotAShoe("no"))
        assert result is new_image
        assert result.error is None

    def test_complete_needs_colors(self):
        empty = ColorAnalysis(is_shoe=True)
        assert not app_state.is_analysis_complete(AppState(analysis=empty))
        assert not app_state.is_analysis_complete(AppState(analysis=ANALYSIS, is_analyzing=True))


class TestSubmit:
    def test_started(self):
        state = app_state.submit_started(AppState(error="catalog_write_failed"))
        assert state.is_submitting is True
        assert state.error is None

    def test_succeeded_replaces_catalog(self):
        state = AppState(catalog=(make_product("old"),), is_submitting=True)
        new = app_state.submit_succeeded(state, [make_product("new"), make_product("old")])
        assert new.is_submitting is False
        assert [p.id for p in new.catalog] == ["new", "old"]

    def test_failed(self):
        state = app_state.submit_failed(AppState(is_submitting=True), CatalogWriteFailed("500"))
        assert state.is_submitting is False
        assert state.error == "catalog_write_failed"
