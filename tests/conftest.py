"""
Shared pytest fixtures.

Every test starts with empty module-level caches (catalog backend, catalog
snapshot, classification provider) and with a known configuration, so tests
are isolated from each other and from the developer's .env.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# ── Make the project root importable without installing the package ────────────
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    import catalog_store
    import config
    import providers.manager as manager_mod

    monkeypatch.setattr(config, "GOOGLE_API_KEY", "test-google-key")
    monkeypatch.setattr(config, "GEMINI_MODEL", "gemini-2.5-flash")
    monkeypatch.setattr(config, "CATALOG_ENDPOINT", "https://example.mockapi.io/products")
    monkeypatch.setattr(config, "CATALOG_LIMIT", 100)
    monkeypatch.setattr(config, "ADMIN_IDS", {42})

    monkeypatch.setattr(catalog_store, "_backend", None)
    monkeypatch.setattr(catalog_store, "_snapshot", ())
    manager_mod.reset_provider()
    yield
    manager_mod.reset_provider()

