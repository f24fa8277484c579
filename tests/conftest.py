# tests/conftest.py
from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from chatgate.app import create_app
from chatgate.core.config import GatewaySettings, load_settings
from chatgate.core.registry import SessionRegistry

from fakes import MODELS, FakeProvider


def pytest_collection_modifyitems(config: pytest.Config, items) -> None:
    """Live Gemini tests only run when GEMINI_API_KEY is set."""
    if os.getenv("GEMINI_API_KEY"):
        return
    skip_live = pytest.mark.skip(reason="GEMINI_API_KEY not set; skipping live Gemini tests")
    for item in items:
        if "gemini_live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture
def settings() -> GatewaySettings:
    return load_settings(environ={"STATIC_DIR": "__no_static_dir__"})


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider(
        {
            "good-key": MODELS,                  # first candidate answers
            "third-only": ["gemini-pro"],        # only candidate #3 answers
            "other-key": ["gemini-1.0-pro"],
        }
    )


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def client(settings, fake_provider, registry) -> TestClient:
    app = create_app(settings=settings, provider=fake_provider, registry=registry)
    return TestClient(app)
