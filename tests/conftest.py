import os

# Never talk to a real model from tests
os.environ["AI_MODE"] = "mock"

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from recipebox.main import app
from recipebox.deps import limiter

limiter.enabled = False


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_ai():
    """
    Build a stand-in for the AI client.
    Each positional response is what one generate_text call returns (or raises, for exceptions).
    """
    def _make(*responses, available=True):
        ai = MagicMock()
        ai.is_available.return_value = available
        ai.generate_text = AsyncMock(side_effect=list(responses))
        return ai
    return _make
