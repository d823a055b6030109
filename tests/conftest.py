"""Pytest fixtures and configuration for taskdraft tests."""

import json
import pytest
from datetime import datetime
from typing import List, Optional
from fastapi.testclient import TestClient

from taskdraft.engine.field_extraction import FieldExtractor
from taskdraft.engine.interpreter import TaskInterpreter
from taskdraft.integrations.openai_client import OracleResponseError
from taskdraft.models.temporal import TemporalMatch
from taskdraft.temporal.extractor import TemporalExtractor


# 2025-01-01 is a Wednesday
REFERENCE_INSTANT = datetime(2025, 1, 1, 0, 0)


class FakeOracleClient:
    """Stand-in for OpenAIClient: returns a canned answer or raises."""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.content


class StaticTemporalExtractor(TemporalExtractor):
    """Temporal extractor that always returns the same match."""

    def __init__(self, match: TemporalMatch):
        super().__init__()
        self.match = match
        self.calls = 0

    def extract(self, text, reference_instant=None):
        self.calls += 1
        return self.match


def oracle_json(**fields) -> str:
    """Serialize an oracle answer."""
    return json.dumps(fields)


@pytest.fixture
def reference_instant():
    """Fixed reference instant (Wednesday 2025-01-01 00:00)."""
    return REFERENCE_INSTANT


@pytest.fixture
def fixed_clock(reference_instant):
    """Clock that always returns the reference instant."""
    return lambda: reference_instant


@pytest.fixture
def failing_oracle():
    """Oracle client that always fails."""
    return FakeOracleClient(error=OracleResponseError("boom"))


@pytest.fixture
def exploding_oracle():
    """Oracle client raising something that is not an OracleError."""
    return FakeOracleClient(error=ConnectionResetError("socket closed"))


@pytest.fixture
def make_interpreter(fixed_clock):
    """Factory for interpreters wired to fakes.

    Args (of the returned callable):
        oracle: FakeOracleClient to use
        temporal: TemporalMatch to return instead of running the real extractor
    """
    def _make(oracle: FakeOracleClient, temporal: Optional[TemporalMatch] = None) -> TaskInterpreter:
        extractor = StaticTemporalExtractor(temporal) if temporal is not None else TemporalExtractor()
        return TaskInterpreter(
            temporal_extractor=extractor,
            field_extractor=FieldExtractor(client=oracle),
            clock=fixed_clock,
        )
    return _make


@pytest.fixture
def test_client(make_interpreter, failing_oracle):
    """FastAPI test client with the interpreter dependency overridden."""
    from taskdraft.api.app import app, get_interpreter

    interpreter = make_interpreter(failing_oracle)
    app.dependency_overrides[get_interpreter] = lambda: interpreter

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
