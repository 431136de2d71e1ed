"""
pytest configuration and fixtures.
"""

from typing import Any, Callable, Dict, List

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reqflow import AppConfig, Context, Request, context
from reqflow.testing import RecordingWriter


@pytest.fixture
def config() -> AppConfig:
    """Default test configuration: no access log noise."""
    return AppConfig(access_log=False, log_level="WARNING")


@pytest.fixture
def get_request() -> Request:
    """Sample GET request."""
    return Request(
        method="GET",
        url="/users/42?verbose=1",
        headers={"accept": "application/json", "x-forwarded-for": "10.0.0.7, 10.0.0.1"},
    )


@pytest.fixture
def post_request() -> Request:
    """Sample POST request with a JSON body."""
    return Request(
        method="POST",
        url="/users",
        headers={"content-type": "application/json"},
        body='{"name": "John", "age": 30}',
    )


@pytest.fixture
def base_context(get_request: Request) -> Context:
    """Base context as create_app() builds it."""
    return Context(get_request, {"Connection": "keep-alive"})


@pytest.fixture
def builder(base_context: Context):
    """A fresh builder over base_context."""
    return context(base_context)


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def call_log() -> List[str]:
    """Shared list middleware recorders append to."""
    return []


@pytest.fixture
def recorder(call_log: List[str]) -> Callable[[str], Callable[[Any], Any]]:
    """
    Factory for middleware that records it ran and adds nothing.

    Usage:
        builder.use(recorder("first")).use(recorder("second"))
    """
    from reqflow import set_props

    def make(name: str):
        def middleware(ctx):
            call_log.append(name)
            return set_props({})
        return middleware

    return make
