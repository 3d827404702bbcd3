"""Pytest configuration for the PearAI client test suite.

Provides fake collaborators and a client factory backed by
``httpx.MockTransport`` so no test touches the network.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import httpx
import pytest

from pearai_providers.auth import AuthTokens, IdentityHeaderProvider, TokenStore
from pearai_providers.base.logging import BASE_LOGGER_NAME, get_logger
from pearai_providers.config import ENV_FIELD_MAP, reset_config_cache
from pearai_providers.pearai import PearAIServerClient
from pearai_providers.telemetry import LocalUsageRecorder

from .helpers import EventCollector, FakeTokenCounter


@pytest.fixture(autouse=True)
def clean_pearai_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from ``PEARAI_*`` variables and cached config files."""
    for name in list(ENV_FIELD_MAP.values()) + ["PEARAI_CONFIG_FILE"]:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def recorder() -> LocalUsageRecorder:
    return LocalUsageRecorder(enabled=True)


@pytest.fixture()
def counter() -> FakeTokenCounter:
    return FakeTokenCounter()


@pytest.fixture()
def make_client(recorder: LocalUsageRecorder, counter: FakeTokenCounter) -> Callable[..., PearAIServerClient]:
    """Return a factory building a client around a MockTransport handler."""

    def _make(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> PearAIServerClient:
        kwargs.setdefault("usage_recorder", recorder)
        kwargs.setdefault("token_counter", counter)
        kwargs.setdefault("header_provider", IdentityHeaderProvider("uid-1", "1.2.3", "linux"))
        kwargs.setdefault("token_source", TokenStore(AuthTokens(access_token="tok-1")))
        return PearAIServerClient("http://pearai.test", transport=httpx.MockTransport(handler), **kwargs)

    return _make


@pytest.fixture()
def log_events() -> Iterator[EventCollector]:
    """Capture events emitted through the shared package logger."""
    collector = EventCollector()
    base = get_logger(BASE_LOGGER_NAME)
    base.addHandler(collector)
    yield collector
    base.removeHandler(collector)
