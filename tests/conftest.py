"""Pytest configuration and fixtures for reactive_sql tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest
from prometheus_client import CollectorRegistry

from reactive_sql.application import ReactiveContext, create_sql, reset_context, set_context
from reactive_sql.domain.value_objects import Timestamp
from reactive_sql.infrastructure.config import Config, EngineConfig
from reactive_sql.infrastructure.metrics import MetricsRegistry

FROZEN_TIME = Timestamp(1649577131008)

TEST_SCHEMA: dict[str, Any] = {
    "test": {
        "fields": {"id": "INTEGER", "age": "INTEGER", "name": "TEXT"},
        "values": [{"id": 1, "age": 10, "name": "Ling"}, {"id": 2, "age": 18, "name": "Paul"}],
    }
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration with an in-memory database."""
    return Config(engine=EngineConfig(database_path=":memory:", timeout_seconds=1.0))


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def context(metrics_registry: MetricsRegistry) -> Generator[ReactiveContext, None, None]:
    """Provide an empty context with a frozen clock."""
    ctx = ReactiveContext(clock=lambda: FROZEN_TIME, metrics=metrics_registry)
    yield ctx
    ctx.close()


@pytest.fixture
def seeded_context(context: ReactiveContext, test_config: Config) -> ReactiveContext:
    """Provide a context bootstrapped with the 'test' table."""
    assert create_sql(TEST_SCHEMA, context=context, config=test_config) is not None
    return context


@pytest.fixture
def default_context(
    metrics_registry: MetricsRegistry,
) -> Generator[ReactiveContext, None, None]:
    """Install a fresh process-wide default context."""
    reset_context()
    ctx = ReactiveContext(clock=lambda: FROZEN_TIME, metrics=metrics_registry)
    set_context(ctx)
    yield ctx
    reset_context()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
