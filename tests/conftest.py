"""Pytest configuration and fixtures for condense tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from condense.application import PersistentTable
from condense.domain.entities import Table
from condense.infrastructure.config import Config, EncryptionConfig, StorageConfig
from condense.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary data directory."""
    return Config(
        storage=StorageConfig(
            data_dir=temp_dir / "db",
            fsync=False,  # Faster for tests
        ),
        encryption=EncryptionConfig(
            kdf_iterations=1000,  # Faster for tests
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def make_table(
    temp_dir: Path,
    test_config: Config,
    metrics_registry: MetricsRegistry,
) -> Callable[..., PersistentTable]:
    """Factory for file-backed tables in the temporary directory."""

    def factory(name: str, key: str = "", **kwargs) -> PersistentTable:
        kwargs.setdefault("config", test_config)
        kwargs.setdefault("metrics", metrics_registry)
        return PersistentTable(name, temp_dir, key, **kwargs)

    return factory


@pytest.fixture
def people() -> Table:
    """A small table with partial rows."""
    return [
        {"name": "Alice", "dept": "X", "age": 30},
        {"name": "Bob", "dept": "Y", "age": 0},
        {"name": "Carol", "dept": "X"},
        {"name": "", "dept": "Z", "age": 41},
    ]


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "property: Property-style tests over several inputs")
    config.addinivalue_line("markers", "security: Security tests")
