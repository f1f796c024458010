"""Shared test fixtures for shopgen tests.

Provides a fixed generation clock, small generation configs, settings
pointed at a temporary data directory, and CliRunner fixtures.
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import datetime, timezone
import os
from pathlib import Path

from click.testing import CliRunner
import pytest
import structlog

from shopgen.config import GenerationConfig, ShopgenSettings
from shopgen.generators.ecommerce import EcommerceDataset, EcommerceGenerator

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> Generator[None, None, None]:
    """Keep structlog quiet and unconfigured between tests."""
    structlog.reset_defaults()
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(40),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clear_shopgen_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop SHOPGEN_* variables inherited from the developer shell."""
    for name in list(os.environ):
        if name.startswith("SHOPGEN_"):
            monkeypatch.delenv(name)


@pytest.fixture
def fixed_now() -> datetime:
    """The clock every generation test is anchored to."""
    return FIXED_NOW


@pytest.fixture
def small_config(fixed_now: datetime) -> GenerationConfig:
    """A dataset small enough for fast tests but with every code path hit."""
    return GenerationConfig(
        seed=42,
        now=fixed_now,
        customers=25,
        categories=10,
        products=30,
        orders=40,
    )


@pytest.fixture
def small_dataset(small_config: GenerationConfig) -> EcommerceDataset:
    """Dataset generated from small_config."""
    return EcommerceGenerator(small_config).generate_dataset()


@pytest.fixture
def settings(tmp_path: Path) -> ShopgenSettings:
    """Settings with the data directory under tmp_path."""
    return ShopgenSettings(data_dir=tmp_path / "data")


@pytest.fixture
def written_dataset(small_dataset: EcommerceDataset, settings: ShopgenSettings) -> ShopgenSettings:
    """Settings whose data directory already holds the five generated files."""
    small_dataset.write(settings.data_dir)
    return settings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner
