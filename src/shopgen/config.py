"""Configuration models for shopgen.

This module provides:
- GenerationConfig: immutable knobs for one dataset generation run
- ShopgenSettings: environment-driven paths and defaults for the CLI

The generation clock is part of GenerationConfig. Nothing in the generation
stage reads the wall clock, so a fixed ``now`` reproduces a dataset exactly.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from shopgen.distributions.temporal import ensure_utc, truncate_to_millis

DEFAULT_LOOKBACK_DAYS = 3 * 365

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class GenerationConfig(BaseModel):
    """Parameters for one synthetic dataset.

    Example:
        >>> config = GenerationConfig(now=datetime(2025, 1, 1, tzinfo=timezone.utc))
        >>> config.start_date
        datetime.datetime(2022, 1, 2, 0, 0, tzinfo=datetime.timezone.utc)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: int = Field(default=42, description="Seed for the random stream")
    now: datetime = Field(..., description="End of every generated time window")
    customers: int = Field(default=1000, ge=1, description="Customer count")
    categories: int = Field(default=1000, ge=1, description="Category count")
    products: int = Field(default=1000, ge=1, description="Product count")
    orders: int = Field(default=1000, ge=1, description="Order count")
    min_items_per_order: int = Field(default=1, ge=1, description="Fewest lines per order")
    max_items_per_order: int = Field(default=6, ge=1, description="Most lines per order")
    lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS,
        ge=0,
        description="Width of the customer signup window ending at now",
    )

    @field_validator("now")
    @classmethod
    def normalise_now(cls, v: datetime) -> datetime:
        """Store now as a millisecond-precision UTC timestamp."""
        return truncate_to_millis(ensure_utc(v))

    @model_validator(mode="after")
    def validate_item_range(self) -> Self:
        """Ensure the per-order item range is not inverted."""
        if self.min_items_per_order > self.max_items_per_order:
            msg = (
                f"min_items_per_order ({self.min_items_per_order}) exceeds "
                f"max_items_per_order ({self.max_items_per_order})"
            )
            raise ValueError(msg)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def start_date(self) -> datetime:
        """Start of the customer signup window."""
        return self.now - timedelta(days=self.lookback_days)


class ShopgenSettings(BaseSettings):
    """Paths and defaults for the CLI steps.

    Can be loaded from environment variables with SHOPGEN_ prefix.

    Example:
        >>> settings = ShopgenSettings(data_dir=Path("/tmp/shop"))
        >>> settings.database_path
        PosixPath('/tmp/shop/ecommerce.db')
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOPGEN_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the generated text files and the database",
    )
    database_name: str = Field(
        default="ecommerce.db",
        description="SQLite file name inside data_dir",
    )
    seed: int = Field(default=42, description="Seed used by the generate step")
    log_level: LogLevel = Field(default="WARNING", description="structlog level filter")

    @property
    def database_path(self) -> Path:
        """Location of the SQLite database file."""
        return self.data_dir / self.database_name

    def source_path(self, file_name: str) -> Path:
        """Location of one generated text file."""
        return self.data_dir / file_name

    def generation_config(self, now: datetime) -> GenerationConfig:
        """Build the GenerationConfig for a run anchored at ``now``."""
        return GenerationConfig(seed=self.seed, now=now)
