"""Synthetic e-commerce dataset generation and SQLite loading.

This package generates a referentially consistent e-commerce dataset from a
seeded random stream, writes it as comma-delimited text, and loads the text
into a SQLite database with enforced foreign keys.

Key Components:
- distributions: Deterministic random stream and weighted choices
- generators: Entity generators for customers, categories, products, orders
- schemas: Pydantic models defining the records
- tabular: Delimited text serializer and parser
- loaders: SQLite schema, field transforms and transactional bulk load
- report: Denormalized order report over the loaded database
- cli: ``shopgen generate | load | report``

Example:
    >>> import asyncio
    >>> from datetime import datetime, timezone
    >>> from shopgen.config import ShopgenSettings
    >>> from shopgen.generators.ecommerce import EcommerceGenerator
    >>> from shopgen.loaders.sqlite import SqliteLoader
    >>>
    >>> settings = ShopgenSettings()
    >>> config = settings.generation_config(now=datetime(2025, 1, 1, tzinfo=timezone.utc))
    >>> EcommerceGenerator(config).generate_dataset().write(settings.data_dir)
    >>> results = asyncio.run(SqliteLoader(settings).load_all())
"""

from __future__ import annotations

__version__ = "0.1.0"
