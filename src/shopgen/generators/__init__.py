"""Synthetic data generators.

This module provides generators for creating realistic test data:
- EcommerceGenerator: Customers, Categories, Products, Orders, OrderLines

All generators support:
- Deterministic seeding for reproducible datasets
- Weighted distributions for realistic data patterns
- Foreign key relationships between entities
"""

from __future__ import annotations

from shopgen.generators.base import DataGenerator
from shopgen.generators.ecommerce import EcommerceDataset, EcommerceGenerator

__all__ = [
    "DataGenerator",
    "EcommerceDataset",
    "EcommerceGenerator",
]
