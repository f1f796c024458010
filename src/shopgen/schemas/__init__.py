"""Pydantic schemas for synthetic data generation.

This module provides type-safe Pydantic models for the e-commerce entities:
Customers, Categories, Products, Orders and OrderLines.
"""

from __future__ import annotations

from shopgen.schemas.ecommerce import (
    ENTITY_MODELS,
    Category,
    Customer,
    EcommerceRecord,
    Order,
    OrderLine,
    Product,
)

__all__ = [
    "ENTITY_MODELS",
    "EcommerceRecord",
    "Customer",
    "Category",
    "Product",
    "Order",
    "OrderLine",
]
