"""Relational schema for the e-commerce database.

Five SQLAlchemy Core tables with primary keys, NOT NULL and CHECK
constraints, and the foreign keys:

- Products.CategoryID -> Categories.CategoryID
- Orders.CustomerID -> Customers.CustomerID
- OrderDetails.OrderID -> Orders.OrderID
- OrderDetails.ProductID -> Products.ProductID

SQLite only enforces foreign keys when ``PRAGMA foreign_keys=ON`` is set on
the connection; ``enable_foreign_keys`` installs that on an engine.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Column,
    Engine,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    Table,
    Text,
    event,
    text,
)

metadata = MetaData()

customers = Table(
    "Customers",
    metadata,
    Column("CustomerID", Text, primary_key=True),
    Column("FirstName", Text, nullable=False),
    Column("LastName", Text, nullable=False),
    Column("Email", Text, nullable=False),
    Column("Phone", Text),
    Column("City", Text),
    Column("Country", Text),
    Column("CreatedAt", Text, nullable=False),
)

categories = Table(
    "Categories",
    metadata,
    Column("CategoryID", Text, primary_key=True),
    Column("CategoryName", Text, nullable=False),
    Column("Department", Text),
    Column("ParentCategory", Text),
)

products = Table(
    "Products",
    metadata,
    Column("ProductID", Text, primary_key=True),
    Column("SKU", Text, nullable=False),
    Column("ProductName", Text, nullable=False),
    Column("CategoryID", Text, ForeignKey("Categories.CategoryID"), nullable=False),
    Column("UnitPrice", Float, nullable=False),
    Column("UnitCost", Float, nullable=False),
    Column("StockQuantity", Integer, nullable=False),
    Column("Active", Integer, nullable=False),
    CheckConstraint('"Active" IN (0, 1)', name="ck_products_active"),
)

orders = Table(
    "Orders",
    metadata,
    Column("OrderID", Text, primary_key=True),
    Column("CustomerID", Text, ForeignKey("Customers.CustomerID"), nullable=False),
    Column("OrderDate", Text, nullable=False),
    Column("ShippedDate", Text),
    Column("OrderStatus", Text, nullable=False),
    Column("ShippingMethod", Text),
    Column("ShippingCity", Text),
    Column("ShippingCountry", Text),
    Column("OrderTotal", Float, nullable=False, server_default=text("0")),
)

order_details = Table(
    "OrderDetails",
    metadata,
    Column("OrderDetailID", Text, primary_key=True),
    Column("OrderID", Text, ForeignKey("Orders.OrderID"), nullable=False),
    Column("ProductID", Text, ForeignKey("Products.ProductID"), nullable=False),
    Column("Quantity", Integer, nullable=False),
    Column("UnitPrice", Float, nullable=False),
    Column("Discount", Float, nullable=False, server_default=text("0")),
    Column("LineNumber", Integer, nullable=False),
    Column("LineTotal", Float, nullable=False),
)


def get_table(name: str) -> Table:
    """Look up a declared table by name."""
    return metadata.tables[name]


def enable_foreign_keys(engine: Engine) -> None:
    """Turn on SQLite foreign key enforcement for every new connection.

    Args:
        engine: Synchronous engine (``AsyncEngine.sync_engine`` for async use)
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
