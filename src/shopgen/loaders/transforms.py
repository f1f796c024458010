"""Per-table field transforms from parsed text to column values.

Each table has a TableSpec: its name, its source file and an ordered list of
(column, converter) pairs. Converters turn the parser's strings into the
values bound to the INSERT:

- text: unchanged
- optional_text: ``""`` becomes ``None``
- to_float / to_int: finite numbers only, no empty values or digit separators
- to_bool_int: ``true``/``false``/``1``/``0`` (any case) to ``1``/``0``
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import math
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from shopgen.errors import TransformError
from shopgen.schemas.ecommerce import Category, Customer, Order, OrderLine, Product

Converter = Callable[[str], Any]

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


def text(value: str) -> str:
    return value


def optional_text(value: str) -> str | None:
    return value or None


def to_float(value: str) -> float:
    if not value.strip():
        raise ValueError("empty numeric value")
    if "_" in value:
        raise ValueError(f"digit separators not allowed: {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


def to_int(value: str) -> int:
    if not value.strip():
        raise ValueError("empty integer value")
    if "_" in value:
        raise ValueError(f"digit separators not allowed: {value!r}")
    return int(value)


def to_bool_int(value: str) -> int:
    normalised = value.strip().lower()
    if normalised in _TRUE_VALUES:
        return 1
    if normalised in _FALSE_VALUES:
        return 0
    raise ValueError(f"not a boolean: {value!r}")


class TableSpec(BaseModel):
    """How one source file maps onto one table.

    Attributes:
        table_name: Target table
        file_name: Source text file name inside the data directory
        columns: Ordered (column, converter) pairs
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    table_name: str
    file_name: str
    columns: tuple[tuple[str, Converter], ...]

    @property
    def column_names(self) -> list[str]:
        return [name for name, _ in self.columns]

    def transform_row(
        self, row: Mapping[str, str], *, row_number: int, source: str | Path
    ) -> dict[str, Any]:
        """Convert one parsed row into column values.

        Args:
            row: Header-keyed text fields
            row_number: 1-based data row index, for error messages
            source: Source file, for error messages

        Raises:
            TransformError: If a column is missing or its value does not parse
        """
        values: dict[str, Any] = {}
        for column, converter in self.columns:
            if column not in row:
                raise TransformError(
                    f"Missing column {column}",
                    table=self.table_name,
                    source=source,
                    row=row_number,
                    column=column,
                )
            try:
                values[column] = converter(row[column])
            except ValueError as e:
                raise TransformError(
                    f"Invalid value {row[column]!r}: {e}",
                    table=self.table_name,
                    source=source,
                    row=row_number,
                    column=column,
                ) from e
        return values

    def transform(self, rows: Sequence[Mapping[str, str]], source: str | Path) -> list[dict[str, Any]]:
        """Convert every parsed row of a file; fails on the first bad value."""
        return [
            self.transform_row(row, row_number=index, source=source)
            for index, row in enumerate(rows, start=1)
        ]


CUSTOMERS = TableSpec(
    table_name=Customer.table_name,
    file_name=Customer.file_name,
    columns=(
        ("CustomerID", text),
        ("FirstName", text),
        ("LastName", text),
        ("Email", text),
        ("Phone", text),
        ("City", text),
        ("Country", text),
        ("CreatedAt", text),
    ),
)

CATEGORIES = TableSpec(
    table_name=Category.table_name,
    file_name=Category.file_name,
    columns=(
        ("CategoryID", text),
        ("CategoryName", text),
        ("Department", text),
        ("ParentCategory", optional_text),
    ),
)

PRODUCTS = TableSpec(
    table_name=Product.table_name,
    file_name=Product.file_name,
    columns=(
        ("ProductID", text),
        ("SKU", text),
        ("ProductName", text),
        ("CategoryID", text),
        ("UnitPrice", to_float),
        ("UnitCost", to_float),
        ("StockQuantity", to_int),
        ("Active", to_bool_int),
    ),
)

ORDERS = TableSpec(
    table_name=Order.table_name,
    file_name=Order.file_name,
    columns=(
        ("OrderID", text),
        ("CustomerID", text),
        ("OrderDate", text),
        ("ShippedDate", optional_text),
        ("OrderStatus", text),
        ("ShippingMethod", text),
        ("ShippingCity", text),
        ("ShippingCountry", text),
        ("OrderTotal", to_float),
    ),
)

ORDER_DETAILS = TableSpec(
    table_name=OrderLine.table_name,
    file_name=OrderLine.file_name,
    columns=(
        ("OrderDetailID", text),
        ("OrderID", text),
        ("ProductID", text),
        ("Quantity", to_int),
        ("UnitPrice", to_float),
        ("Discount", to_float),
        ("LineNumber", to_int),
        ("LineTotal", to_float),
    ),
)

# Parents before children so foreign key checks pass during load.
LOAD_ORDER: tuple[TableSpec, ...] = (CUSTOMERS, CATEGORIES, PRODUCTS, ORDERS, ORDER_DETAILS)
