"""Denormalized order report over the loaded database.

One read-only join across Orders, Customers, OrderDetails, Products and
Categories, newest orders first.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from shopgen.errors import LoadError, MissingArtifactError
from shopgen.loaders.sqlite import create_engine
from shopgen.tabular import write_rows

logger = structlog.get_logger(__name__)

LOAD_COMMAND = "shopgen load"

REPORT_QUERY = text(
    """
    SELECT
      c.FirstName || ' ' || c.LastName AS CustomerName,
      o.OrderDate,
      p.ProductName,
      cat.CategoryName,
      od.Quantity,
      ROUND(od.Quantity * od.UnitPrice, 2) AS TotalPrice
    FROM Orders o
    JOIN Customers c ON o.CustomerID = c.CustomerID
    JOIN OrderDetails od ON od.OrderID = o.OrderID
    JOIN Products p ON od.ProductID = p.ProductID
    JOIN Categories cat ON p.CategoryID = cat.CategoryID
    ORDER BY o.OrderDate DESC
    """
)

REPORT_COLUMNS = ("CustomerName", "OrderDate", "ProductName", "CategoryName", "Quantity", "TotalPrice")


class ReportRow(BaseModel):
    """One line of the order report."""

    model_config = ConfigDict(frozen=True)

    customer_name: str
    order_date: str
    product_name: str
    category_name: str
    quantity: int
    total_price: float

    def as_columns(self) -> dict[str, Any]:
        """Render under the report's column headers."""
        return dict(zip(REPORT_COLUMNS, self.model_dump().values(), strict=True))


async def fetch_order_report(database_path: Path) -> list[ReportRow]:
    """Run the report query against a loaded database.

    Args:
        database_path: SQLite file produced by the load step

    Returns:
        Report rows ordered by order date, newest first

    Raises:
        MissingArtifactError: The database file does not exist
        LoadError: The query failed
    """
    if not database_path.is_file():
        raise MissingArtifactError(database_path, command=LOAD_COMMAND, what="Database")

    engine = create_engine(database_path, read_only=True)
    try:
        async with engine.connect() as conn:
            result = await conn.execute(REPORT_QUERY)
            records = result.all()
    except SQLAlchemyError as e:
        raise LoadError(
            "Report query failed",
            operation="report",
            cause=str(getattr(e, "orig", None) or e),
        ) from e
    finally:
        await engine.dispose()

    rows = [
        ReportRow(
            customer_name=r.CustomerName,
            order_date=r.OrderDate,
            product_name=r.ProductName,
            category_name=r.CategoryName,
            quantity=r.Quantity,
            total_price=r.TotalPrice,
        )
        for r in records
    ]
    logger.info("report_fetched", database=str(database_path), rows=len(rows))
    return rows


def report_to_rows(rows: list[ReportRow]) -> list[dict[str, Any]]:
    """Header-keyed dicts for the tabular serializer."""
    return [row.as_columns() for row in rows]


def write_report(rows: list[ReportRow], output_path: Path) -> Path:
    """Write the report as delimited text.

    An empty report still gets its header line.
    """
    return write_rows(output_path, report_to_rows(rows), fieldnames=REPORT_COLUMNS)
