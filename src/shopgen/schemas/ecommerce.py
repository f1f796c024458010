"""E-commerce schema definitions for synthetic data generation.

This module defines Pydantic models for the five entity kinds:
- Customer: Customer entity with unique email
- Category: Product category with optional root parent
- Product: Catalog entity with foreign key to Category
- Order: Order entity with foreign key to Customer
- OrderLine: Line item linking an Order to a Product

All models are immutable (frozen=True) and validate at construction time.
Field aliases are the column names used in the text files and the database;
``to_row`` renders a record as those columns with text values.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from typing_extensions import Self

from shopgen.distributions.temporal import format_timestamp

CENT = Decimal("0.01")

CATEGORY_ROOTS: tuple[str, ...] = (
    "Electronics",
    "Home & Kitchen",
    "Books",
    "Clothing",
    "Sports & Outdoors",
    "Automotive",
    "Beauty & Personal Care",
    "Toys & Games",
    "Grocery",
    "Health",
)

OrderStatusType = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]
ShippingMethodType = Literal["Standard", "Express", "Next-Day", "Economy"]


def round_money(value: Decimal | float) -> Decimal:
    """Round a monetary amount to cents (half-up)."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Render a monetary amount with exactly two decimals."""
    return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):f}"


class EcommerceRecord(BaseModel):
    """Base for all generated records.

    Subclasses declare ``table_name`` and ``file_name`` and alias each field to
    its column name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    table_name: ClassVar[str]
    file_name: ClassVar[str]

    @classmethod
    def columns(cls) -> list[str]:
        """Column names in declaration order."""
        return [field.alias or name for name, field in cls.model_fields.items()]

    def to_row(self) -> dict[str, str | None]:
        """Render the record as column name -> text value."""
        row: dict[str, str | None] = {}
        for name, field in type(self).model_fields.items():
            row[field.alias or name] = _render(getattr(self, name))
        return row


def _render(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Decimal):
        return format_money(value)
    return str(value)


class Customer(EcommerceRecord):
    """Customer entity.

    Attributes:
        customer_id: Unique identifier (CUST0001)
        first_name: Given name
        last_name: Family name
        email: Email address, unique across customers
        phone: Phone number
        city: Home city
        country: Home country
        created_at: Account creation timestamp (UTC)
    """

    table_name: ClassVar[str] = "Customers"
    file_name: ClassVar[str] = "customers.csv"

    customer_id: str = Field(..., alias="CustomerID", pattern=r"^CUST\d{4,}$")
    first_name: str = Field(..., alias="FirstName", min_length=1)
    last_name: str = Field(..., alias="LastName", min_length=1)
    email: str = Field(
        ...,
        alias="Email",
        pattern=r"^[\w\.\-\+]+@[\w\.\-]+\.\w+$",
        description="Email address",
    )
    phone: str = Field(..., alias="Phone")
    city: str = Field(..., alias="City")
    country: str = Field(..., alias="Country")
    created_at: datetime = Field(..., alias="CreatedAt")


class Category(EcommerceRecord):
    """Product category with an optional root parent.

    Attributes:
        category_id: Unique identifier (CAT0001)
        category_name: Display name
        department: Department label
        parent_category: Root label, or None for top-level categories
    """

    table_name: ClassVar[str] = "Categories"
    file_name: ClassVar[str] = "categories.csv"

    category_id: str = Field(..., alias="CategoryID", pattern=r"^CAT\d{4,}$")
    category_name: str = Field(..., alias="CategoryName", min_length=1)
    department: str = Field(..., alias="Department")
    parent_category: str | None = Field(default=None, alias="ParentCategory")

    @model_validator(mode="after")
    def validate_parent(self) -> Self:
        """Parent must come from the root vocabulary."""
        if self.parent_category is not None and self.parent_category not in CATEGORY_ROOTS:
            raise ValueError(f"unknown parent category: {self.parent_category!r}")
        return self


class Product(EcommerceRecord):
    """Product catalog entity.

    Unit cost is derived from price by a sampled margin and is not required
    to be below it.
    """

    table_name: ClassVar[str] = "Products"
    file_name: ClassVar[str] = "products.csv"

    product_id: str = Field(..., alias="ProductID", pattern=r"^PROD\d{5,}$")
    sku: str = Field(..., alias="SKU", pattern=r"^SKU-\d{6}$")
    product_name: str = Field(..., alias="ProductName", min_length=1)
    category_id: str = Field(..., alias="CategoryID", description="Foreign key to Category")
    unit_price: Decimal = Field(..., alias="UnitPrice", ge=Decimal("0"), decimal_places=2)
    unit_cost: Decimal = Field(..., alias="UnitCost", ge=Decimal("0"), decimal_places=2)
    stock_quantity: int = Field(..., alias="StockQuantity", ge=0)
    active: bool = Field(..., alias="Active")


class Order(EcommerceRecord):
    """Order entity with foreign key to Customer.

    ``order_total`` is zero until the line items are known; the generator
    re-issues each order with its back-filled total.
    """

    table_name: ClassVar[str] = "Orders"
    file_name: ClassVar[str] = "orders.csv"

    order_id: str = Field(..., alias="OrderID", pattern=r"^ORD\d{5,}$")
    customer_id: str = Field(..., alias="CustomerID", description="Foreign key to Customer")
    order_date: datetime = Field(..., alias="OrderDate")
    shipped_date: datetime | None = Field(default=None, alias="ShippedDate")
    order_status: OrderStatusType = Field(..., alias="OrderStatus")
    shipping_method: ShippingMethodType = Field(..., alias="ShippingMethod")
    shipping_city: str = Field(..., alias="ShippingCity")
    shipping_country: str = Field(..., alias="ShippingCountry")
    order_total: Decimal = Field(
        default=Decimal("0.00"),
        alias="OrderTotal",
        ge=Decimal("0"),
        decimal_places=2,
    )

    @model_validator(mode="after")
    def validate_shipping(self) -> Self:
        """Shipped date is present exactly for shipped statuses and follows the order."""
        shipped = self.order_status in ("Shipped", "Delivered")
        if shipped != (self.shipped_date is not None):
            raise ValueError(
                f"shipped_date must be set iff status is Shipped or Delivered "
                f"(status={self.order_status})"
            )
        if self.shipped_date is not None and self.shipped_date < self.order_date:
            raise ValueError("shipped_date precedes order_date")
        return self


class OrderLine(EcommerceRecord):
    """Order line item linking an Order to a Product.

    Example:
        >>> line = OrderLine(
        ...     order_detail_id="ORDDET000001",
        ...     order_id="ORD00001",
        ...     product_id="PROD00001",
        ...     quantity=2,
        ...     unit_price=Decimal("49.99"),
        ...     discount=Decimal("0.10"),
        ...     line_number=1,
        ... )
        >>> line.line_total
        Decimal('89.98')
    """

    table_name: ClassVar[str] = "OrderDetails"
    file_name: ClassVar[str] = "order_details.csv"

    order_detail_id: str = Field(..., alias="OrderDetailID", pattern=r"^ORDDET\d{6,}$")
    order_id: str = Field(..., alias="OrderID", description="Foreign key to Order")
    product_id: str = Field(..., alias="ProductID", description="Foreign key to Product")
    quantity: int = Field(..., alias="Quantity", ge=1)
    unit_price: Decimal = Field(..., alias="UnitPrice", ge=Decimal("0"), decimal_places=2)
    discount: Decimal = Field(
        default=Decimal("0.00"),
        alias="Discount",
        ge=Decimal("0"),
        lt=Decimal("1"),
        decimal_places=2,
    )
    line_number: int = Field(..., alias="LineNumber", ge=1)

    @computed_field(alias="LineTotal")  # type: ignore[prop-decorator]
    @property
    def line_total(self) -> Decimal:
        """Quantity x unit price x (1 - discount), rounded to cents."""
        return round_money(self.quantity * self.unit_price * (1 - self.discount))

    @classmethod
    def columns(cls) -> list[str]:
        return [*super().columns(), "LineTotal"]

    def to_row(self) -> dict[str, str | None]:
        row = super().to_row()
        row["LineTotal"] = format_money(self.line_total)
        return row


ENTITY_MODELS: tuple[type[EcommerceRecord], ...] = (Customer, Category, Product, Order, OrderLine)
