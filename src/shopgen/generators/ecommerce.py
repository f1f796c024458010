"""E-commerce data generator.

This module provides the EcommerceGenerator for generating a referentially
consistent e-commerce dataset: customers, categories, products, orders and
order lines.

Features:
- Deterministic seeding: one RandomSource drives every draw, in a fixed order
- Explicit clock: ``now`` comes from GenerationConfig, never from the system
- Weighted order statuses
- Foreign key relationships maintained
- Order totals computed as a fold over the generated lines
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict

from shopgen.config import GenerationConfig
from shopgen.distributions.temporal import add_days
from shopgen.distributions.weighted import ORDER_STATUS_DISTRIBUTION, SHIPPED_STATUSES
from shopgen.generators.base import DataGenerator, format_id, pick_unique
from shopgen.schemas.ecommerce import (
    CATEGORY_ROOTS,
    Category,
    Customer,
    EcommerceRecord,
    Order,
    OrderLine,
    Product,
)
from shopgen.tabular import write_rows

logger = structlog.get_logger(__name__)

FIRST_NAMES = (
    "Liam", "Emma", "Noah", "Olivia", "Ava", "Isabella", "Sophia", "Mia",
    "Charlotte", "Amelia", "Ethan", "James", "Benjamin", "Lucas", "Mason",
    "Logan", "Elijah", "Alexander", "Henry", "Sebastian",
)  # fmt: skip

LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller",
    "Davis", "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez",
    "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
)  # fmt: skip

EMAIL_DOMAINS = ("example.com", "mail.com", "shopper.net", "customer.org")

CITIES = (
    "New York", "Los Angeles", "Chicago", "Houston", "Phoenix", "Philadelphia",
    "San Antonio", "San Diego", "Dallas", "San Jose", "Austin", "Jacksonville",
    "Fort Worth", "Columbus", "Charlotte", "San Francisco", "Indianapolis",
    "Seattle", "Denver", "Washington",
)  # fmt: skip

COUNTRIES = (
    "USA", "Canada", "United Kingdom", "Germany", "France", "Australia",
    "Spain", "Italy", "Netherlands", "Sweden",
)  # fmt: skip

DEPARTMENTS = (
    "Accessories", "Audio", "Bedding", "Camera", "Computers", "Decor",
    "Fitness", "Footwear", "Garden", "Kids", "Lighting", "Mobile", "Office",
    "Outdoor", "Pets", "Storage", "Tools", "Wellness",
)  # fmt: skip

PRODUCT_ADJECTIVES = (
    "Premium", "Advanced", "Eco", "Compact", "Wireless", "Portable", "Smart",
    "Classic", "Deluxe", "Essential", "Limited", "Modern", "Rustic", "Ultra",
    "Vintage",
)  # fmt: skip

PRODUCT_NOUNS = (
    "Headphones", "Laptop", "Backpack", "Mixer", "Sneakers", "Jacket", "Desk",
    "Chair", "Watch", "Camera", "Speaker", "Blender", "Cookware Set",
    "Treadmill", "Yoga Mat", "Vacuum", "Coffee Maker", "Guitar", "Drill",
    "Smartphone", "Tablet", "Monitor", "Printer", "Router",
)  # fmt: skip

SHIPPING_METHODS = ("Standard", "Express", "Next-Day", "Economy")

# Repeated zeros weight the uniform draw toward no discount.
DISCOUNTS = tuple(Decimal(d) for d in ("0.00", "0.00", "0.00", "0.05", "0.10", "0.15"))

PARENT_PROBABILITY = 0.7
INACTIVE_PROBABILITY = 0.1
MIN_PRICE = 5.0
MAX_PRICE = 1200.0
MIN_MARGIN = 0.4
MAX_MARGIN = 0.7
MAX_STOCK = 500
MIN_SHIPPING_DAYS = 2
MAX_SHIPPING_DAYS = 14
MAX_LINE_QUANTITY = 5


def _to_cents(value: float) -> Decimal:
    """Round a float to a two-decimal Decimal."""
    return Decimal(f"{value:.2f}")


class EcommerceDataset(BaseModel):
    """The five generated entity lists, in generation order.

    Attributes:
        customers: Generated customers
        categories: Generated categories
        products: Generated products (reference categories)
        orders: Generated orders with back-filled totals
        order_lines: Generated order lines (reference orders and products)
    """

    model_config = ConfigDict(frozen=True)

    customers: list[Customer]
    categories: list[Category]
    products: list[Product]
    orders: list[Order]
    order_lines: list[OrderLine]

    def tables(self) -> Iterator[tuple[type[EcommerceRecord], Sequence[EcommerceRecord]]]:
        """Yield (model, records) pairs in foreign-key dependency order."""
        yield Customer, self.customers
        yield Category, self.categories
        yield Product, self.products
        yield Order, self.orders
        yield OrderLine, self.order_lines

    def write(self, data_dir: Path) -> list[Path]:
        """Write one text file per entity kind into ``data_dir``.

        Args:
            data_dir: Target directory, created if missing

        Returns:
            Written file paths in dependency order
        """
        data_dir.mkdir(parents=True, exist_ok=True)
        paths: list[Path] = []
        for model, records in self.tables():
            path = write_rows(
                data_dir / model.file_name,
                (record.to_row() for record in records),
                fieldnames=model.columns(),
            )
            logger.info("entity_written", entity=model.table_name, rows=len(records), path=str(path))
            paths.append(path)
        return paths


def compute_order_totals(lines: Iterable[OrderLine]) -> dict[str, Decimal]:
    """Group lines by order id and sum their line totals."""
    totals: defaultdict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
    for line in lines:
        totals[line.order_id] += line.line_total
    return dict(totals)


def apply_order_totals(orders: Iterable[Order], totals: dict[str, Decimal]) -> list[Order]:
    """Re-issue each order with its total; orders without lines total 0.00."""
    return [
        order.model_copy(update={"order_total": totals.get(order.order_id, Decimal("0.00"))})
        for order in orders
    ]


class EcommerceGenerator(DataGenerator):
    """Generator for a referentially consistent e-commerce dataset.

    Every value comes from the generator's RandomSource, consumed in a fixed
    order per record, so equal configs produce equal datasets.

    Attributes:
        config: Generation parameters, including the clock
        source: Random stream seeded from ``config.seed``

    Example:
        >>> config = GenerationConfig(now=datetime(2025, 1, 1, tzinfo=timezone.utc))
        >>> dataset = EcommerceGenerator(config).generate_dataset()
        >>> len(dataset.customers)
        1000
    """

    def __init__(self, config: GenerationConfig) -> None:
        """Initialize the generator.

        Args:
            config: Generation parameters. Same config produces identical data
                    across runs.
        """
        super().__init__(seed=config.seed)
        self.config = config

    def generate_customers(self, count: int | None = None) -> list[Customer]:
        """Generate customers with unique emails.

        Per customer the stream is consumed as: first name, last name, email
        domain, created timestamp, phone (two integers), city, country.

        Args:
            count: Number of customers (default: config.customers)

        Returns:
            Customers CUST0001..CUSTnnnn
        """
        count = self.config.customers if count is None else count
        customers: list[Customer] = []
        seen_emails: set[str] = set()

        for i in range(1, count + 1):
            first = self.source.choice(FIRST_NAMES)
            last = self.source.choice(LAST_NAMES)
            domain = self.source.choice(EMAIL_DOMAINS)
            email = _unique_email(f"{first.lower()}.{last.lower()}", domain, seen_emails)
            created_at = self.source.timestamp_between(self.config.start_date, self.config.now)
            area = self.source.randint(100, 999)
            line = self.source.randint(1000, 9999)

            customers.append(
                Customer(
                    customer_id=format_id("CUST", i, 4),
                    first_name=first,
                    last_name=last,
                    email=email,
                    phone=f"+1-555-{area:03d}-{line:04d}",
                    city=self.source.choice(CITIES),
                    country=self.source.choice(COUNTRIES),
                    created_at=created_at,
                )
            )

        self._log_generation("customers", len(customers))
        return customers

    def generate_categories(self, count: int | None = None) -> list[Category]:
        """Generate categories, about 70% of them under a root parent.

        Args:
            count: Number of categories (default: config.categories)

        Returns:
            Categories CAT0001..CATnnnn
        """
        count = self.config.categories if count is None else count
        categories: list[Category] = []

        for i in range(1, count + 1):
            root = self.source.choice(CATEGORY_ROOTS)
            department = self.source.choice(DEPARTMENTS)
            has_parent = self.source.random() < PARENT_PROBABILITY
            categories.append(
                Category(
                    category_id=format_id("CAT", i, 4),
                    category_name=f"{root} - {department} {i}",
                    department=department,
                    parent_category=root if has_parent else None,
                )
            )

        self._log_generation("categories", len(categories))
        return categories

    def generate_products(
        self,
        categories: Sequence[Category],
        count: int | None = None,
    ) -> list[Product]:
        """Generate products, each referencing a uniformly chosen category.

        Args:
            categories: Existing categories to reference
            count: Number of products (default: config.products)

        Returns:
            Products PROD00001..PRODnnnnn
        """
        count = self.config.products if count is None else count
        products: list[Product] = []

        for i in range(1, count + 1):
            adjective = self.source.choice(PRODUCT_ADJECTIVES)
            noun = self.source.choice(PRODUCT_NOUNS)
            category = self.source.choice(categories)
            price = _to_cents(MIN_PRICE + self.source.random() * (MAX_PRICE - MIN_PRICE))
            margin = MIN_MARGIN + self.source.random() * (MAX_MARGIN - MIN_MARGIN)
            cost = _to_cents(float(price) * margin)
            products.append(
                Product(
                    product_id=format_id("PROD", i, 5),
                    sku=f"SKU-{self.source.randint(100000, 999999)}",
                    product_name=f"{adjective} {noun}",
                    category_id=category.category_id,
                    unit_price=price,
                    unit_cost=cost,
                    stock_quantity=self.source.randint(0, MAX_STOCK),
                    active=self.source.random() > INACTIVE_PROBABILITY,
                )
            )

        self._log_generation("products", len(products))
        return products

    def generate_orders(
        self,
        customers: Sequence[Customer],
        count: int | None = None,
    ) -> list[Order]:
        """Generate orders with zero totals.

        The shipping lag is drawn for every order so the stream position does
        not depend on the status; it is only applied to shipped statuses.

        Args:
            customers: Existing customers to reference
            count: Number of orders (default: config.orders)

        Returns:
            Orders ORD00001..ORDnnnnn, totals not yet back-filled
        """
        count = self.config.orders if count is None else count
        orders: list[Order] = []

        for i in range(1, count + 1):
            customer = self.source.choice(customers)
            order_date = self.source.timestamp_between(customer.created_at, self.config.now)
            shipping_days = self.source.randint(MIN_SHIPPING_DAYS, MAX_SHIPPING_DAYS)
            status = ORDER_STATUS_DISTRIBUTION.sample_one(self.source)
            shipped_date = add_days(order_date, shipping_days) if status in SHIPPED_STATUSES else None

            orders.append(
                Order(
                    order_id=format_id("ORD", i, 5),
                    customer_id=customer.customer_id,
                    order_date=order_date,
                    shipped_date=shipped_date,
                    order_status=status,
                    shipping_method=self.source.choice(SHIPPING_METHODS),
                    shipping_city=self.source.choice(CITIES),
                    shipping_country=self.source.choice(COUNTRIES),
                )
            )

        self._log_generation("orders", len(orders))
        return orders

    def generate_order_lines(
        self,
        orders: Sequence[Order],
        products: Sequence[Product],
    ) -> list[OrderLine]:
        """Generate line items, with distinct products within each order.

        Args:
            orders: Orders to fill
            products: Product pool; sampled without replacement per order

        Returns:
            Lines ORDDET000001.. numbered globally, LineNumber 1-based per order
        """
        lines: list[OrderLine] = []

        for order in orders:
            item_count = self.source.randint(
                self.config.min_items_per_order, self.config.max_items_per_order
            )
            picked = pick_unique(self.source, products, item_count)
            if len(picked) < item_count:
                logger.debug(
                    "product_pool_exhausted",
                    order_id=order.order_id,
                    requested=item_count,
                    picked=len(picked),
                )
            for line_number, product in enumerate(picked, start=1):
                quantity = self.source.randint(1, MAX_LINE_QUANTITY)
                discount = self.source.choice(DISCOUNTS)
                lines.append(
                    OrderLine(
                        order_detail_id=format_id("ORDDET", len(lines) + 1, 6),
                        order_id=order.order_id,
                        product_id=product.product_id,
                        quantity=quantity,
                        unit_price=product.unit_price,
                        discount=discount,
                        line_number=line_number,
                    )
                )

        self._log_generation("order_lines", len(lines))
        return lines

    def generate_dataset(self) -> EcommerceDataset:
        """Generate all five entity kinds in dependency order.

        Customers -> Categories -> Products -> Orders -> OrderLines, then the
        order totals are folded from the lines and applied to the orders.

        Returns:
            EcommerceDataset with back-filled order totals
        """
        customers = self.generate_customers()
        categories = self.generate_categories()
        products = self.generate_products(categories)
        draft_orders = self.generate_orders(customers)
        order_lines = self.generate_order_lines(draft_orders, products)
        orders = apply_order_totals(draft_orders, compute_order_totals(order_lines))

        return EcommerceDataset(
            customers=customers,
            categories=categories,
            products=products,
            orders=orders,
            order_lines=order_lines,
        )


def _unique_email(local_part: str, domain: str, seen: set[str]) -> str:
    """Return ``local@domain``, suffixing 1, 2, ... to the local part on collision.

    Adds the result to ``seen``.
    """
    email = f"{local_part}@{domain}"
    counter = 1
    while email in seen:
        email = f"{local_part}{counter}@{domain}"
        counter += 1
    seen.add(email)
    return email


def generate_dataset(config: GenerationConfig) -> EcommerceDataset:
    """Generate a dataset from a config in one call."""
    return EcommerceGenerator(config).generate_dataset()


def generation_now() -> datetime:
    """Current UTC time, for callers that anchor a run at the present."""
    return datetime.now(timezone.utc)
