"""Unit tests for the e-commerce data generator.

Tests cover:
- Deterministic seeding and reproducibility
- Identifier formats and uniqueness
- Foreign key relationships
- Order status, shipping dates and totals
- Line item counts and distinct products per order
- Written files
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from shopgen.config import GenerationConfig
from shopgen.distributions.random_source import RandomSource
from shopgen.generators.base import format_id, pick_unique
from shopgen.generators.ecommerce import (
    DISCOUNTS,
    EcommerceDataset,
    EcommerceGenerator,
    _unique_email,
    apply_order_totals,
    compute_order_totals,
    generate_dataset,
)
from shopgen.schemas.ecommerce import CATEGORY_ROOTS, Order, OrderLine
from shopgen.tabular import read_rows

pytestmark = pytest.mark.unit


class TestHelpers:
    """Tests for id formatting, unique picks and email de-duplication."""

    def test_format_id(self) -> None:
        """Ids are zero padded to a minimum width."""
        assert format_id("CUST", 1, 4) == "CUST0001"
        assert format_id("ORDDET", 42, 6) == "ORDDET000042"
        assert format_id("CAT", 12345, 4) == "CAT12345"

    def test_pick_unique_distinct(self) -> None:
        """Picks never repeat an element."""
        picked = pick_unique(RandomSource(seed=3), list(range(10)), 6)

        assert len(picked) == 6
        assert len(set(picked)) == 6

    def test_pick_unique_does_not_mutate_pool(self) -> None:
        """The caller's pool is left untouched."""
        pool = ["a", "b", "c", "d"]
        pick_unique(RandomSource(seed=3), pool, 3)

        assert pool == ["a", "b", "c", "d"]

    def test_pick_unique_exhausts_small_pool(self) -> None:
        """Asking for more than the pool returns the whole pool once."""
        source = RandomSource(seed=3)
        picked = pick_unique(source, ["a", "b"], 5)

        assert sorted(picked) == ["a", "b"]
        assert source.draws == 2

    def test_pick_unique_zero(self) -> None:
        """A zero request draws nothing."""
        source = RandomSource(seed=3)

        assert pick_unique(source, ["a"], 0) == []
        assert source.draws == 0

    def test_unique_email_suffixes(self) -> None:
        """Collisions get numeric suffixes on the local part."""
        seen: set[str] = set()

        assert _unique_email("ava.brown", "example.com", seen) == "ava.brown@example.com"
        assert _unique_email("ava.brown", "example.com", seen) == "ava.brown1@example.com"
        assert _unique_email("ava.brown", "example.com", seen) == "ava.brown2@example.com"
        assert _unique_email("ava.brown", "mail.com", seen) == "ava.brown@mail.com"


class TestDeterminism:
    """Same config, same dataset."""

    def test_same_config_same_dataset(self, small_config: GenerationConfig) -> None:
        """Two generators with one config agree record for record."""
        a = EcommerceGenerator(small_config).generate_dataset()
        b = EcommerceGenerator(small_config).generate_dataset()

        assert a == b

    def test_reset_replays_dataset(self, small_config: GenerationConfig) -> None:
        """Resetting the stream reproduces the dataset."""
        generator = EcommerceGenerator(small_config)
        first = generator.generate_dataset()
        generator.reset()

        assert generator.generate_dataset() == first

    def test_different_seed_differs(self, small_config: GenerationConfig) -> None:
        """Changing the seed changes the data."""
        other = small_config.model_copy(update={"seed": 7})

        assert generate_dataset(small_config) != generate_dataset(other)

    def test_written_files_byte_identical(
        self, small_config: GenerationConfig, tmp_path: Path
    ) -> None:
        """Two runs write byte-identical files."""
        generate_dataset(small_config).write(tmp_path / "a")
        generate_dataset(small_config).write(tmp_path / "b")

        for path in sorted((tmp_path / "a").iterdir()):
            assert path.read_bytes() == (tmp_path / "b" / path.name).read_bytes()


class TestEntities:
    """Structure of each generated entity list."""

    def test_counts(self, small_dataset: EcommerceDataset, small_config: GenerationConfig) -> None:
        """Entity counts follow the config."""
        assert len(small_dataset.customers) == small_config.customers
        assert len(small_dataset.categories) == small_config.categories
        assert len(small_dataset.products) == small_config.products
        assert len(small_dataset.orders) == small_config.orders

    def test_sequential_ids(self, small_dataset: EcommerceDataset) -> None:
        """Ids are numbered from 1 in generation order."""
        assert small_dataset.customers[0].customer_id == "CUST0001"
        assert small_dataset.categories[0].category_id == "CAT0001"
        assert small_dataset.products[0].product_id == "PROD00001"
        assert small_dataset.orders[-1].order_id == "ORD00040"
        assert [line.order_detail_id for line in small_dataset.order_lines[:2]] == [
            "ORDDET000001",
            "ORDDET000002",
        ]

    def test_seed_42_first_customer(self, small_dataset: EcommerceDataset) -> None:
        """Seed 42 yields the reference first customer."""
        first = small_dataset.customers[0]

        assert first.customer_id == "CUST0001"
        assert first.first_name == "Benjamin"
        assert first.last_name == "Rodriguez"
        assert first.email == "benjamin.rodriguez@customer.org"

    def test_unique_emails(self) -> None:
        """Emails stay unique even when names collide."""
        config = GenerationConfig(now=datetime(2025, 1, 1), customers=2000, orders=1)
        customers = EcommerceGenerator(config).generate_customers()

        emails = [c.email for c in customers]
        assert len(set(emails)) == len(emails)

    def test_customer_created_within_window(
        self, small_dataset: EcommerceDataset, small_config: GenerationConfig
    ) -> None:
        """Signup dates fall in [now - lookback, now]."""
        for customer in small_dataset.customers:
            assert small_config.start_date <= customer.created_at <= small_config.now

    def test_category_parents(self, small_dataset: EcommerceDataset) -> None:
        """Parents are root labels and names embed the sequence number."""
        for index, category in enumerate(small_dataset.categories, start=1):
            assert category.parent_category is None or category.parent_category in CATEGORY_ROOTS
            assert category.category_name.endswith(f" {index}")

    def test_products_reference_categories(self, small_dataset: EcommerceDataset) -> None:
        """Every product points at a generated category."""
        category_ids = {c.category_id for c in small_dataset.categories}

        assert all(p.category_id in category_ids for p in small_dataset.products)

    def test_product_prices(self, small_dataset: EcommerceDataset) -> None:
        """Prices are in range and costs follow the sampled margin."""
        for product in small_dataset.products:
            assert Decimal("5.00") <= product.unit_price <= Decimal("1200.00")
            assert product.unit_cost <= product.unit_price
            assert 0 <= product.stock_quantity <= 500

    def test_orders_reference_customers(self, small_dataset: EcommerceDataset) -> None:
        """Every order belongs to a generated customer and follows signup."""
        customers = {c.customer_id: c for c in small_dataset.customers}

        for order in small_dataset.orders:
            customer = customers[order.customer_id]
            assert customer.created_at <= order.order_date

    def test_shipping_dates(self, small_dataset: EcommerceDataset) -> None:
        """Shipped orders ship 2 to 14 whole days after ordering."""
        for order in small_dataset.orders:
            if order.order_status in ("Shipped", "Delivered"):
                assert order.shipped_date is not None
                lag = order.shipped_date - order.order_date
                assert timedelta(days=2) <= lag <= timedelta(days=14)
                assert lag % timedelta(days=1) == timedelta(0)
            else:
                assert order.shipped_date is None


class TestOrderLines:
    """Line items and the totals folded from them."""

    def test_lines_reference_orders_and_products(self, small_dataset: EcommerceDataset) -> None:
        """Lines point at generated orders and products."""
        order_ids = {o.order_id for o in small_dataset.orders}
        product_ids = {p.product_id for p in small_dataset.products}

        for line in small_dataset.order_lines:
            assert line.order_id in order_ids
            assert line.product_id in product_ids

    def test_line_counts_and_numbers(self, small_dataset: EcommerceDataset) -> None:
        """Each order has 1 to 6 lines numbered 1..n with distinct products."""
        by_order: defaultdict[str, list[OrderLine]] = defaultdict(list)
        for line in small_dataset.order_lines:
            by_order[line.order_id].append(line)

        assert set(by_order) == {o.order_id for o in small_dataset.orders}
        for lines in by_order.values():
            assert 1 <= len(lines) <= 6
            assert [line.line_number for line in lines] == list(range(1, len(lines) + 1))
            assert len({line.product_id for line in lines}) == len(lines)

    def test_line_values(self, small_dataset: EcommerceDataset) -> None:
        """Quantities, discounts and unit prices come from their sources."""
        prices = {p.product_id: p.unit_price for p in small_dataset.products}

        for line in small_dataset.order_lines:
            assert 1 <= line.quantity <= 5
            assert line.discount in DISCOUNTS
            assert line.unit_price == prices[line.product_id]

    def test_order_totals_equal_line_sums(self, small_dataset: EcommerceDataset) -> None:
        """Each order total is exactly the sum of its line totals."""
        sums: Counter[str] = Counter()
        for line in small_dataset.order_lines:
            sums[line.order_id] += line.line_total

        for order in small_dataset.orders:
            assert order.order_total == sums[order.order_id]

    def test_small_product_pool(self, fixed_now: datetime) -> None:
        """Orders asking for more products than exist get the whole pool."""
        config = GenerationConfig(
            now=fixed_now,
            customers=3,
            categories=1,
            products=2,
            orders=20,
            min_items_per_order=4,
            max_items_per_order=6,
        )
        dataset = generate_dataset(config)

        counts = Counter(line.order_id for line in dataset.order_lines)
        assert set(counts.values()) == {2}

    def test_apply_totals_defaults_to_zero(self, small_dataset: EcommerceDataset) -> None:
        """Orders without lines keep a zero total."""
        order: Order = small_dataset.orders[0]
        totals = compute_order_totals([])

        assert apply_order_totals([order], totals)[0].order_total == Decimal("0.00")


class TestWrite:
    """Tests for EcommerceDataset.write."""

    def test_writes_five_files(self, small_dataset: EcommerceDataset, tmp_path: Path) -> None:
        """One file per entity, in dependency order."""
        paths = small_dataset.write(tmp_path / "out")

        assert [p.name for p in paths] == [
            "customers.csv",
            "categories.csv",
            "products.csv",
            "orders.csv",
            "order_details.csv",
        ]

    def test_written_rows_match_records(
        self, small_dataset: EcommerceDataset, tmp_path: Path
    ) -> None:
        """Files parse back to the records' text rendering."""
        small_dataset.write(tmp_path)

        orders = read_rows(tmp_path / "orders.csv")
        assert len(orders) == len(small_dataset.orders)
        expected = {k: v or "" for k, v in small_dataset.orders[0].to_row().items()}
        assert orders[0] == expected

        details = read_rows(tmp_path / "order_details.csv")
        assert list(details[0]) == OrderLine.columns()

    def test_first_product_category_exists(
        self, small_dataset: EcommerceDataset, tmp_path: Path
    ) -> None:
        """The category referenced by PROD00001 is present in the written categories."""
        small_dataset.write(tmp_path)
        products = read_rows(tmp_path / "products.csv")
        categories = {row["CategoryID"] for row in read_rows(tmp_path / "categories.csv")}

        first = next(row for row in products if row["ProductID"] == "PROD00001")
        assert first["CategoryID"] in categories
        assert first["Active"] in ("true", "false")


class TestDefaultScenario:
    """Seed 42 with the default volumes."""

    @pytest.fixture(scope="class")
    def dataset(self) -> EcommerceDataset:
        return generate_dataset(GenerationConfig(now=datetime(2025, 1, 1)))

    def test_line_count_bounds(self, dataset: EcommerceDataset) -> None:
        """A thousand orders of one to six lines each."""
        assert 1000 <= len(dataset.order_lines) <= 6000

    def test_unique_ids(self, dataset: EcommerceDataset) -> None:
        """Ids never repeat within an entity kind."""
        assert len({c.customer_id for c in dataset.customers}) == 1000
        assert len({p.product_id for p in dataset.products}) == 1000
        assert len({o.order_id for o in dataset.orders}) == 1000
        assert len({line.order_detail_id for line in dataset.order_lines}) == len(
            dataset.order_lines
        )

    def test_delivered_orders_ship_after_ordering(self, dataset: EcommerceDataset) -> None:
        """Every delivered order has a strictly later shipped date."""
        delivered = [o for o in dataset.orders if o.order_status == "Delivered"]

        assert delivered
        for order in delivered:
            assert order.shipped_date is not None
            assert order.shipped_date > order.order_date

    def test_all_statuses_present(self, dataset: EcommerceDataset) -> None:
        """A thousand orders cover every status."""
        assert {o.order_status for o in dataset.orders} == {
            "Pending",
            "Processing",
            "Shipped",
            "Delivered",
            "Cancelled",
        }
