"""Non-interactive walkthrough of a paginated select over generated data.

Builds an in-memory users catalog (total-count pagination) or products catalog
(hasMore pagination), then drives a select instance through an initial load,
an optional search, a number of scroll-to-bottom requests and an optional
preselected value, printing one JSON snapshot per step.

    python -m paginated_select_engine.demo --catalog users --search ali --scrolls 2 --value user-42
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any

from .in_memory import InMemoryDataSource
from .logging_utils import setup_logging
from .paginated_select import PaginatedSelect

logger = logging.getLogger(__name__)

FIRST_NAMES = ["John", "Jane", "Bob", "Alice", "Charlie", "Diana", "Eva", "Frank", "Grace", "Henry"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez"]
ROLES = ["admin", "user", "moderator", "guest"]

CATEGORIES = ["Electronics", "Clothing", "Books", "Home & Garden", "Sports", "Beauty", "Toys", "Automotive"]
PRODUCT_NAMES = [
    "Premium Wireless Headphones",
    "Organic Cotton T-Shirt",
    "JavaScript Guide Book",
    "Garden Hose Set",
    "Running Shoes",
    "Face Moisturizer",
    "Building Blocks Set",
    "Car Phone Mount",
    "Bluetooth Speaker",
    "Denim Jeans",
    "Python Cookbook",
    "Plant Fertilizer",
]


def generate_users(count: int) -> list[dict[str, Any]]:
    users = []
    for i in range(count):
        first = FIRST_NAMES[i % len(FIRST_NAMES)]
        last = LAST_NAMES[(i // len(FIRST_NAMES)) % len(LAST_NAMES)]
        suffix = str(i) if i > 99 else ""
        users.append(
            {
                "id": f"user-{i + 1}",
                "name": f"{first} {last}",
                "email": f"{first.lower()}.{last.lower()}{suffix}@example.com",
                "role": ROLES[i % len(ROLES)],
            }
        )
    return users


def generate_products(count: int) -> list[dict[str, Any]]:
    products = []
    for i in range(count):
        base = PRODUCT_NAMES[i % len(PRODUCT_NAMES)]
        name = f"{base} {i // len(PRODUCT_NAMES) + 1}" if i >= len(PRODUCT_NAMES) else base
        products.append(
            {
                "id": f"product-{i + 1}",
                "name": name,
                "category": CATEGORIES[i % len(CATEGORIES)],
                "price": 10 + (i * 37) % 500,
            }
        )
    return products


def build_source(catalog: str, latency: float) -> InMemoryDataSource:
    if catalog == "users":
        return InMemoryDataSource(
            generate_users(500), search_fields=["name", "email"], pagination="total", latency=latency
        )
    return InMemoryDataSource(
        generate_products(200), search_fields=["name", "category"], pagination="has_more", latency=latency
    )


def _print_snapshot(step: str, select: PaginatedSelect) -> None:
    snapshot = select.snapshot()
    print(json.dumps({"step": step, **snapshot.model_dump(mode="json")}))


async def run_demo(args: argparse.Namespace) -> int:
    source = build_source(args.catalog, args.latency)
    # The products catalog only exposes point lookup.
    adapter = source.as_adapter(bulk_lookup=args.catalog == "users")
    params = {"role": args.role} if args.catalog == "users" and args.role else None
    errors = []

    async with PaginatedSelect(
        adapter,
        value=args.value,
        multiple=args.multiple,
        params=params,
        page_size=args.page_size,
        debug=args.debug,
        on_error=errors.append,
    ) as select:
        await select.wait_until_idle()
        _print_snapshot("initial", select)

        if args.search:
            select.set_search(args.search)
            await select.wait_until_idle()
            _print_snapshot("search", select)

        for n in range(args.scrolls):
            if select.request_next_page() is None:
                logger.info("No more pages to load.")
                break
            await select.wait_until_idle()
            _print_snapshot(f"scroll-{n + 1}", select)

    for error in errors:
        print(f"ERROR: {error}")
    return 1 if errors else 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive a paginated select over an in-memory catalog.")
    parser.add_argument("--catalog", choices=["users", "products"], default="users")
    parser.add_argument("--page-size", type=int, default=10)
    parser.add_argument("--search", default="")
    parser.add_argument("--role", default=None, help="Filter users by role (users catalog only).")
    parser.add_argument("--scrolls", type=int, default=1)
    parser.add_argument("--value", nargs="*", default=None, help="Preselected value(s).")
    parser.add_argument("--multiple", action="store_true")
    parser.add_argument("--latency", type=float, default=0.0, help="Simulated backend latency in seconds.")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)
    if args.value is not None and not args.multiple:
        args.value = args.value[0] if args.value else None
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.debug else args.log_level)
    return asyncio.run(run_demo(args))


if __name__ == "__main__":
    raise SystemExit(main())
