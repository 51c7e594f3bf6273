# storefront/catalog.py

"""
PATH: storefront/catalog.py

STOREFRONT CATALOG (STATIC)

Rules:
- Catalog is defined in source and loaded at import time.
- Products are immutable (frozen dataclasses, tuple features).
- Backend is source of truth for prices; the browser never sends amounts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from storefront.services.exceptions import UnknownProductError

CURRENCY_SYMBOL = "₹"


@dataclass(frozen=True)
class Product:
    id: str
    title: str
    description: str
    price: Decimal
    original_price: Decimal
    download_link: str
    features: tuple[str, ...] = field(default_factory=tuple)
    tag: str | None = None
    icon: str = "file"


PRODUCTS: tuple[Product, ...] = (
    Product(
        id="DA-001",
        title="Introduction to Data Analytics",
        description=(
            "The perfect starting point. Learn the core concepts, lifecycle, "
            "and tools used in modern data analytics."
        ),
        price=Decimal("9"),
        original_price=Decimal("49"),
        download_link="https://drive.google.com/file/d/103dZ6E5EB-dQb_oBYAE5aaqub6KrD-il/view",
        features=("Analytics Lifecycle", "Key Terminology", "Tools Overview"),
        tag="Essential",
        icon="file-bar-chart",
    ),
    Product(
        id="DA-002",
        title="Basic Mathematics for Data Analytics",
        description=(
            "Brush up on the essential math needed for data science without "
            "getting lost in complex theory."
        ),
        price=Decimal("9"),
        original_price=Decimal("49"),
        download_link="https://drive.google.com/file/d/1XjKuok3mZdePr5AZ4CcUzqHJ47-9a9Cr/view",
        features=("Linear Algebra Basics", "Probability", "Calculus for ML"),
        tag="Best Value",
        icon="trending-up",
    ),
    Product(
        id="DA-003",
        title="Statistics for Data Analysis",
        description=(
            "Master descriptive and inferential statistics to draw meaningful "
            "insights from your datasets."
        ),
        price=Decimal("9"),
        original_price=Decimal("49"),
        download_link="https://drive.google.com/file/d/1pHcInT93ComnDQvhqA6MAKOjM5ALORXA/view",
        features=("Hypothesis Testing", "Distributions", "Regression Analysis"),
        tag="Advanced",
        icon="pie-chart",
    ),
)

_BY_ID = {p.id: p for p in PRODUCTS}


def list_products() -> tuple[Product, ...]:
    return PRODUCTS


def find_product(product_id) -> Product | None:
    return _BY_ID.get(str(product_id or "").strip())


def get_product(product_id) -> Product:
    product = find_product(product_id)
    if product is None:
        raise UnknownProductError(f"Unknown product: {product_id}")
    return product


def format_price(amount) -> str:
    """₹9 for whole amounts, ₹9.50 otherwise."""
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return f"{CURRENCY_SYMBOL}{int(value)}"
    return f"{CURRENCY_SYMBOL}{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def discount_percent(product: Product) -> int:
    if product.original_price <= 0 or product.price >= product.original_price:
        return 0
    saved = (product.original_price - product.price) / product.original_price * 100
    return int(saved.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
