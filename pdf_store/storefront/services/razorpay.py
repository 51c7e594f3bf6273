# storefront/services/razorpay.py
from __future__ import annotations

import logging
import os
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from django.conf import settings

from storefront.catalog import Product
from storefront.services.exceptions import GatewayError

logger = logging.getLogger(__name__)

CHECKOUT_SCRIPT_URL = "https://checkout.razorpay.com/v1/checkout.js"

EVENT_PAYMENT_FAILED = "payment.failed"
SUPPORTED_EVENTS = {EVENT_PAYMENT_FAILED}

DEFAULT_CURRENCY = "INR"
DEFAULT_STORE_NAME = "Data Analytics Store"
DEFAULT_IMAGE = "https://cdn-icons-png.flaticon.com/512/2703/2703511.png"
DEFAULT_THEME_COLOR = "#2563eb"


def _razorpay_cfg() -> dict:
    """
    Best-effort config resolver.

    Priority:
    1) settings.PAYMENTS["RAZORPAY"]
    2) direct env vars as fallback (RAZORPAY_KEY_ID)
    """
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = (payments.get("RAZORPAY") or {}) if isinstance(payments, dict) else {}
    if isinstance(cfg, dict):
        return cfg
    return {}


def _storefront_cfg() -> dict:
    cfg = getattr(settings, "STOREFRONT", {}) or {}
    return cfg if isinstance(cfg, dict) else {}


def get_key_id() -> str:
    cfg = _razorpay_cfg()

    key = (cfg.get("KEY_ID") or "").strip()
    if not key:
        key = (os.environ.get("RAZORPAY_KEY_ID") or "").strip()

    if not key:
        raise GatewayError(
            "RAZORPAY KEY_ID is not configured. "
            "Expected settings.PAYMENTS['RAZORPAY']['KEY_ID'] or env RAZORPAY_KEY_ID."
        )
    return key


def checkout_script_url() -> str:
    url = (_razorpay_cfg().get("CHECKOUT_SCRIPT_URL") or "").strip()
    return url or CHECKOUT_SCRIPT_URL


def to_paise(amount_rupees) -> int:
    try:
        rupees = Decimal(str(amount_rupees))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount_rupees must be a valid Decimal") from exc
    paise = (rupees * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(paise)


def build_checkout_options(
    product: Product,
    *,
    customer_name: str = "",
    customer_email: str = "",
    success_url: str = "",
    dismiss_url: str = "",
) -> dict[str, Any]:
    """
    Copy catalog + form values into the vendor-defined options record.
    Customer fields only travel as widget prefill.
    """
    store = _storefront_cfg()

    options: dict[str, Any] = {
        "key": get_key_id(),
        "amount": to_paise(product.price),
        "currency": str(store.get("CURRENCY") or DEFAULT_CURRENCY),
        "name": str(store.get("STORE_NAME") or DEFAULT_STORE_NAME),
        "description": product.title,
        "image": str(store.get("IMAGE_URL") or DEFAULT_IMAGE),
        "theme": {"color": str(store.get("THEME_COLOR") or DEFAULT_THEME_COLOR)},
        "notes": {"product_id": product.id},
    }

    prefill = {}
    if (customer_name or "").strip():
        prefill["name"] = customer_name.strip()
    if (customer_email or "").strip():
        prefill["email"] = customer_email.strip()
    if prefill:
        options["prefill"] = prefill

    if success_url:
        options["handler"] = success_url
    if dismiss_url:
        options["modal"] = {"ondismiss": dismiss_url}

    return options


class RazorpayCheckout:
    """
    Server-side mirror of the hosted checkout object.

    The real widget lives in the browser; this object validates the
    configuration record, collects event subscriptions, and produces the
    payload the browser bridge hands to `new Razorpay(...)`.
    """

    def __init__(self, options: dict[str, Any]):
        if not isinstance(options, dict):
            raise GatewayError("Checkout options must be a mapping")

        if not str(options.get("key") or "").strip():
            raise GatewayError("Checkout options are missing the key")

        amount = options.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise GatewayError(f"Checkout amount must be a positive integer, got {amount!r}")

        if not str(options.get("currency") or "").strip():
            raise GatewayError("Checkout options are missing the currency")

        self._options = dict(options)
        self._subscriptions: dict[str, str] = {}
        self.is_open = False

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    def on(self, event: str, target: str) -> None:
        if event not in SUPPORTED_EVENTS:
            raise GatewayError(f"Unsupported checkout event: {event}")
        self._subscriptions[event] = target

    def open(self) -> dict[str, Any]:
        widget_options = {
            k: v for k, v in self._options.items() if k not in ("handler", "modal")
        }
        callbacks = {
            "handler": self._options.get("handler", ""),
            "modal.ondismiss": (self._options.get("modal") or {}).get("ondismiss", ""),
        }
        callbacks.update(self._subscriptions)

        self.is_open = True
        logger.info(
            "Opening hosted checkout",
            extra={
                "description": widget_options.get("description"),
                "amount": widget_options.get("amount"),
            },
        )
        return {
            "script_src": checkout_script_url(),
            "options": widget_options,
            "callbacks": callbacks,
        }
