# storefront/services/checkout.py

"""
CHECKOUT CONTROLLER (APPLICATION SERVICE)

Purpose:
- Own the per-session checkout state (view, processing flag, selected
  product, customer prefill) and move it through the lifecycle.
- Build + open the vendor checkout object once the hosted script is loaded.
- Translate vendor callbacks (success / payment.failed / ondismiss) into
  state changes and buyer-facing alerts.

Hard rules:
- Success is only recorded on the explicit success callback.
- Customer data is only used as widget prefill; it is dropped on success
  and when the buyer returns to the store.
- Script loading is fallible; the flow stops when it fails.

Notes:
- State lives in the Django session (signed cookie), so nothing is
  persisted server-side and nothing is shared between sessions.
- Double initiation is NOT guarded: a second buy restarts the attempt.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, MutableMapping

from storefront.catalog import Product, find_product
from storefront.services import lifecycle
from storefront.services.exceptions import (
    GatewayError,
    NoSelectedProductError,
    ScriptLoadError,
)
from storefront.services.razorpay import (
    EVENT_PAYMENT_FAILED,
    RazorpayCheckout,
    build_checkout_options,
    checkout_script_url,
)
from storefront.services.script_loader import ScriptLoader, get_script_loader

logger = logging.getLogger(__name__)

SESSION_KEY = "storefront_checkout"

SDK_LOAD_FAILED_ALERT = "Razorpay SDK failed to load. Please check your internet connection."
GATEWAY_ERROR_ALERT = "Something went wrong with the payment gateway."
PAYMENT_FAILED_PREFIX = "Payment Failed: "


@dataclass
class CheckoutState:
    view: str = lifecycle.VIEW_HOME
    phase: str = lifecycle.PHASE_IDLE
    is_processing: bool = False
    selected_product_id: str | None = None
    customer_name: str = ""
    customer_email: str = ""
    payment_id: str = ""

    @classmethod
    def from_dict(cls, raw) -> "CheckoutState":
        if not isinstance(raw, dict):
            return cls()

        state = cls(
            view=str(raw.get("view") or lifecycle.VIEW_HOME),
            phase=str(raw.get("phase") or lifecycle.PHASE_IDLE),
            is_processing=bool(raw.get("is_processing", False)),
            selected_product_id=raw.get("selected_product_id") or None,
            customer_name=str(raw.get("customer_name") or ""),
            customer_email=str(raw.get("customer_email") or ""),
            payment_id=str(raw.get("payment_id") or ""),
        )

        # Tampered / stale session data falls back to a clean state.
        if state.phase not in lifecycle.PHASES:
            return cls()
        if state.view not in (lifecycle.VIEW_HOME, lifecycle.VIEW_SUCCESS):
            state.view = lifecycle.VIEW_HOME
        if state.selected_product_id and find_product(state.selected_product_id) is None:
            return cls()
        if state.view == lifecycle.VIEW_SUCCESS and not state.selected_product_id:
            state.view = lifecycle.VIEW_HOME
        return state

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def selected_product(self) -> Product | None:
        return find_product(self.selected_product_id) if self.selected_product_id else None


def _extract_failure_description(response) -> str:
    """
    Vendor failure payloads look like {"error": {"description": "..."}};
    tolerate a flat {"description": "..."} as well.
    """
    if not isinstance(response, dict):
        return str(response or "").strip()

    error = response.get("error")
    if isinstance(error, dict):
        desc = error.get("description")
        if desc:
            return str(desc).strip()
    elif error:
        return str(error).strip()

    return str(response.get("description") or "").strip()


class CheckoutController:
    """
    Single owner of the checkout state for one buyer session.

    Every mutation is written straight back to the session mapping, so
    callers never have to remember to save.
    """

    def __init__(
        self,
        session: MutableMapping,
        *,
        success_url: str = "",
        failure_url: str = "",
        dismiss_url: str = "",
    ):
        self.session = session
        self.state = CheckoutState.from_dict(session.get(SESSION_KEY))
        self.success_url = success_url
        self.failure_url = failure_url
        self.dismiss_url = dismiss_url

    # -------------------------
    # helpers
    # -------------------------

    def _commit(self) -> None:
        self.session[SESSION_KEY] = self.state.to_dict()
        if hasattr(self.session, "modified"):
            self.session.modified = True

    def _move(self, target_phase: str) -> None:
        lifecycle.validate_transition(state=self.state, target_phase=target_phase)
        self.state.phase = target_phase

    def _settle(self, target_phase: str) -> None:
        self._move(target_phase)
        self.state.is_processing = False

    @property
    def selected_product(self) -> Product | None:
        return self.state.selected_product

    # -------------------------
    # lifecycle events
    # -------------------------

    def begin(
        self,
        product: Product,
        *,
        customer_name: str = "",
        customer_email: str = "",
    ) -> str:
        """Buyer pressed "Buy Now"; returns the script URL to acquire."""
        self._move(lifecycle.PHASE_AWAITING_SDK)
        self.state.is_processing = True
        self.state.view = lifecycle.VIEW_HOME
        self.state.selected_product_id = product.id
        self.state.customer_name = str(customer_name or "").strip()
        self.state.customer_email = str(customer_email or "").strip()
        self.state.payment_id = ""
        self._commit()

        logger.info("Checkout started", extra={"product_id": product.id})
        return checkout_script_url()

    def sdk_failed(self) -> str:
        self._settle(lifecycle.PHASE_IDLE)
        self._commit()

        logger.warning(
            "Checkout script failed to load",
            extra={"product_id": self.state.selected_product_id},
        )
        return SDK_LOAD_FAILED_ALERT

    def sdk_loaded(self) -> dict[str, Any]:
        """Script is available: build, subscribe and open the vendor checkout."""
        self._move(lifecycle.PHASE_READY_TO_PAY)
        self._commit()

        product = self.selected_product
        try:
            if product is None:
                raise NoSelectedProductError("No product selected for checkout")

            options = build_checkout_options(
                product,
                customer_name=self.state.customer_name,
                customer_email=self.state.customer_email,
                success_url=self.success_url,
                dismiss_url=self.dismiss_url,
            )
            payment_object = RazorpayCheckout(options)
            payment_object.on(EVENT_PAYMENT_FAILED, self.failure_url)
            payload = payment_object.open()
        except Exception as exc:
            logger.exception(
                "Razorpay checkout could not be opened",
                extra={"product_id": self.state.selected_product_id},
            )
            self._settle(lifecycle.PHASE_IDLE)
            self._commit()
            raise GatewayError(str(exc), alert=GATEWAY_ERROR_ALERT) from exc

        self._move(lifecycle.PHASE_PROCESSING)
        self._commit()
        return payload

    def buy_now(
        self,
        product: Product,
        *,
        customer_name: str = "",
        customer_email: str = "",
        loader: ScriptLoader | None = None,
    ) -> dict[str, Any]:
        """
        begin + acquire script + open, in one call.
        Raises ScriptLoadError / GatewayError carrying the buyer alert.
        """
        src = self.begin(product, customer_name=customer_name, customer_email=customer_email)

        load = loader or get_script_loader()
        if not load(src):
            alert = self.sdk_failed()
            raise ScriptLoadError(f"Could not load {src}", alert=alert)

        return self.sdk_loaded()

    def payment_succeeded(self, response: dict | None = None) -> Product:
        product = self.selected_product
        if product is None:
            raise NoSelectedProductError("Payment success received without a selected product")

        self._settle(lifecycle.PHASE_SUCCEEDED)
        response = response or {}
        self.state.view = lifecycle.VIEW_SUCCESS
        self.state.payment_id = str(response.get("razorpay_payment_id") or "").strip()
        self.state.customer_name = ""
        self.state.customer_email = ""
        self._commit()

        logger.info(
            "Payment success",
            extra={"product_id": product.id, "payment_id": self.state.payment_id},
        )
        return product

    def payment_failed(self, response=None) -> str:
        self._settle(lifecycle.PHASE_FAILED)
        self.state.view = lifecycle.VIEW_HOME
        self._commit()

        description = _extract_failure_description(response)
        alert = PAYMENT_FAILED_PREFIX + description
        logger.warning(
            "Payment failed",
            extra={"product_id": self.state.selected_product_id, "description": description},
        )
        return alert

    def dismissed(self) -> None:
        self._settle(lifecycle.PHASE_DISMISSED)
        self._move(lifecycle.PHASE_IDLE)
        self._commit()

        logger.info("Checkout modal dismissed", extra={"product_id": self.state.selected_product_id})

    def abandon(self) -> bool:
        """
        The store page was loaded again, so no widget can still be open.
        Settle any unfinished attempt; returns True when one was settled.
        """
        phase = self.state.phase
        if phase in lifecycle.WIDGET_OPEN_PHASES:
            self._settle(lifecycle.PHASE_DISMISSED)
            self._move(lifecycle.PHASE_IDLE)
        elif lifecycle.is_in_flight(phase):
            self._settle(lifecycle.PHASE_IDLE)
        else:
            return False

        self._commit()
        logger.info(
            "Checkout attempt abandoned",
            extra={"product_id": self.state.selected_product_id, "phase": phase},
        )
        return True

    def go_home(self) -> None:
        self.state.view = lifecycle.VIEW_HOME
        if not lifecycle.is_in_flight(self.state.phase):
            if self.state.phase != lifecycle.PHASE_IDLE:
                self._move(lifecycle.PHASE_IDLE)
            self.state.selected_product_id = None
            self.state.customer_name = ""
            self.state.customer_email = ""
            self.state.payment_id = ""
        self._commit()
