# storefront/tests/test_checkout_controller.py

from unittest.mock import patch

from django.test import SimpleTestCase

from storefront.catalog import get_product, list_products
from storefront.services import lifecycle
from storefront.services.checkout import (
    GATEWAY_ERROR_ALERT,
    SDK_LOAD_FAILED_ALERT,
    SESSION_KEY,
    CheckoutController,
    CheckoutState,
)
from storefront.services.exceptions import (
    GatewayError,
    InvalidCheckoutTransitionError,
    NoSelectedProductError,
    ScriptLoadError,
)


def _loaded(src):
    return True


def _unreachable(src):
    return False


def make_controller(session=None):
    return CheckoutController(
        {} if session is None else session,
        success_url="/api/store/checkout/success/",
        failure_url="/api/store/checkout/failure/",
        dismiss_url="/api/store/checkout/dismiss/",
    )


class CheckoutControllerTests(SimpleTestCase):
    """
    GUARANTEES:
    - Processing is on from Buy Now until the attempt settles
    - Success view only ever shows the selected product
    - Script failure stops the flow before the vendor object exists
    - Customer details are prefill only and never outlive the attempt
    """

    def test_buy_now_opens_checkout_for_scenario_product(self):
        product = get_product("DA-001")
        controller = make_controller()

        payload = controller.buy_now(
            product, customer_name="A", customer_email="a@example.com", loader=_loaded
        )

        options = payload["options"]
        self.assertEqual(options["amount"], 900)
        self.assertEqual(options["currency"], "INR")
        self.assertEqual(options["description"], product.title)
        self.assertEqual(options["prefill"], {"name": "A", "email": "a@example.com"})
        self.assertEqual(payload["callbacks"]["payment.failed"], "/api/store/checkout/failure/")
        self.assertEqual(payload["callbacks"]["handler"], "/api/store/checkout/success/")
        self.assertEqual(payload["callbacks"]["modal.ondismiss"], "/api/store/checkout/dismiss/")

        self.assertTrue(controller.state.is_processing)
        self.assertEqual(controller.state.phase, lifecycle.PHASE_PROCESSING)
        self.assertEqual(controller.state.view, lifecycle.VIEW_HOME)

    def test_success_reveals_selected_product_for_every_product(self):
        for product in list_products():
            controller = make_controller()
            controller.buy_now(product, loader=_loaded)

            shown = controller.payment_succeeded({"razorpay_payment_id": "pay_123"})

            self.assertEqual(shown, product)
            self.assertEqual(controller.selected_product.download_link, product.download_link)
            self.assertEqual(controller.state.view, lifecycle.VIEW_SUCCESS)
            self.assertFalse(controller.state.is_processing)
            self.assertEqual(controller.state.payment_id, "pay_123")

    def test_success_clears_customer_details(self):
        controller = make_controller()
        controller.buy_now(
            get_product("DA-002"), customer_name="A", customer_email="a@example.com", loader=_loaded
        )

        controller.payment_succeeded({"razorpay_payment_id": "pay_1"})

        self.assertEqual(controller.state.customer_name, "")
        self.assertEqual(controller.state.customer_email, "")

    def test_script_failure_never_constructs_vendor_object(self):
        controller = make_controller()

        with patch("storefront.services.checkout.RazorpayCheckout") as vendor:
            with self.assertRaises(ScriptLoadError) as ctx:
                controller.buy_now(get_product("DA-001"), loader=_unreachable)

        vendor.assert_not_called()
        self.assertEqual(ctx.exception.alert, SDK_LOAD_FAILED_ALERT)
        self.assertFalse(controller.state.is_processing)
        self.assertEqual(controller.state.phase, lifecycle.PHASE_IDLE)
        self.assertEqual(controller.state.view, lifecycle.VIEW_HOME)

    def test_vendor_construction_error_becomes_gateway_alert(self):
        controller = make_controller()

        with patch(
            "storefront.services.checkout.RazorpayCheckout", side_effect=RuntimeError("boom")
        ):
            with self.assertRaises(GatewayError) as ctx:
                controller.buy_now(get_product("DA-003"), loader=_loaded)

        self.assertEqual(ctx.exception.alert, GATEWAY_ERROR_ALERT)
        self.assertFalse(controller.state.is_processing)
        self.assertEqual(controller.state.phase, lifecycle.PHASE_IDLE)

    def test_payment_failure_alert_carries_vendor_description(self):
        controller = make_controller()
        controller.buy_now(get_product("DA-001"), loader=_loaded)

        alert = controller.payment_failed({"error": {"description": "card declined"}})

        self.assertEqual(alert, "Payment Failed: card declined")
        self.assertFalse(controller.state.is_processing)
        self.assertEqual(controller.state.view, lifecycle.VIEW_HOME)
        self.assertEqual(controller.state.phase, lifecycle.PHASE_FAILED)

    def test_retry_inside_open_widget_can_still_succeed(self):
        """
        Valid transition:
        FAILED → SUCCEEDED (buyer retried inside the modal)
        """
        controller = make_controller()
        controller.buy_now(get_product("DA-001"), loader=_loaded)
        controller.payment_failed({"error": {"description": "card declined"}})

        product = controller.payment_succeeded({"razorpay_payment_id": "pay_2"})

        self.assertEqual(product.id, "DA-001")
        self.assertEqual(controller.state.view, lifecycle.VIEW_SUCCESS)

    def test_dismiss_returns_to_idle_without_alert(self):
        controller = make_controller()
        controller.buy_now(get_product("DA-002"), loader=_loaded)

        self.assertIsNone(controller.dismissed())
        self.assertEqual(controller.state.phase, lifecycle.PHASE_IDLE)
        self.assertFalse(controller.state.is_processing)
        self.assertEqual(controller.state.view, lifecycle.VIEW_HOME)

    def test_success_without_selected_product_is_rejected(self):
        controller = make_controller()

        with self.assertRaises(NoSelectedProductError):
            controller.payment_succeeded({"razorpay_payment_id": "pay_x"})

        self.assertEqual(controller.state.view, lifecycle.VIEW_HOME)

    def test_success_requires_open_widget(self):
        controller = make_controller()
        controller.begin(get_product("DA-001"))

        with self.assertRaises(InvalidCheckoutTransitionError):
            controller.payment_succeeded({"razorpay_payment_id": "pay_x"})

    def test_second_buy_restarts_attempt_with_latest_product(self):
        """Double initiation is not guarded: the latest Buy Now wins."""
        controller = make_controller()
        controller.begin(get_product("DA-001"))
        controller.begin(get_product("DA-003"))

        self.assertEqual(controller.state.selected_product_id, "DA-003")
        self.assertEqual(controller.state.phase, lifecycle.PHASE_AWAITING_SDK)
        self.assertTrue(controller.state.is_processing)

    def test_abandon_settles_every_unfinished_phase(self):
        product = get_product("DA-001")
        setups = {
            lifecycle.PHASE_AWAITING_SDK: lambda c: c.begin(product),
            lifecycle.PHASE_PROCESSING: lambda c: c.buy_now(product, loader=_loaded),
            lifecycle.PHASE_FAILED: lambda c: (
                c.buy_now(product, loader=_loaded),
                c.payment_failed({"error": {"description": "card declined"}}),
            ),
        }
        for phase, setup in setups.items():
            controller = make_controller()
            setup(controller)
            self.assertEqual(controller.state.phase, phase)

            self.assertTrue(controller.abandon())

            self.assertEqual(controller.state.phase, lifecycle.PHASE_IDLE)
            self.assertFalse(controller.state.is_processing)

    def test_abandon_leaves_settled_attempt_alone(self):
        controller = make_controller()
        controller.buy_now(get_product("DA-002"), loader=_loaded)
        controller.payment_succeeded({"razorpay_payment_id": "pay_1"})

        self.assertFalse(controller.abandon())
        self.assertEqual(controller.state.phase, lifecycle.PHASE_SUCCEEDED)
        self.assertEqual(controller.state.view, lifecycle.VIEW_SUCCESS)

    def test_go_home_after_success_clears_selection(self):
        controller = make_controller()
        controller.buy_now(get_product("DA-001"), loader=_loaded)
        controller.payment_succeeded({"razorpay_payment_id": "pay_1"})

        controller.go_home()

        self.assertEqual(controller.state.view, lifecycle.VIEW_HOME)
        self.assertEqual(controller.state.phase, lifecycle.PHASE_IDLE)
        self.assertIsNone(controller.selected_product)
        self.assertEqual(controller.state.payment_id, "")

    def test_go_home_mid_attempt_keeps_selection(self):
        controller = make_controller()
        controller.buy_now(get_product("DA-002"), loader=_loaded)

        controller.go_home()

        self.assertEqual(controller.state.selected_product_id, "DA-002")
        self.assertEqual(controller.state.phase, lifecycle.PHASE_PROCESSING)

    def test_state_is_written_to_session(self):
        session = {}
        controller = make_controller(session)
        controller.begin(get_product("DA-001"))

        restored = make_controller(session)

        self.assertEqual(session[SESSION_KEY]["selected_product_id"], "DA-001")
        self.assertEqual(restored.state.phase, lifecycle.PHASE_AWAITING_SDK)
        self.assertTrue(restored.state.is_processing)


class CheckoutStateTests(SimpleTestCase):
    def test_tampered_phase_falls_back_to_clean_state(self):
        state = CheckoutState.from_dict({"phase": "paid", "selected_product_id": "DA-001"})
        self.assertEqual(state, CheckoutState())

    def test_unknown_product_falls_back_to_clean_state(self):
        state = CheckoutState.from_dict(
            {"view": "success", "phase": "succeeded", "selected_product_id": "DA-999"}
        )
        self.assertEqual(state, CheckoutState())

    def test_success_view_without_product_shows_home(self):
        state = CheckoutState.from_dict({"view": "success", "phase": "idle"})
        self.assertEqual(state.view, lifecycle.VIEW_HOME)

    def test_non_mapping_is_ignored(self):
        self.assertEqual(CheckoutState.from_dict("garbage"), CheckoutState())
