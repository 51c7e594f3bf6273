# storefront/tests/test_checkout_api.py

from unittest.mock import patch

from django.conf import settings
from django.core.cache import cache
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from storefront.catalog import get_product
from storefront.services.checkout import GATEWAY_ERROR_ALERT, SDK_LOAD_FAILED_ALERT

COLLECTING = {**settings.STOREFRONT, "COLLECT_CUSTOMER": True}


class CheckoutApiTests(TestCase):
    """
    Buyer journey through the JSON API, one session per test.

    GUARANTEES:
    - Amounts come from the catalog, never the browser
    - Download link is only revealed by the success callback
    - Out-of-order vendor callbacks are rejected with 409
    """

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def initiate(self, product_id="DA-001", **extra):
        return self.client.post(
            reverse("storefront:checkout-initiate"),
            {"product_id": product_id, **extra},
            format="json",
        )

    def sdk(self, loaded=True):
        return self.client.post(reverse("storefront:checkout-sdk"), {"loaded": loaded}, format="json")

    def open_checkout(self, product_id="DA-001", **extra):
        self.assertEqual(self.initiate(product_id, **extra).status_code, status.HTTP_201_CREATED)
        res = self.sdk(True)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        return res

    def state(self):
        return self.client.get(reverse("storefront:checkout-state")).data

    def test_initiate_turns_processing_on(self):
        res = self.initiate("DA-002")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["script_src"], "https://checkout.razorpay.com/v1/checkout.js")
        self.assertTrue(res.data["state"]["is_processing"])
        self.assertEqual(res.data["state"]["selected_product_id"], "DA-002")
        self.assertEqual(self.state()["phase"], "awaiting_sdk")

    def test_initiate_unknown_product(self):
        res = self.initiate("DA-404")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_browser_amount_is_ignored(self):
        """Amount always comes from the catalog."""
        self.initiate("DA-001", amount=1)
        res = self.sdk(True)

        self.assertEqual(res.data["checkout"]["options"]["amount"], 900)

    def test_sdk_loaded_returns_widget_payload(self):
        res = self.open_checkout("DA-003")

        checkout = res.data["checkout"]
        self.assertEqual(checkout["options"]["currency"], "INR")
        self.assertEqual(checkout["options"]["description"], get_product("DA-003").title)
        self.assertEqual(checkout["callbacks"]["handler"], reverse("storefront:checkout-success"))
        self.assertEqual(checkout["callbacks"]["payment.failed"], reverse("storefront:checkout-failure"))
        self.assertEqual(
            checkout["callbacks"]["modal.ondismiss"], reverse("storefront:checkout-dismiss")
        )
        self.assertEqual(res.data["state"]["phase"], "processing")

    def test_sdk_failure_alerts_and_stops(self):
        self.initiate()

        res = self.sdk(False)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["alert"], SDK_LOAD_FAILED_ALERT)
        self.assertFalse(res.data["state"]["is_processing"])
        self.assertEqual(res.data["state"]["view"], "home")

    def test_sdk_report_without_buy_now(self):
        res = self.sdk(True)
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_gateway_error_is_502_with_alert(self):
        self.initiate()

        with patch(
            "storefront.services.checkout.RazorpayCheckout", side_effect=RuntimeError("bad options")
        ):
            res = self.sdk(True)

        self.assertEqual(res.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(res.data["alert"], GATEWAY_ERROR_ALERT)
        self.assertFalse(res.data["state"]["is_processing"])

    def test_success_reveals_download_link(self):
        self.open_checkout("DA-002")

        res = self.client.post(
            reverse("storefront:checkout-success"),
            {"razorpay_payment_id": "pay_abc"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["download_link"], get_product("DA-002").download_link)
        self.assertEqual(res.data["product"]["id"], "DA-002")
        self.assertEqual(res.data["success_page"], reverse("storefront_pages:success"))
        self.assertEqual(res.data["state"]["view"], "success")
        self.assertFalse(res.data["state"]["is_processing"])

    def test_success_without_checkout_is_conflict(self):
        res = self.client.post(
            reverse("storefront:checkout-success"),
            {"razorpay_payment_id": "pay_abc"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["state"]["view"], "home")

    def test_success_requires_payment_id(self):
        self.open_checkout()
        res = self.client.post(reverse("storefront:checkout-success"), {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_failure_alert(self):
        self.open_checkout()

        res = self.client.post(
            reverse("storefront:checkout-failure"),
            {"error": {"code": "BAD_REQUEST_ERROR", "description": "card declined"}},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["alert"], "Payment Failed: card declined")
        self.assertFalse(res.data["state"]["is_processing"])
        self.assertEqual(res.data["state"]["view"], "home")

    def test_dismiss_is_silent(self):
        self.open_checkout()

        res = self.client.post(reverse("storefront:checkout-dismiss"), {}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertNotIn("alert", res.data)
        self.assertEqual(res.data["state"]["phase"], "idle")
        self.assertFalse(res.data["state"]["is_processing"])

    def test_dismiss_without_checkout_is_conflict(self):
        res = self.client.post(reverse("storefront:checkout-dismiss"), {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_home_after_success_clears_selection(self):
        self.open_checkout()
        self.client.post(
            reverse("storefront:checkout-success"), {"razorpay_payment_id": "p"}, format="json"
        )

        res = self.client.post(reverse("storefront:checkout-home"), {}, format="json")

        self.assertEqual(res.data["state"]["view"], "home")
        self.assertIsNone(res.data["state"]["selected_product_id"])

    def test_customer_fields_are_dropped_when_not_collected(self):
        self.initiate("DA-001", customer_name="A", customer_email="a@example.com")
        res = self.sdk(True)

        self.assertNotIn("prefill", res.data["checkout"]["options"])

    @override_settings(STOREFRONT=COLLECTING)
    def test_collected_customer_is_prefilled(self):
        res = self.open_checkout("DA-001", customer_name="A", customer_email="a@example.com")

        self.assertEqual(
            res.data["checkout"]["options"]["prefill"], {"name": "A", "email": "a@example.com"}
        )
        self.assertNotIn("customer_email", res.data["state"])

    @override_settings(STOREFRONT=COLLECTING)
    def test_collected_customer_is_required(self):
        res = self.initiate("DA-001", customer_name="", customer_email="")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["customer_name"], ["Name is required."])
        self.assertEqual(res.data["customer_email"], ["Email is required."])
        self.assertFalse(self.state()["is_processing"])

    def test_sessions_are_isolated(self):
        self.open_checkout("DA-001")

        other = APIClient()
        res = other.get(reverse("storefront:checkout-state"))

        self.assertIsNone(res.data["selected_product_id"])
        self.assertFalse(res.data["is_processing"])
