# PATH: storefront/serializers.py

"""
PATH: storefront/serializers.py

STOREFRONT SERIALIZERS

Purpose:
- Single, shared schema contracts for storefront API endpoints.
- Keeps storefront/views thin and consistent.

Notes:
- These serializers are deliberately "transport layer" only:
  they validate request/response shapes, not lifecycle rules.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from storefront.catalog import discount_percent, format_price


def _collect_customer() -> bool:
    cfg = getattr(settings, "STOREFRONT", {}) or {}
    return bool(cfg.get("COLLECT_CUSTOMER", False))


class ProductSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    original_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    display_price = serializers.SerializerMethodField()
    display_original_price = serializers.SerializerMethodField()
    discount_percent = serializers.SerializerMethodField()
    features = serializers.ListField(child=serializers.CharField())
    tag = serializers.CharField(allow_null=True, required=False)

    def get_display_price(self, obj) -> str:
        return format_price(obj.price)

    def get_display_original_price(self, obj) -> str:
        return format_price(obj.original_price)

    def get_discount_percent(self, obj) -> int:
        return discount_percent(obj)


class CheckoutStateSerializer(serializers.Serializer):
    """
    Session checkout state as seen by the browser.
    Customer fields are intentionally not echoed back.
    """
    view = serializers.CharField()
    phase = serializers.CharField()
    is_processing = serializers.BooleanField()
    selected_product_id = serializers.CharField(allow_null=True)


class CheckoutInitiateSerializer(serializers.Serializer):
    """
    Buy Now contract.
    Name + email become mandatory when the storefront collects them.
    """
    product_id = serializers.CharField()
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if _collect_customer():
            errors = {}
            if not (attrs.get("customer_name") or "").strip():
                errors["customer_name"] = ["Name is required."]
            if not (attrs.get("customer_email") or "").strip():
                errors["customer_email"] = ["Email is required."]
            if errors:
                raise serializers.ValidationError(errors)
        else:
            attrs["customer_name"] = ""
            attrs["customer_email"] = ""
        return attrs


class CheckoutInitiateResponseSerializer(serializers.Serializer):
    state = CheckoutStateSerializer()
    script_src = serializers.URLField()


class SdkOutcomeSerializer(serializers.Serializer):
    loaded = serializers.BooleanField()


class PaymentSuccessSerializer(serializers.Serializer):
    """Opaque vendor success payload; only the payment id is kept."""
    razorpay_payment_id = serializers.CharField()
    razorpay_order_id = serializers.CharField(required=False, allow_blank=True)
    razorpay_signature = serializers.CharField(required=False, allow_blank=True)


class PaymentErrorSerializer(serializers.Serializer):
    code = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    source = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    step = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    metadata = serializers.DictField(required=False, allow_null=True)


class PaymentFailureSerializer(serializers.Serializer):
    error = PaymentErrorSerializer(required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class PaymentSuccessResponseSerializer(serializers.Serializer):
    state = CheckoutStateSerializer()
    product = ProductSerializer()
    download_link = serializers.URLField()
    success_page = serializers.CharField()


class AlertResponseSerializer(serializers.Serializer):
    state = CheckoutStateSerializer()
    alert = serializers.CharField(required=False, allow_blank=True)
    detail = serializers.CharField(required=False, allow_blank=True)
