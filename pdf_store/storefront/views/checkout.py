# storefront/views/checkout.py
"""
STOREFRONT CHECKOUT (SESSION SCOPED)

Flow:
- POST /api/store/checkout/initiate/   Buy Now (processing on, script URL back)
- POST /api/store/checkout/sdk/        browser reports script load outcome
- POST /api/store/checkout/success/    vendor success handler fired
- POST /api/store/checkout/failure/    vendor "payment.failed" event fired
- POST /api/store/checkout/dismiss/    vendor modal closed by the buyer
- POST /api/store/checkout/home/       buyer navigated back to the store
- GET  /api/store/checkout/state/      current session state

Rules:
- No order is created or stored; state lives in the buyer's session.
- Amounts are never accepted from the browser.
- Success requires the explicit success callback AND a selected product.
"""

from __future__ import annotations

from django.urls import reverse
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from storefront.catalog import get_product
from storefront.serializers import (
    AlertResponseSerializer,
    CheckoutInitiateResponseSerializer,
    CheckoutInitiateSerializer,
    CheckoutStateSerializer,
    PaymentFailureSerializer,
    PaymentSuccessResponseSerializer,
    PaymentSuccessSerializer,
    ProductSerializer,
    SdkOutcomeSerializer,
)
from storefront.services.checkout import CheckoutController
from storefront.services.exceptions import (
    GatewayError,
    InvalidCheckoutTransitionError,
    NoSelectedProductError,
    UnknownProductError,
)


class PublicWriteThrottle(AnonRateThrottle):
    """
    For Buy Now.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['public_write'].
    """

    scope = "public_write"


class CheckoutEventThrottle(AnonRateThrottle):
    """
    For vendor callbacks relayed by the browser.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['checkout_event'].
    """

    scope = "checkout_event"


class PublicPollThrottle(AnonRateThrottle):
    scope = "public_poll"


def controller_for(request) -> CheckoutController:
    return CheckoutController(
        request.session,
        success_url=reverse("storefront:checkout-success"),
        failure_url=reverse("storefront:checkout-failure"),
        dismiss_url=reverse("storefront:checkout-dismiss"),
    )


def _state(controller: CheckoutController) -> dict:
    return CheckoutStateSerializer(controller.state).data


def _conflict(controller: CheckoutController, exc) -> Response:
    return Response(
        {"detail": str(exc), "state": _state(controller)},
        status=status.HTTP_409_CONFLICT,
    )


class CheckoutBaseView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [CheckoutEventThrottle]


class CheckoutInitiateView(CheckoutBaseView):
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        tags=["Checkout"],
        request=CheckoutInitiateSerializer,
        responses={
            201: CheckoutInitiateResponseSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Product not found"),
            429: OpenApiResponse(description="Rate limited"),
        },
        description="Buy Now: select a product and start acquiring the hosted checkout script.",
    )
    def post(self, request, *args, **kwargs):
        s = CheckoutInitiateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            product = get_product(data["product_id"])
        except UnknownProductError:
            return Response({"detail": "Product not found"}, status=status.HTTP_404_NOT_FOUND)

        controller = controller_for(request)
        script_src = controller.begin(
            product,
            customer_name=data.get("customer_name") or "",
            customer_email=data.get("customer_email") or "",
        )

        return Response(
            {"state": _state(controller), "script_src": script_src},
            status=status.HTTP_201_CREATED,
        )


class CheckoutSdkView(CheckoutBaseView):
    @extend_schema(
        tags=["Checkout"],
        request=SdkOutcomeSerializer,
        responses={
            200: OpenApiResponse(description="Checkout opened, or SDK failure alert"),
            409: OpenApiResponse(description="No checkout awaiting the script"),
            502: AlertResponseSerializer,
        },
        description="Report the outcome of loading the hosted checkout script.",
    )
    def post(self, request, *args, **kwargs):
        s = SdkOutcomeSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        controller = controller_for(request)

        try:
            if not s.validated_data["loaded"]:
                alert = controller.sdk_failed()
                return Response(
                    {"state": _state(controller), "alert": alert},
                    status=status.HTTP_200_OK,
                )

            payload = controller.sdk_loaded()
        except InvalidCheckoutTransitionError as exc:
            return _conflict(controller, exc)
        except GatewayError as exc:
            return Response(
                {"detail": exc.alert, "alert": exc.alert, "state": _state(controller)},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        return Response(
            {"state": _state(controller), "checkout": payload},
            status=status.HTTP_200_OK,
        )


class PaymentSuccessView(CheckoutBaseView):
    @extend_schema(
        tags=["Checkout"],
        request=PaymentSuccessSerializer,
        responses={
            200: PaymentSuccessResponseSerializer,
            400: OpenApiResponse(description="Validation error"),
            409: OpenApiResponse(description="No checkout in progress / no selected product"),
        },
        description="Vendor success handler fired: reveal the download link.",
    )
    def post(self, request, *args, **kwargs):
        s = PaymentSuccessSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        controller = controller_for(request)

        try:
            product = controller.payment_succeeded(dict(s.validated_data))
        except (NoSelectedProductError, InvalidCheckoutTransitionError) as exc:
            return _conflict(controller, exc)

        return Response(
            {
                "state": _state(controller),
                "product": ProductSerializer(product).data,
                "download_link": product.download_link,
                "success_page": reverse("storefront_pages:success"),
            },
            status=status.HTTP_200_OK,
        )


class PaymentFailureView(CheckoutBaseView):
    @extend_schema(
        tags=["Checkout"],
        request=PaymentFailureSerializer,
        responses={
            200: AlertResponseSerializer,
            409: OpenApiResponse(description="No checkout in progress"),
        },
        description="Vendor 'payment.failed' event fired.",
    )
    def post(self, request, *args, **kwargs):
        s = PaymentFailureSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        controller = controller_for(request)

        try:
            alert = controller.payment_failed(dict(s.validated_data))
        except InvalidCheckoutTransitionError as exc:
            return _conflict(controller, exc)

        return Response({"state": _state(controller), "alert": alert}, status=status.HTTP_200_OK)


class CheckoutDismissView(CheckoutBaseView):
    @extend_schema(
        tags=["Checkout"],
        request=None,
        responses={
            200: AlertResponseSerializer,
            409: OpenApiResponse(description="No checkout in progress"),
        },
        description="Buyer closed the vendor modal without paying.",
    )
    def post(self, request, *args, **kwargs):
        controller = controller_for(request)

        try:
            controller.dismissed()
        except InvalidCheckoutTransitionError as exc:
            return _conflict(controller, exc)

        return Response({"state": _state(controller)}, status=status.HTTP_200_OK)


class CheckoutHomeView(CheckoutBaseView):
    @extend_schema(
        tags=["Checkout"],
        request=None,
        responses={200: AlertResponseSerializer},
        description="Navigate back to the store view.",
    )
    def post(self, request, *args, **kwargs):
        controller = controller_for(request)
        controller.go_home()
        return Response({"state": _state(controller)}, status=status.HTTP_200_OK)


class CheckoutStateView(CheckoutBaseView):
    throttle_classes = [PublicPollThrottle]

    @extend_schema(
        tags=["Checkout"],
        responses={200: CheckoutStateSerializer},
    )
    def get(self, request, *args, **kwargs):
        controller = controller_for(request)
        return Response(_state(controller), status=status.HTTP_200_OK)
