# storefront/urls.py
"""
STOREFRONT API URLS

Base path (mounted in backend/urls.py):
    /api/store/

Catalog:
- GET  /api/store/catalog/
- GET  /api/store/catalog/<product_id>/

Checkout (session scoped):
- POST /api/store/checkout/initiate/
- POST /api/store/checkout/sdk/
- POST /api/store/checkout/success/
- POST /api/store/checkout/failure/
- POST /api/store/checkout/dismiss/
- POST /api/store/checkout/home/
- GET  /api/store/checkout/state/
"""

from __future__ import annotations

from django.urls import path

from storefront.views.catalog import CatalogView, ProductDetailView
from storefront.views.checkout import (
    CheckoutDismissView,
    CheckoutHomeView,
    CheckoutInitiateView,
    CheckoutSdkView,
    CheckoutStateView,
    PaymentFailureView,
    PaymentSuccessView,
)

app_name = "storefront"

urlpatterns = [
    # Catalog
    path("catalog/", CatalogView.as_view(), name="catalog"),
    path("catalog/<str:product_id>/", ProductDetailView.as_view(), name="product-detail"),

    # Checkout lifecycle
    path("checkout/initiate/", CheckoutInitiateView.as_view(), name="checkout-initiate"),
    path("checkout/sdk/", CheckoutSdkView.as_view(), name="checkout-sdk"),
    path("checkout/success/", PaymentSuccessView.as_view(), name="checkout-success"),
    path("checkout/failure/", PaymentFailureView.as_view(), name="checkout-failure"),
    path("checkout/dismiss/", CheckoutDismissView.as_view(), name="checkout-dismiss"),
    path("checkout/home/", CheckoutHomeView.as_view(), name="checkout-home"),
    path("checkout/state/", CheckoutStateView.as_view(), name="checkout-state"),
]
