# storefront/views/pages.py
"""
STOREFRONT PAGES (SERVER RENDERED)

GET  /          store: hero + product cards (or success panel redirect);
                settles any attempt left unfinished by a reload
GET  /success/  success panel (guarded: requires a selected product)
POST /home/     back to the store

The browser bridge (static/storefront/checkout.js) drives the JSON API;
these views only render whatever the session state says.
"""

from __future__ import annotations

from django.conf import settings
from django.shortcuts import redirect
from django.views import View
from django.views.generic import TemplateView

from storefront.catalog import discount_percent, format_price, list_products
from storefront.services import lifecycle
from storefront.services.razorpay import checkout_script_url
from storefront.views.checkout import controller_for


def _storefront_context() -> dict:
    cfg = getattr(settings, "STOREFRONT", {}) or {}
    return {
        "brand_prefix": cfg.get("BRAND_PREFIX", "Data"),
        "brand_suffix": cfg.get("BRAND_SUFFIX", "Foundations"),
        "offer_text": cfg.get("OFFER_TEXT", ""),
        "collect_customer": bool(cfg.get("COLLECT_CUSTOMER", False)),
        "footer_year": cfg.get("FOOTER_YEAR", ""),
    }


class StorefrontView(TemplateView):
    template_name = "storefront/home.html"

    def get(self, request, *args, **kwargs):
        controller = controller_for(request)
        if controller.state.view == lifecycle.VIEW_SUCCESS and controller.selected_product:
            return redirect("storefront_pages:success")
        # A page load tears down any open widget.
        controller.abandon()
        return super().get(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        controller = controller_for(self.request)
        state = controller.state

        cards = []
        for product in list_products():
            cards.append(
                {
                    "product": product,
                    "display_price": format_price(product.price),
                    "display_original_price": format_price(product.original_price),
                    "discount_percent": discount_percent(product),
                    "is_processing": state.is_processing
                    and state.selected_product_id == product.id,
                }
            )

        ctx.update(_storefront_context())
        ctx.update(
            {
                "cards": cards,
                "is_processing": state.is_processing,
                "script_src": checkout_script_url(),
            }
        )
        return ctx


class SuccessPageView(TemplateView):
    template_name = "storefront/success.html"

    def get(self, request, *args, **kwargs):
        controller = controller_for(request)
        if controller.selected_product is None or controller.state.view != lifecycle.VIEW_SUCCESS:
            return redirect("storefront_pages:home")
        return super().get(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        controller = controller_for(self.request)
        product = controller.selected_product

        ctx.update(_storefront_context())
        ctx.update(
            {
                "product": product,
                "display_price": format_price(product.price),
                "payment_id": controller.state.payment_id,
            }
        )
        return ctx


class ReturnHomeView(View):
    http_method_names = ["post"]

    def post(self, request, *args, **kwargs):
        controller_for(request).go_home()
        return redirect("storefront_pages:home")
