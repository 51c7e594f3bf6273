# storefront/apps.py

"""
STOREFRONT APP CONFIG

Public PDF storefront module:
- Static catalog (Data Analytics PDFs)
- Checkout lifecycle (session scoped, no persistence)
- Razorpay hosted checkout bridge
- Success panel with download link
"""

from django.apps import AppConfig


class StorefrontConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "storefront"
    verbose_name = "PDF Storefront"
