# storefront/services/__init__.py
