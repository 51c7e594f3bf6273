# storefront/views/__init__.py
