# storefront/services/exceptions.py

"""
STOREFRONT SERVICE ERRORS

Centralized domain errors for catalog + checkout services.
Views translate these into HTTP responses; services never build responses.
"""


class StorefrontError(Exception):
    """Base exception for all storefront service failures."""


class UnknownProductError(StorefrontError):
    """Raised when a product id is not part of the catalog."""


class CheckoutError(StorefrontError):
    """
    Base checkout exception.

    `alert` is the buyer-facing message (blank when the failure is
    not something the buyer should be told about).
    """

    def __init__(self, message: str = "", *, alert: str = ""):
        super().__init__(message or alert)
        self.alert = alert


class InvalidCheckoutTransitionError(CheckoutError):
    """Raised when a lifecycle event arrives in a phase that cannot accept it."""


class NoSelectedProductError(CheckoutError):
    """Raised when the success panel is requested without a selected product."""


class ScriptLoadError(CheckoutError):
    """Raised when the hosted checkout script could not be acquired."""


class GatewayError(CheckoutError):
    """Raised when the vendor checkout object cannot be built or opened."""
