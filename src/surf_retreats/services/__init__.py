"""Services module initialization"""

from surf_retreats.services.checkout import CheckoutService

__all__ = [
    "CheckoutService",
]
