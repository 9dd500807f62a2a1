"""
Billing provider API client

Talks to the provider's REST API through the shared HTTP client. Request
bodies are form-encoded with bracketed keys (``metadata[booking_id]``,
``line_items[0][quantity]``) and amounts are sent in minor units.
"""

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Tuple

from surf_retreats.client.http_client import HttpClient, HttpRequestOptions
from surf_retreats.config.site_config import SiteConfig
from surf_retreats.exceptions import BillingError, ConfigError, NetworkError, SurfRetreatsError
from surf_retreats.tax.calculator import Amount, round_currency, to_decimal

logger = logging.getLogger(__name__)

STRIPE_API_VERSION = "2025-12-15.clover"


def to_minor_units(amount: Amount) -> int:
    """Convert a currency amount to integer cents, rounding half-up"""
    return int(round_currency(to_decimal(amount)) * 100)


def encode_form(params: Mapping[str, Any], prefix: str = "") -> List[Tuple[str, str]]:
    """
    Flatten nested parameters into form fields

    >>> encode_form({"metadata": {"id": "b1"}, "items": [{"qty": 1}]})
    [('metadata[id]', 'b1'), ('items[0][qty]', '1')]
    """
    fields: List[Tuple[str, str]] = []

    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        fields.extend(_encode_value(name, value))

    return fields


def _encode_value(name: str, value: Any) -> List[Tuple[str, str]]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return encode_form(value, name)
    if isinstance(value, (list, tuple)):
        fields: List[Tuple[str, str]] = []
        for index, item in enumerate(value):
            fields.extend(_encode_value(f"{name}[{index}]", item))
        return fields
    if isinstance(value, bool):
        return [(name, "true" if value else "false")]
    return [(name, str(value))]


class BillingClient:
    """
    Billing provider client

    Example:
        >>> billing = BillingClient(config)
        >>> session = billing.create_checkout_session(
        ...     amount=Decimal("123.00"),
        ...     product_name="Bali Surf Retreat - Deposit",
        ...     customer_email="guest@example.com",
        ...     success_url="https://example.com/booking/success",
        ...     cancel_url="https://example.com/booking",
        ... )
        >>> session["url"]
    """

    def __init__(self, config: SiteConfig, http: Optional[HttpClient] = None) -> None:
        if not config.stripe_secret_key:
            raise ConfigError(
                "Missing STRIPE_SECRET_KEY environment variable",
                code="CONFIG_MISSING_SECRET",
            )
        self.config = config
        self._http = http or HttpClient(
            config,
            base_url=config.stripe_api_base,
            default_headers={
                "Authorization": f"Bearer {config.stripe_secret_key}",
                "Stripe-Version": STRIPE_API_VERSION,
            },
        )

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            if method == "GET":
                fields = encode_form(params or {})
                response = self._http.get(path, HttpRequestOptions(params=dict(fields)))
            else:
                headers = {"Idempotency-Key": idempotency_key or uuid.uuid4().hex}
                response = self._http.post(
                    path,
                    form=encode_form(params or {}),
                    options=HttpRequestOptions(headers=headers),
                )
        except NetworkError:
            raise
        except SurfRetreatsError as e:
            logger.error("Billing API %s %s failed: %s", method, path, e.get_description())
            raise BillingError(
                str(e),
                status_code=e.status_code,
                provider_code=e.code,
                details=e.details,
            ) from e

        return response.data

    def create_checkout_session(
        self,
        amount: Amount,
        product_name: str,
        customer_email: str,
        success_url: str,
        cancel_url: str,
        description: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        customer_id: Optional[str] = None,
        locale: Optional[str] = None,
        save_payment_method: bool = False,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a hosted checkout session for a single charge

        Args:
            amount: Amount to charge, VAT included
            product_name: Line item name shown on the payment page
            customer_email: Prefilled e-mail when no customer is given
            success_url: Redirect after payment
            cancel_url: Redirect when the guest abandons payment
            description: Line item description
            metadata: Copied to the session and the payment intent
            customer_id: Existing customer to attach the payment to
            locale: Payment page language
            save_payment_method: Keep the card for later installments
            idempotency_key: Key making the call safe to retry

        Returns:
            The created session object
        """
        payment_intent_data: Dict[str, Any] = {"metadata": dict(metadata or {})}
        if save_payment_method:
            payment_intent_data["setup_future_usage"] = "off_session"

        params: Dict[str, Any] = {
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "line_items": [{
                "quantity": 1,
                "price_data": {
                    "currency": self.config.currency,
                    "unit_amount": to_minor_units(amount),
                    "product_data": {"name": product_name, "description": description},
                },
            }],
            "metadata": dict(metadata or {}),
            "payment_intent_data": payment_intent_data,
            "locale": locale,
        }
        if customer_id:
            params["customer"] = customer_id
        else:
            params["customer_email"] = customer_email

        session = self._request("POST", "/v1/checkout/sessions", params, idempotency_key)
        logger.info("Created checkout session %s", session.get("id"))
        return session

    def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/v1/checkout/sessions/{session_id}")

    def find_or_create_customer(
        self,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Reuse the customer registered under ``email`` or create one"""
        existing = self._request("GET", "/v1/customers", {"email": email, "limit": 1})
        customers = existing.get("data") or []
        if customers:
            return customers[0]

        customer = self._request(
            "POST",
            "/v1/customers",
            {"email": email, "name": name, "metadata": dict(metadata or {})},
        )
        logger.info("Created billing customer %s", customer.get("id"))
        return customer

    def create_refund(
        self,
        payment_intent_id: str,
        amount: Optional[Amount] = None,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Refund a payment in full, or partially when ``amount`` is given"""
        params: Dict[str, Any] = {"payment_intent": payment_intent_id, "reason": reason}
        if amount is not None:
            params["amount"] = to_minor_units(amount)
        return self._request("POST", "/v1/refunds", params)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BillingClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
