"""
Billing Client Unit Tests
"""

from decimal import Decimal
from typing import List

import pytest

from surf_retreats.billing.stripe_client import BillingClient, encode_form, to_minor_units
from surf_retreats.client.http_client import HttpResponse
from surf_retreats.config import SiteConfig
from surf_retreats.exceptions import BillingError, ConfigError, NetworkError, SurfRetreatsError


class FakeHttp:
    """Stands in for HttpClient; replies from a queue"""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: List[dict] = []

    def _reply(self, method, url, options, form=None):
        self.calls.append({"method": method, "url": url, "options": options, "form": form})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return HttpResponse(data=reply, status=200, headers={}, duration=1, request_id="test")

    def get(self, url, options=None):
        return self._reply("GET", url, options)

    def post(self, url, data=None, form=None, content=None, options=None):
        return self._reply("POST", url, options, form)

    def close(self):
        pass


@pytest.fixture
def config() -> SiteConfig:
    return SiteConfig(stripe_secret_key="sk_test_123")


class TestFormEncoding:
    """Tests for form encoding helpers"""

    def test_nested(self):
        fields = encode_form({
            "mode": "payment",
            "line_items": [{"quantity": 1, "price_data": {"unit_amount": 1000}}],
            "metadata": {"booking_id": "b-1", "is_reverse_charge": True},
            "locale": None,
        })
        assert fields == [
            ("mode", "payment"),
            ("line_items[0][quantity]", "1"),
            ("line_items[0][price_data][unit_amount]", "1000"),
            ("metadata[booking_id]", "b-1"),
            ("metadata[is_reverse_charge]", "true"),
        ]

    def test_minor_units(self):
        assert to_minor_units(Decimal("123.45")) == 12345
        assert to_minor_units("19.995") == 2000
        assert to_minor_units(100) == 10000


class TestBillingClient:
    """Tests for BillingClient"""

    def test_requires_secret_key(self):
        with pytest.raises(ConfigError) as exc_info:
            BillingClient(SiteConfig())
        assert str(exc_info.value) == "Missing STRIPE_SECRET_KEY environment variable"

    def test_default_http_headers(self, config: SiteConfig):
        client = BillingClient(config)
        session_headers = client._http._session.headers
        assert session_headers["Authorization"] == "Bearer sk_test_123"
        assert "Stripe-Version" in session_headers
        client.close()

    def test_create_checkout_session(self, config: SiteConfig):
        http = FakeHttp({"id": "cs_1", "url": "https://checkout.example/cs_1"})
        client = BillingClient(config, http=http)

        session = client.create_checkout_session(
            amount=Decimal("123.00"),
            product_name="Bali Surf Retreat - Deposit (10%)",
            customer_email="guest@example.com",
            success_url="https://example.com/booking/success",
            cancel_url="https://example.com/booking",
            metadata={"booking_id": "b-1"},
            idempotency_key="checkout-b-1",
        )

        assert session["id"] == "cs_1"
        call = http.calls[0]
        assert call["url"] == "/v1/checkout/sessions"
        assert call["options"].headers == {"Idempotency-Key": "checkout-b-1"}
        form = dict(call["form"])
        assert form["mode"] == "payment"
        assert form["line_items[0][price_data][currency]"] == "eur"
        assert form["line_items[0][price_data][unit_amount]"] == "12300"
        assert form["customer_email"] == "guest@example.com"
        assert form["metadata[booking_id]"] == "b-1"
        assert form["payment_intent_data[metadata][booking_id]"] == "b-1"
        assert "payment_intent_data[setup_future_usage]" not in form

    def test_checkout_session_with_customer(self, config: SiteConfig):
        http = FakeHttp({"id": "cs_2"})
        client = BillingClient(config, http=http)

        client.create_checkout_session(
            amount=50,
            product_name="Deposit",
            customer_email="guest@example.com",
            success_url="https://example.com/s",
            cancel_url="https://example.com/c",
            customer_id="cus_1",
            save_payment_method=True,
        )

        form = dict(http.calls[0]["form"])
        assert form["customer"] == "cus_1"
        assert "customer_email" not in form
        assert form["payment_intent_data[setup_future_usage]"] == "off_session"

    def test_generated_idempotency_key(self, config: SiteConfig):
        http = FakeHttp({"id": "re_1"})
        BillingClient(config, http=http).create_refund("pi_1")
        assert len(http.calls[0]["options"].headers["Idempotency-Key"]) == 32

    def test_find_existing_customer(self, config: SiteConfig):
        http = FakeHttp({"data": [{"id": "cus_1"}]})
        customer = BillingClient(config, http=http).find_or_create_customer("guest@example.com")

        assert customer["id"] == "cus_1"
        assert len(http.calls) == 1
        assert http.calls[0]["options"].params == {"email": "guest@example.com", "limit": "1"}

    def test_create_customer(self, config: SiteConfig):
        http = FakeHttp({"data": []}, {"id": "cus_new"})
        customer = BillingClient(config, http=http).find_or_create_customer(
            "guest@example.com", name="Ana Silva", metadata={"booking_id": "b-1"},
        )

        assert customer["id"] == "cus_new"
        form = dict(http.calls[1]["form"])
        assert form["name"] == "Ana Silva"
        assert form["metadata[booking_id]"] == "b-1"

    def test_partial_refund(self, config: SiteConfig):
        http = FakeHttp({"id": "re_1"})
        BillingClient(config, http=http).create_refund("pi_1", amount="25.50", reason="requested_by_customer")

        form = dict(http.calls[0]["form"])
        assert form == {"payment_intent": "pi_1", "reason": "requested_by_customer", "amount": "2550"}

    def test_api_error_becomes_billing_error(self, config: SiteConfig):
        http = FakeHttp(SurfRetreatsError("No such session", code="resource_missing", status_code=404))
        client = BillingClient(config, http=http)

        with pytest.raises(BillingError) as exc_info:
            client.retrieve_checkout_session("cs_missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.provider_code == "resource_missing"

    def test_network_error_passes_through(self, config: SiteConfig):
        http = FakeHttp(NetworkError.timeout())
        with pytest.raises(NetworkError):
            BillingClient(config, http=http).retrieve_checkout_session("cs_1")
