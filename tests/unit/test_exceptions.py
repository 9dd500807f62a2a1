"""
Exception Hierarchy Unit Tests
"""

from surf_retreats.exceptions import (
    BillingError,
    ConfigError,
    ErrorCategory,
    NetworkError,
    SignatureError,
    SurfRetreatsError,
    ValidationError,
)


class TestErrorCategories:
    """Tests for category derivation from codes"""

    def test_validation(self):
        error = ValidationError("bad value", field="timeout")
        assert error.category == ErrorCategory.VALIDATION
        assert error.status_code == 400
        assert error.field == "timeout"

    def test_network_factories(self):
        assert NetworkError.timeout().code == "NET01"
        assert NetworkError.timeout().status_code == 408
        assert NetworkError.connection_failed().is_category(ErrorCategory.NETWORK)

    def test_circuit_open_not_retryable(self):
        error = NetworkError.circuit_breaker_open(12)
        assert error.retryable is False
        assert error.status_code == 503

    def test_config(self):
        assert ConfigError("missing").category == ErrorCategory.CONFIG
        assert ConfigError("missing", code="CONFIG_FILE_NOT_FOUND").category == ErrorCategory.CONFIG

    def test_billing(self):
        error = BillingError("card declined", status_code=402, provider_code="card_declined")
        assert error.category == ErrorCategory.BILLING
        assert error.provider_code == "card_declined"

    def test_signature(self):
        error = SignatureError("bad", code="SIG_MISMATCH")
        assert error.category == ErrorCategory.SIGNATURE
        assert error.status_code == 400

    def test_unknown(self):
        assert SurfRetreatsError("oops").category == ErrorCategory.UNKNOWN
        assert SurfRetreatsError("oops", code="resource_missing").category == ErrorCategory.UNKNOWN


class TestErrorHelpers:

    def test_all_extend_base(self):
        for error in (ValidationError("x"), NetworkError("x"), ConfigError("x"), BillingError("x"), SignatureError("x")):
            assert isinstance(error, SurfRetreatsError)

    def test_to_dict(self):
        data = SignatureError("expired", code="SIG_EXPIRED").to_dict()
        assert data["name"] == "SignatureError"
        assert data["message"] == "expired"
        assert data["category"] == "SIG"
        assert data["timestamp"].endswith("+00:00")

    def test_description(self):
        error = SurfRetreatsError("Not found", code="resource_missing", status_code=404)
        assert error.get_description() == "[resource_missing] Not found (HTTP 404)"
        assert error.has_code("resource_missing")
