"""Exception classes for the surf retreats toolkit"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Error category codes"""
    VALIDATION = "VAL"
    NETWORK = "NET"
    CONFIG = "CONFIG"
    BILLING = "BILLING"
    SIGNATURE = "SIG"
    UNKNOWN = "UNKNOWN"


class SurfRetreatsError(Exception):
    """
    Base exception for toolkit errors

    All errors raised by the package extend from this class so route
    handlers can catch a single type and map it to an HTTP response.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> ErrorCategory:
        """Determine error category from code"""
        if not code:
            return ErrorCategory.UNKNOWN

        for category in ErrorCategory:
            if category is not ErrorCategory.UNKNOWN and code.startswith(category.value):
                return category

        return ErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: ErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ValidationError(SurfRetreatsError):
    """Validation error"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)
        self.field = field


class NetworkError(SurfRetreatsError):
    """
    Network error for HTTP transport layer failures
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        network_code: str = "NET10",
        retryable: bool = True,
    ) -> None:
        super().__init__(message, code=network_code, status_code=status_code)
        self.network_code = network_code
        self.retryable = retryable

    @classmethod
    def timeout(cls, message: str = "Request timed out") -> "NetworkError":
        """Create a timeout error"""
        return cls(message, status_code=408, network_code="NET01", retryable=True)

    @classmethod
    def connection_failed(
        cls, message: str = "Connection failed"
    ) -> "NetworkError":
        """Create a connection error"""
        return cls(message, network_code="NET02", retryable=True)

    @classmethod
    def circuit_breaker_open(cls, retry_after_seconds: int) -> "NetworkError":
        """Create a circuit breaker open error"""
        return cls(
            f"Circuit breaker is open. Retry after {retry_after_seconds} seconds",
            status_code=503,
            network_code="NET05",
            retryable=False,
        )


class ConfigError(SurfRetreatsError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class BillingError(SurfRetreatsError):
    """Error returned by the billing provider API"""

    def __init__(
        self,
        message: str,
        code: str = "BILLING01",
        status_code: Optional[int] = None,
        provider_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, status_code=status_code, details=details)
        self.provider_code = provider_code


class SignatureError(SurfRetreatsError):
    """Webhook signature verification error"""

    def __init__(
        self,
        message: str,
        code: str = "SIG01",
    ) -> None:
        super().__init__(message, code=code, status_code=400)
