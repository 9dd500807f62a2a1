"""
HTTP transport layer for outbound API calls
Handles communication with the billing provider and the VIES registry
with retry logic, interceptors, circuit breaker and connection pooling
"""

import time
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

import requests
from requests.adapters import HTTPAdapter

from surf_retreats.config.site_config import SiteConfig
from surf_retreats.exceptions import NetworkError, SurfRetreatsError
from surf_retreats.utils.logger import redact_sensitive


T = TypeVar("T")

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class CircuitState(str, Enum):
    """Circuit breaker states"""
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration"""
    failure_threshold: int = 5
    recovery_timeout: int = 30000  # milliseconds
    success_threshold: int = 2


@dataclass
class HttpRequestOptions:
    """Request options for HTTP client"""
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, Union[str, int, bool]]] = None
    timeout: Optional[int] = None  # milliseconds
    skip_retry: bool = False


@dataclass
class HttpResponse(Generic[T]):
    """HTTP response wrapper"""
    data: T
    status: int
    headers: Dict[str, str]
    duration: int  # milliseconds
    request_id: str


@dataclass
class HttpAuditEntry:
    """Audit log entry for HTTP requests"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None
    retry_attempt: Optional[int] = None


RequestInterceptor = Callable[[requests.PreparedRequest], requests.PreparedRequest]

ResponseInterceptor = Callable[[requests.Response], requests.Response]

RETRYABLE_STATUSES = (408, 429, 500, 502, 503, 504)


class HttpClient:
    """
    HTTP Client shared by the outbound integrations

    Features:
    - Automatic retry with exponential backoff
    - Circuit breaker per remote service
    - Request/response interceptors
    - Request ID generation for traceability
    - Audit entries with secrets redacted

    Bodies are sent as JSON by default; pass ``form`` for
    ``application/x-www-form-urlencoded`` or ``content`` for a raw
    payload such as a SOAP envelope.

    Example:
        >>> client = HttpClient(config, base_url="https://api.stripe.com")
        >>> response = client.get("/v1/customers", HttpRequestOptions(params={"limit": 1}))
        >>> print(response.data)
    """

    def __init__(
        self,
        config: SiteConfig,
        base_url: str,
        default_headers: Optional[Mapping[str, str]] = None,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
    ) -> None:
        """
        Create a new HTTP client instance

        Args:
            config: Resolved site configuration (timeouts, retries, audit)
            base_url: Base URL every request path is appended to
            default_headers: Headers sent with every request
            circuit_breaker_config: Optional circuit breaker configuration
        """
        self.config = config
        self._base_url = base_url.rstrip("/")
        self.circuit_config = circuit_breaker_config or CircuitBreakerConfig()

        self._circuit_state = CircuitState.CLOSED
        self._circuit_failure_count = 0
        self._circuit_success_count = 0
        self._circuit_open_time = 0.0

        self._request_interceptors: List[RequestInterceptor] = []
        self._response_interceptors: List[ResponseInterceptor] = []

        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None

        self._session = self._create_session(default_headers or {})

    def _create_session(self, default_headers: Mapping[str, str]) -> requests.Session:
        """Create requests session with connection pooling"""
        session = requests.Session()
        session.headers.update({"Accept": "application/json"})
        session.headers.update(default_headers)

        # Retries are handled in _execute_with_retry
        adapter = HTTPAdapter(pool_connections=4, pool_maxsize=10, max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability"""
        timestamp = hex(int(time.time() * 1000))[2:]
        unique_id = uuid.uuid4().hex[:8]
        return f"surf-{timestamp}-{unique_id}"

    def _check_circuit_breaker(self) -> None:
        """Check circuit breaker state and raise if open"""
        if self._circuit_state == CircuitState.OPEN:
            time_since_open = (time.time() * 1000) - self._circuit_open_time

            if time_since_open >= self.circuit_config.recovery_timeout:
                self._circuit_state = CircuitState.HALF_OPEN
                self._circuit_success_count = 0
                logger.info("Circuit breaker for %s transitioning to HALF_OPEN", self._base_url)
            else:
                retry_after = int(
                    (self.circuit_config.recovery_timeout - time_since_open) / 1000
                )
                raise NetworkError.circuit_breaker_open(retry_after)

    def _record_circuit_success(self) -> None:
        """Record circuit breaker success"""
        if self._circuit_state == CircuitState.HALF_OPEN:
            self._circuit_success_count += 1

            if self._circuit_success_count >= self.circuit_config.success_threshold:
                self._circuit_state = CircuitState.CLOSED
                self._circuit_failure_count = 0
                self._circuit_success_count = 0
                logger.info("Circuit breaker for %s CLOSED after recovery", self._base_url)
        elif self._circuit_state == CircuitState.CLOSED:
            self._circuit_failure_count = 0

    def _record_circuit_failure(self) -> None:
        """Record circuit breaker failure"""
        if self._circuit_state == CircuitState.HALF_OPEN:
            self._circuit_state = CircuitState.OPEN
            self._circuit_open_time = time.time() * 1000
            logger.warning("Circuit breaker for %s REOPENED in half-open state", self._base_url)
        elif self._circuit_state == CircuitState.CLOSED:
            self._circuit_failure_count += 1

            if self._circuit_failure_count >= self.circuit_config.failure_threshold:
                self._circuit_state = CircuitState.OPEN
                self._circuit_open_time = time.time() * 1000
                logger.warning(
                    "Circuit breaker for %s OPENED after %d failures",
                    self._base_url,
                    self._circuit_failure_count,
                )

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate retry delay with exponential backoff

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds, capped at 8 seconds
        """
        delay_ms = self.config.retry_delay * (2 ** attempt)
        return min(delay_ms, 8000) / 1000.0

    def _is_retryable_error(self, error: Exception) -> bool:
        """Determine if error is retryable"""
        if isinstance(error, NetworkError):
            return error.retryable

        if isinstance(error, requests.exceptions.HTTPError):
            response = error.response
            return response is not None and response.status_code in RETRYABLE_STATUSES

        if isinstance(error, requests.exceptions.RequestException):
            return True

        return False

    def _normalize_error(
        self, error: Exception, response: Optional[requests.Response] = None
    ) -> SurfRetreatsError:
        """Normalize errors from requests into toolkit errors"""
        if isinstance(error, requests.exceptions.Timeout):
            return NetworkError.timeout()

        if isinstance(error, requests.exceptions.ConnectionError):
            return NetworkError.connection_failed(f"Connection error: {error}")

        if isinstance(error, requests.exceptions.HTTPError) and response is not None:
            message, code = self._extract_error_body(response)
            return SurfRetreatsError(
                message or str(error),
                code=code,
                status_code=response.status_code,
                details={"body": self._parse_body(response)},
            )

        if isinstance(error, SurfRetreatsError):
            return error

        return SurfRetreatsError(f"Request error: {error}", cause=error)

    def _extract_error_body(self, response: requests.Response) -> Tuple[Optional[str], Optional[str]]:
        """Pull message and code out of a JSON error body, if present"""
        try:
            data = response.json()
        except ValueError:
            return None, None

        if not isinstance(data, dict):
            return None, None

        inner = data.get("error")
        if isinstance(inner, dict):
            return inner.get("message"), inner.get("code") or inner.get("type")

        return data.get("message"), data.get("code")

    def _parse_body(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _create_audit_entry(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any],
        request_id: str,
        start_time: float,
        response: Optional[requests.Response] = None,
        error: Optional[Exception] = None,
        retry_attempt: Optional[int] = None,
    ) -> HttpAuditEntry:
        """Create audit log entry"""
        duration = int((time.time() - start_time) * 1000)

        response_data = None
        if response is not None:
            response_body = self._parse_body(response)
            if isinstance(response_body, str):
                response_body = response_body[:500]
            response_data = {
                "statusCode": response.status_code,
                "body": redact_sensitive(response_body),
            }

        return HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=method,
            url=url,
            headers=redact_sensitive(dict(headers)),
            body=redact_sensitive(body),
            response=response_data,
            duration=duration,
            success=error is None,
            error=str(error) if error else None,
            retry_attempt=retry_attempt,
        )

    def _log_audit(self, entry: HttpAuditEntry) -> None:
        """Log audit entry"""
        if self.config.enable_audit_log and self._audit_log_callback:
            self._audit_log_callback(entry)

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        """Add a custom request interceptor"""
        self._request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        """Add a custom response interceptor"""
        self._response_interceptors.append(interceptor)

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Set audit log callback"""
        self._audit_log_callback = callback

    def _execute_with_retry(
        self,
        method: HttpMethod,
        url: str,
        json_body: Optional[Any] = None,
        form: Optional[Any] = None,
        content: Optional[Union[str, bytes]] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Execute HTTP request with retry logic"""
        options = options or HttpRequestOptions()

        self._check_circuit_breaker()

        max_attempts = 1 if options.skip_retry else self.config.retry_attempts + 1
        full_url = f"{self._base_url}{url}"
        timeout_seconds = (options.timeout or self.config.timeout) / 1000.0
        audit_body = json_body if json_body is not None else form if form is not None else content

        for attempt in range(max_attempts):
            start_time = time.time()
            request_id = self._generate_request_id()

            headers = dict(self._session.headers)
            headers["X-Request-ID"] = request_id
            if options.headers:
                headers.update(options.headers)

            response: Optional[requests.Response] = None

            try:
                request = requests.Request(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    params=options.params,
                    json=json_body,
                    data=form if form is not None else content,
                )
                prepared = self._session.prepare_request(request)
                for interceptor in self._request_interceptors:
                    prepared = interceptor(prepared)

                response = self._session.send(prepared, timeout=timeout_seconds)
                for response_interceptor in self._response_interceptors:
                    response = response_interceptor(response)

                response.raise_for_status()

                self._record_circuit_success()
                self._log_audit(self._create_audit_entry(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    body=audit_body,
                    request_id=request_id,
                    start_time=start_time,
                    response=response,
                    retry_attempt=attempt if attempt > 0 else None,
                ))

                return HttpResponse(
                    data=self._parse_body(response),
                    status=response.status_code,
                    headers=dict(response.headers),
                    duration=int((time.time() - start_time) * 1000),
                    request_id=request_id,
                )

            except requests.exceptions.RequestException as e:
                # 4xx answers mean the service is up
                if self._is_retryable_error(e):
                    self._record_circuit_failure()
                else:
                    self._record_circuit_success()

                self._log_audit(self._create_audit_entry(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    body=audit_body,
                    request_id=request_id,
                    start_time=start_time,
                    response=response,
                    error=e,
                    retry_attempt=attempt,
                ))

                if attempt < max_attempts - 1 and self._is_retryable_error(e):
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        "Request %s %s failed (attempt %d/%d), retrying in %.2fs: %s",
                        method.value, full_url, attempt + 1, max_attempts, delay, e,
                    )
                    time.sleep(delay)
                    continue

                raise self._normalize_error(e, response) from e

        raise SurfRetreatsError("Unknown error occurred")

    def get(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """
        Perform GET request

        Args:
            url: Request URL (relative to base URL)
            options: Optional request options

        Returns:
            HTTP response wrapper
        """
        return self._execute_with_retry(HttpMethod.GET, url, options=options)

    def post(
        self,
        url: str,
        data: Optional[Any] = None,
        form: Optional[Any] = None,
        content: Optional[Union[str, bytes]] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """
        Perform POST request

        Args:
            url: Request URL (relative to base URL)
            data: JSON body
            form: Form fields, sent url-encoded
            content: Raw body, sent as-is
            options: Optional request options

        Returns:
            HTTP response wrapper
        """
        return self._execute_with_retry(
            HttpMethod.POST, url, json_body=data, form=form, content=content, options=options
        )

    def delete(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Perform DELETE request"""
        return self._execute_with_retry(HttpMethod.DELETE, url, options=options)

    @property
    def circuit_state(self) -> CircuitState:
        """Get current circuit breaker state"""
        return self._circuit_state

    def reset_circuit_breaker(self) -> None:
        """Reset circuit breaker to closed state"""
        self._circuit_state = CircuitState.CLOSED
        self._circuit_failure_count = 0
        self._circuit_success_count = 0
        self._circuit_open_time = 0.0
        logger.info("Circuit breaker for %s manually reset", self._base_url)

    @property
    def base_url(self) -> str:
        """Get base URL"""
        return self._base_url

    def close(self) -> None:
        """Close the HTTP session"""
        self._session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
