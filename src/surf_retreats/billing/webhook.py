"""
Billing provider webhook verification and dispatch

The provider signs each delivery with a ``Stripe-Signature`` header of the
form ``t=<unix time>,v1=<hex hmac>[,v1=...]``. The signed message is
``"<t>.<raw body>"``. Deliveries older than the tolerance are rejected to
block replays.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from surf_retreats.config.site_config import SiteConfig
from surf_retreats.crypto.hmac_signer import HmacSigner
from surf_retreats.exceptions import ConfigError, SignatureError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"
SIGNATURE_SCHEME = "v1"
DEFAULT_TOLERANCE = 300


@dataclass
class SignatureHeader:
    """Parsed signature header"""
    timestamp: int
    signatures: List[str] = field(default_factory=list)


@dataclass
class WebhookEvent:
    """Verified webhook event"""
    id: str
    type: str
    data: Dict[str, Any]
    created: Optional[int] = None

    @property
    def object(self) -> Dict[str, Any]:
        """The API object the event is about"""
        return self.data.get("object", {})


EventHandler = Callable[[WebhookEvent], None]


def parse_signature_header(header: Optional[str]) -> SignatureHeader:
    """
    Parse the signature header

    Raises:
        SignatureError: If the header is missing or has no timestamp or
            no ``v1`` signature
    """
    if not header:
        raise SignatureError("Missing signature", code="SIG_MISSING")

    timestamp: Optional[int] = None
    signatures: List[str] = []

    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise SignatureError("Invalid signature timestamp", code="SIG_HEADER")
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)

    if timestamp is None:
        raise SignatureError("Signature header has no timestamp", code="SIG_HEADER")
    if not signatures:
        raise SignatureError("Signature header has no v1 signature", code="SIG_HEADER")

    return SignatureHeader(timestamp=timestamp, signatures=signatures)


def _signed_message(payload: Union[str, bytes], timestamp: int) -> bytes:
    body = payload.encode("utf-8") if isinstance(payload, str) else payload
    return f"{timestamp}.".encode("ascii") + body


def compute_signature(payload: Union[str, bytes], timestamp: int, secret: str) -> str:
    """Signature the provider would send for ``payload`` at ``timestamp``"""
    return HmacSigner(secret).sign_hex(_signed_message(payload, timestamp))


def verify_signature(
    payload: Union[str, bytes],
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
    now: Optional[float] = None,
) -> SignatureHeader:
    """
    Verify a delivery's signature

    Raises:
        SignatureError: If no signature matches or the timestamp is too old
    """
    parsed = parse_signature_header(header)
    signer = HmacSigner(secret)
    signed_message = _signed_message(payload, parsed.timestamp)

    if not any(signer.verify_hex(signed_message, candidate) for candidate in parsed.signatures):
        raise SignatureError("No signature matches the expected signature for payload", code="SIG_MISMATCH")

    now = time.time() if now is None else now
    if tolerance > 0 and parsed.timestamp < now - tolerance:
        raise SignatureError("Timestamp outside the tolerance zone", code="SIG_EXPIRED")

    return parsed


def construct_event(
    payload: Union[str, bytes],
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
    now: Optional[float] = None,
) -> WebhookEvent:
    """
    Verify a delivery and decode its event

    Args:
        payload: Raw request body, exactly as received
        header: Value of the signature header
        secret: Webhook signing secret
        tolerance: Maximum age of the delivery in seconds
        now: Current Unix time, for tests

    Returns:
        The decoded event

    Raises:
        SignatureError: If verification fails or the body is not an event
    """
    verify_signature(payload, header, secret, tolerance, now)

    try:
        data = json.loads(payload)
    except ValueError as e:
        raise SignatureError("Webhook payload is not valid JSON", code="SIG_PAYLOAD") from e

    if not isinstance(data, dict) or "type" not in data:
        raise SignatureError("Webhook payload is not an event", code="SIG_PAYLOAD")

    return WebhookEvent(
        id=data.get("id", ""),
        type=data["type"],
        data=data.get("data") or {},
        created=data.get("created"),
    )


class WebhookDispatcher:
    """
    Routes verified events to handlers by event type

    Example:
        >>> dispatcher = WebhookDispatcher.from_config(config)
        >>> dispatcher.register("checkout.session.completed", handle_checkout)
        >>> dispatcher.handle(body, headers["Stripe-Signature"])
    """

    def __init__(self, secret: str, tolerance: int = DEFAULT_TOLERANCE) -> None:
        self._secret = secret
        self._tolerance = tolerance
        self._handlers: Dict[str, EventHandler] = {}

    @classmethod
    def from_config(cls, config: SiteConfig) -> "WebhookDispatcher":
        """Dispatcher using the configured signing secret and tolerance"""
        if not config.stripe_webhook_secret:
            raise ConfigError("Webhook signing secret is not configured", code="CONFIG_MISSING_SECRET")
        return cls(config.stripe_webhook_secret, tolerance=config.webhook_tolerance)

    def register(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type] = handler

    def on(self, event_type: str) -> Callable[[EventHandler], EventHandler]:
        """Decorator form of :meth:`register`"""
        def decorator(handler: EventHandler) -> EventHandler:
            self.register(event_type, handler)
            return handler
        return decorator

    def dispatch(self, event: WebhookEvent) -> bool:
        """Run the handler for an event; returns False when none is registered"""
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info("Unhandled webhook event type: %s", event.type)
            return False

        logger.info("Handling webhook event %s (%s)", event.id, event.type)
        handler(event)
        return True

    def handle(
        self,
        payload: Union[str, bytes],
        header: Optional[str],
        now: Optional[float] = None,
    ) -> WebhookEvent:
        """Verify, decode and dispatch a delivery"""
        event = construct_event(payload, header, self._secret, self._tolerance, now)
        self.dispatch(event)
        return event
