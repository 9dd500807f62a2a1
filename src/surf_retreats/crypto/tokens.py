"""Signed links for post-retreat guest feedback"""

from urllib.parse import urlencode

from surf_retreats.config.site_config import SiteConfig
from surf_retreats.crypto.hmac_signer import HmacSigner
from surf_retreats.exceptions import ConfigError


def generate_feedback_token(booking_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of the booking ID"""
    return HmacSigner(secret).sign_hex(booking_id)


def verify_feedback_token(booking_id: str, token: str, secret: str) -> bool:
    """True only when ``token`` was issued for ``booking_id``"""
    if not booking_id or not token:
        return False
    return HmacSigner(secret).verify_hex(booking_id, token)


def generate_feedback_url(booking_id: str, site_url: str, secret: str) -> str:
    """Feedback page URL carrying the booking ID and its token"""
    query = urlencode({
        "booking": booking_id,
        "token": generate_feedback_token(booking_id, secret),
    })
    return f"{site_url.rstrip('/')}/feedback?{query}"


class FeedbackLinks:
    """
    Feedback links signed with the configured secret

    Example:
        >>> links = FeedbackLinks.from_config(config)
        >>> url = links.url("b-42")
        >>> links.verify("b-42", token)
        True
    """

    def __init__(self, secret: str, site_url: str) -> None:
        self._secret = secret
        self._site_url = site_url

    @classmethod
    def from_config(cls, config: SiteConfig) -> "FeedbackLinks":
        if not config.feedback_token_secret:
            raise ConfigError("Feedback token secret is not configured", code="CONFIG_MISSING_SECRET")
        return cls(config.feedback_token_secret, config.site_url)

    def token(self, booking_id: str) -> str:
        return generate_feedback_token(booking_id, self._secret)

    def verify(self, booking_id: str, token: str) -> bool:
        return verify_feedback_token(booking_id, token, self._secret)

    def url(self, booking_id: str) -> str:
        return generate_feedback_url(booking_id, self._site_url, self._secret)
