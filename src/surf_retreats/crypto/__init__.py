"""Cryptography module initialization

- HmacSigner: HMAC-SHA256 signing and constant-time verification
- Feedback tokens: signed guest feedback links, configured through FeedbackLinks
"""

from surf_retreats.crypto.hmac_signer import HmacSigner
from surf_retreats.crypto.tokens import (
    FeedbackLinks,
    generate_feedback_token,
    verify_feedback_token,
    generate_feedback_url,
)

__all__ = [
    "HmacSigner",
    "FeedbackLinks",
    "generate_feedback_token",
    "verify_feedback_token",
    "generate_feedback_url",
]
