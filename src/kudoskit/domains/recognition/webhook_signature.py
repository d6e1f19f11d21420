import base64
import hashlib
import hmac
from typing import Any

from kudoskit.utils.data.json_manager import JSONManager
from kudoskit.utils.logging.logging_manager import LogManager

logger = LogManager.get_instance().get_logger("WebhookSignature")


def compute_webhook_signature(payload: dict[str, Any], secret: str) -> str:
    """Base64 HMAC-SHA256 of the canonical JSON form of ``payload``."""
    message = JSONManager.create_json(payload).encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_webhook_signature(payload: dict[str, Any], signature: str | None, secret: str | None) -> bool:
    """Checks a webhook signature against the source's shared secret.

    A missing signature or a missing secret skips verification and passes. That permissive
    default is meant for non-production sources only.

    Args:
        payload: Webhook body as received.
        signature: Signature header value, if the caller sent one.
        secret: Shared secret configured for the source, if any.

    Returns:
        bool: False only when both are present and they do not match, or verification errors.
    """
    if not signature or not secret:
        logger.warning("Webhook signature verification skipped: signature or secret not provided")
        return True

    try:
        expected = compute_webhook_signature(payload, secret)
        return hmac.compare_digest(expected, signature.strip())
    except Exception as e:
        logger.error(f"Error verifying webhook signature: {e}", exc_info=True)
        return False
