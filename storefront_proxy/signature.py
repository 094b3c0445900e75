import hmac
import hashlib
import logging
from typing import Mapping

logger = logging.getLogger(__name__)

SIGNATURE_PARAM = 'signature'


def build_signing_message(params: Mapping) -> str:
    """
    Canonical message the storefront signs: every parameter except the
    signature, sorted by key, as ``key=value`` pairs joined with no separator.
    A repeated parameter contributes its values joined with commas.
    """
    return ''.join(
        f"{key}={_param_value(params, key)}"
        for key in sorted(params)
        if key != SIGNATURE_PARAM
    )


def _param_value(params: Mapping, key: str) -> str:
    if hasattr(params, 'getlist'):
        return ','.join(params.getlist(key))
    return str(params[key])


def compute_signature(params: Mapping, secret: str) -> str:
    """Hex HMAC-SHA256 of the canonical message, keyed by the shared secret."""
    message = build_signing_message(params)
    return hmac.new(
        secret.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha256
    ).hexdigest()


def verify_proxy_signature(params: Mapping, secret: str) -> bool:
    """
    Check that a request carries a valid app proxy signature.
    A missing signature or an unconfigured secret is always invalid.
    """
    signature = params.get(SIGNATURE_PARAM)
    if not signature:
        logger.warning("Rejected proxy request without signature")
        return False
    
    if not secret:
        logger.error("APP_PROXY_SECRET is not configured; rejecting signed request")
        return False
    
    expected = compute_signature(params, secret)
    if not hmac.compare_digest(expected.encode('utf-8'), str(signature).encode('utf-8')):
        logger.warning("Rejected proxy request with invalid signature")
        return False
    
    return True
