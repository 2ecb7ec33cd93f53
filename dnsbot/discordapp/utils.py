# dnsbot/discordapp/utils.py

"""
Security and Utility Functions for the Discord App.

The key component is a view decorator that verifies the authenticity of every
incoming interaction. Discord signs each request with the application's
Ed25519 key; anything that does not carry a valid signature over the exact
bytes received is rejected before it is parsed, let alone dispatched.
"""

# Standard library imports
import logging
import time
from functools import wraps
from typing import Optional

# Django imports
from django.http import HttpRequest, HttpResponse

# Third-party imports
from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import VerifyKey

# Local application imports
from .config import get_config

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def verify_signature(raw_body: bytes, signature: Optional[str], timestamp: Optional[str], public_key: str) -> bool:
    """
    Checks that `raw_body` was signed by Discord.

    The signed message is the timestamp header followed by the raw request
    body, byte for byte. Never raises: missing headers, non-hex input, keys or
    signatures of the wrong length and plain mismatches all return False.
    """
    if not signature or not timestamp or not public_key:
        return False

    try:
        verify_key = VerifyKey(bytes.fromhex(public_key))
        verify_key.verify(timestamp.encode("utf-8") + raw_body, bytes.fromhex(signature))
    except BadSignatureError:
        logger.warning("Discord signature verification failed. Mismatch.")
        return False
    except (ValueError, TypeError, CryptoError) as e:
        logger.warning(f"Malformed Discord signature or public key: {e}")
        return False

    return True


def _timestamp_is_fresh(timestamp: str, max_age: int) -> bool:
    try:
        return abs(time.time() - int(timestamp)) <= max_age
    except ValueError:
        return False


def discord_verification_required(view_func):
    """
    A Django view decorator that only lets signed Discord requests through.

    1.  **Headers:** `X-Signature-Ed25519` and `X-Signature-Timestamp` must be
        present.
    2.  **Replay window:** if `DISCORD_SIGNATURE_MAX_AGE` is configured, the
        timestamp must be within that many seconds of now.
    3.  **Signature:** the Ed25519 signature must match the configured public
        key over `timestamp + request.body`.

    Any failure returns an empty 401 immediately; the view never runs.
    """
    @wraps(view_func)
    def wrapper(request: HttpRequest, *args, **kwargs):
        config = get_config()
        signature = request.headers.get(SIGNATURE_HEADER)
        timestamp = request.headers.get(TIMESTAMP_HEADER)

        if not config.public_key:
            # Critical configuration error, but the caller still only sees a 401.
            logger.error("DISCORD_PUBLIC_KEY is not set; rejecting interaction.")
            return HttpResponse(status=401)

        if not signature or not timestamp:
            logger.warning("Missing Discord signature or timestamp headers.")
            return HttpResponse(status=401)

        if config.signature_max_age and not _timestamp_is_fresh(timestamp, config.signature_max_age):
            logger.warning("Discord request timestamp is outside the accepted window.")
            return HttpResponse(status=401)

        if not verify_signature(request.body, signature, timestamp, config.public_key):
            return HttpResponse(status=401)

        return view_func(request, *args, **kwargs)

    return wrapper


def allow_methods(*methods: str):
    """
    Restricts a view to the given HTTP methods.

    Unlike Django's `require_http_methods`, other methods get a plain 404, so
    the service exposes nothing beyond the routes it serves.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args, **kwargs):
            if request.method not in methods:
                return HttpResponse(status=404)
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
