"""Reporter fingerprinting"""
import hashlib
import hmac
from typing import Optional

from pricereports.core.config import settings


def resolve_client_address(forwarded_for: Optional[str], peer: Optional[str]) -> str:
    """
    Pick the client address for a request.

    Priority: first entry of X-Forwarded-For, then the socket peer. An
    unresolvable address yields "" which still fingerprints normally.
    """
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return (peer or "").strip()


def fingerprint(address: str, salt: Optional[str] = None) -> str:
    """One-way 64-char hex digest of a client address. Never fails."""
    key = settings.FINGERPRINT_SALT if salt is None else salt
    data = (address or "").encode()
    if key:
        return hmac.new(key.encode(), data, hashlib.sha256).hexdigest()
    return hashlib.sha256(data).hexdigest()
