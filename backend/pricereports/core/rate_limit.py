"""Client address resolution and rate limiting"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from pricereports.core.config import settings
from pricereports.services.fingerprint import resolve_client_address


def client_address(request: Request) -> str:
    """Reporter address for fingerprinting; honours X-Forwarded-For."""
    peer = request.client.host if request.client else None
    return resolve_client_address(request.headers.get("x-forwarded-for"), peer)


# Keyed on the socket peer: X-Forwarded-For is client-controlled
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
