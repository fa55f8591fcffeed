"""Rate limiter configuration module.

Kept apart from main.py so the stats router can decorate export endpoints
without importing the application.
"""

import hashlib

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def export_rate_key(request: Request) -> str:
    """
    Rate-limit key for spreadsheet exports.

    Admins sharing an office address get separate budgets: the key is a
    digest of the bearer token, falling back to the client address for
    anonymous calls (which are rejected anyway).
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return "token:" + hashlib.sha256(token.encode()).hexdigest()[:16]
    return get_remote_address(request)
