"""Rate limiter configuration module.

Kept out of main.py so routers can decorate endpoints without importing the
application.
"""

from fastapi import Request
from slowapi import Limiter

from helpers.request_utils import get_client_ip


def rate_limit_key(request: Request) -> str:
    """Bucket requests per client address."""
    return get_client_ip(request) or "unknown"


limiter = Limiter(key_func=rate_limit_key)
