"""
Request utilities for identifying the calling client.
"""

from typing import Optional

from fastapi import Request


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract the client's address, honouring reverse proxy headers.

    Order of precedence: X-Real-IP, the first X-Forwarded-For hop, then
    the socket peer.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address or None if not available
    """
    real_ip = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_ip = forwarded_for.split(",")[0].strip()
        if first_ip:
            return first_ip

    if request.client:
        return request.client.host

    return None
