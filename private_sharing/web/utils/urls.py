"""Helpers for building URLs that point back at this application."""

from typing import Optional
from urllib.parse import urlencode

from fastapi import Request


def get_base_path(request: Request, public_base_url: Optional[str] = None) -> str:
    """Externally visible root URL of the application, without trailing slash.

    The incoming request's scheme and host are used unless a fixed public base
    URL is configured. Trusting the Host header is fine for a local demo but a
    deployed instance should set ``PUBLIC_BASE_URL``.
    """
    if public_base_url:
        return public_base_url.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def build_callback_url(base_path: str, session_key: str) -> str:
    """URL of the return route carrying the session key as ``sessionId``."""
    return f"{base_path}/return?{urlencode({'sessionId': session_key})}"
