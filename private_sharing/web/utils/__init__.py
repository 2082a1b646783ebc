"""Web layer utility functions."""

from private_sharing.web.utils.urls import build_callback_url, get_base_path

__all__ = ["build_callback_url", "get_base_path"]
