"""Utility modules for request-wrapper."""

from .sanitizer import mask_sensitive_data, mask_url, mask_headers

__all__ = [
    "mask_sensitive_data",
    "mask_url",
    "mask_headers",
]
