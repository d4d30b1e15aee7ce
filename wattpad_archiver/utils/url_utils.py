# -*- coding: utf-8 -*-
"""
URL utilities - build and check Wattpad URLs
"""

from typing import Optional
from urllib.parse import urlparse

from wattpad_archiver import config


def is_http_url(url: Optional[str]) -> bool:
    """
    Check that url is an absolute http(s) URL with a host

    Examples:
        - "https://www.wattpad.com/story/12345-title" -> True
        - "/12345-chapter" -> False
        - "ftp://example.com" -> False
    """
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def build_page_url(ref: str, base_url: Optional[str] = None) -> str:
    """
    Join a partial href from the table of contents onto the source origin

    Args:
        ref: href như "/12345-chapter-one" (hoặc URL đầy đủ)
        base_url: origin, mặc định config.BASE_URL

    Returns:
        Absolute URL
    """
    if is_http_url(ref):
        return ref
    base = (base_url or config.BASE_URL).rstrip("/")
    if not ref.startswith("/"):
        ref = "/" + ref
    return base + ref
