"""Utility helpers for the audit core."""

from .failure import failure_barrier
from .cookie_jar import parse_cookie_jar, CookieJarParseError

__all__ = [
    'failure_barrier',
    'parse_cookie_jar',
    'CookieJarParseError'
]
