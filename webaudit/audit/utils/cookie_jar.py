"""Netscape cookie-jar parsing for seeding scan cookies."""

from http.cookiejar import LoadError, MozillaCookieJar
from pathlib import Path
from typing import Dict, Union


class CookieJarParseError(Exception):
    """Raised when a cookie-jar file cannot be parsed."""
    pass


def parse_cookie_jar(path: Union[str, Path]) -> Dict[str, str]:
    """Read a Netscape-format cookie jar into a name -> value mapping.

    Expired and session cookies are kept: the jar describes the session the
    user wants the scan to run with.

    Raises:
        CookieJarParseError: If the file is not a valid cookie jar
    """
    jar = MozillaCookieJar(str(path))
    try:
        jar.load(ignore_discard=True, ignore_expires=True)
    except (LoadError, OSError) as e:
        raise CookieJarParseError(f"Failed to parse cookie-jar '{path}': {e}")

    return {cookie.name: cookie.value for cookie in jar if cookie.value is not None}
