"""Canonical hostname normalization.

Every domain comparison in the package goes through ``normalize_domain`` so
that case, surrounding whitespace and trailing dots never cause a mismatch.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit


def normalize_domain(value: Any) -> str | None:
    """Reduce a hostname or URL to its canonical lowercase form.

    Values containing a scheme separator are parsed as URLs and reduced to
    their host. The result is lowercased and stripped of leading and
    trailing dots.

    Args:
        value: A bare host (``"Acme.Example.TEST."``) or a URL
            (``"https://acme.example.test/path"``).

    Returns:
        The normalized host, or None when nothing usable remains.
    """
    if not isinstance(value, str):
        return None

    host = value.strip()
    if not host:
        return None

    if "://" in host:
        try:
            parsed_host = urlsplit(host).hostname
        except ValueError:
            return None
        if not parsed_host:
            return None
        host = parsed_host

    host = host.lower().strip().strip(".")
    return host or None
