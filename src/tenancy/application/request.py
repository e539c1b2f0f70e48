"""Framework-neutral request value for resolvers.

HTTP integrations adapt their own request objects to the
``TenancyRequest`` protocol; ``SimpleRequest`` is the plain implementation
used by command-line hosts, queue workers and tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SimpleRequest:
    """Immutable request snapshot.

    Attributes:
        host: Host the request was addressed to, without the port
        path: URL path, e.g. ``/acme/dashboard``
        headers: Header mapping; names are compared case-insensitively
        session: Session values, or None for sessionless requests
        user: Authenticated principal, or None
    """

    host: str | None = None
    path: str = "/"
    headers: Mapping[str, str] = field(default_factory=dict)
    session: Mapping[str, Any] | None = None
    user: Any = None

    def segment(self, index: int) -> str | None:
        """Return the 1-based path segment, ignoring empty segments."""
        if index < 1:
            return None
        segments = [part for part in self.path.split("?", 1)[0].split("/") if part]
        if index > len(segments):
            return None
        return segments[index - 1]

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None
