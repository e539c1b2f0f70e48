"""Landlord lifecycle events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tenancy.domain.value_objects import LandlordContext


@dataclass(frozen=True)
class LandlordResolving:
    """Raised before the landlord resolver chain runs for a request."""

    request: Any


@dataclass(frozen=True)
class LandlordResolved:
    """Raised after a request was resolved to a landlord and pushed."""

    context: LandlordContext
    previous: LandlordContext | None


@dataclass(frozen=True)
class LandlordSwitched:
    """Raised after an effective landlord transition ran its tasks."""

    previous: LandlordContext | None
    current: LandlordContext | None


@dataclass(frozen=True)
class LandlordEnded:
    """Raised after the whole landlord stack was forgotten."""

    previous: LandlordContext | None
