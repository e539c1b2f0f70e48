"""Observability for tenancy infrastructure operations."""

from tenancy.infrastructure.observability.domain_lookup_probe import (
    DefaultDomainLookupProbe,
    DomainLookupProbe,
)

__all__ = [
    "DefaultDomainLookupProbe",
    "DomainLookupProbe",
]
