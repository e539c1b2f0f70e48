"""Central (application-owned) domain matching shared by host resolvers."""

from __future__ import annotations

from collections.abc import Iterable

from tenancy.shared_kernel.domain_normalizer import normalize_domain


def normalize_central_domains(domains: Iterable[str]) -> tuple[str, ...]:
    normalized = (normalize_domain(domain) for domain in domains)
    return tuple(domain for domain in normalized if domain is not None)


def is_central_domain(host: str, central_domains: Iterable[str]) -> bool:
    """Return True when ``host`` is a central domain or one of its subdomains.

    Both sides are expected to be normalized already.
    """
    for central in central_domains:
        if host == central or host.endswith(f".{central}"):
            return True
    return False
