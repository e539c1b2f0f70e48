"""Shared kernel for the tenancy package.

Pure, framework-agnostic helpers used by every layer: domain
normalization, dot-path access and the observation context carried by
domain probes.
"""

from tenancy.shared_kernel.domain_normalizer import normalize_domain
from tenancy.shared_kernel.dot_path import data_get, data_set
from tenancy.shared_kernel.observability_context import ObservationContext

__all__ = [
    "ObservationContext",
    "data_get",
    "data_set",
    "normalize_domain",
]
