"""Domain-Oriented Observability for the tenancy application layer.

Probes for engine, scheduler and impersonation operations following
Domain-Oriented Observability patterns.
"""

from tenancy.application.observability.impersonation_probe import (
    DefaultImpersonationProbe,
    ImpersonationProbe,
)
from tenancy.application.observability.scheduler_probe import (
    DefaultSchedulerProbe,
    SchedulerProbe,
)
from tenancy.application.observability.tenancy_probe import (
    DefaultTenancyProbe,
    TenancyProbe,
)

__all__ = [
    "TenancyProbe",
    "DefaultTenancyProbe",
    "SchedulerProbe",
    "DefaultSchedulerProbe",
    "ImpersonationProbe",
    "DefaultImpersonationProbe",
]
