"""Application layer for the tenancy package.

Orchestrates context stacks, request resolution, scheduling and
impersonation on top of the domain layer and the ports.
"""

from tenancy.application.impersonation import ImpersonationManager
from tenancy.application.request import SimpleRequest
from tenancy.application.scheduler import TenancyScheduler
from tenancy.application.tenancy import Tenancy

__all__ = [
    "ImpersonationManager",
    "SimpleRequest",
    "Tenancy",
    "TenancyScheduler",
]
