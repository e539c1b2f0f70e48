"""Built-in context tasks."""

from tenancy.infrastructure.tasks.map_config import MapConfigTask
from tenancy.infrastructure.tasks.prefix_cache import PrefixCacheTask
from tenancy.infrastructure.tasks.snapshot import SnapshotArena
from tenancy.infrastructure.tasks.switch_database import SwitchDatabaseTask

__all__ = [
    "MapConfigTask",
    "PrefixCacheTask",
    "SnapshotArena",
    "SwitchDatabaseTask",
]
