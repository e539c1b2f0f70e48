"""Named SQLAlchemy engines with a switchable default.

``SwitchDatabaseTask`` overrides the default per scope (tenant or
landlord) while a context is active and purges the affected engine so
pooled connections never leak between entities.
"""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import Engine, create_engine

from tenancy.shared_kernel.scoped_overrides import ScopedOverrides


class ConnectionManager:
    """Lazily created engines keyed by connection name.

    ``default`` is the tenant override if set, else the landlord override,
    else the base default given at construction (or assigned later).
    """

    def __init__(self, urls: Mapping[str, str], default: str) -> None:
        if default not in urls:
            raise ValueError(f"Default connection [{default}] is not configured")
        self._urls = dict(urls)
        self._engines: dict[str, Engine] = {}
        self._base_default = default
        self._overrides: ScopedOverrides[str] = ScopedOverrides()

    @property
    def default(self) -> str:
        """Name of the connection currently used by ``engine()``."""
        return self._overrides.resolve(self._base_default)

    @default.setter
    def default(self, name: str) -> None:
        self._base_default = name

    def override(self, scope: str) -> str | None:
        return self._overrides.get(scope)

    def set_override(self, scope: str, name: str | None) -> None:
        """Route ``default`` to ``name`` for ``scope``; None removes the override."""
        self._overrides.set(scope, name)

    def engine(self, name: str | None = None) -> Engine:
        """Return the engine for ``name`` (or the default connection)."""
        connection = name or self.default
        engine = self._engines.get(connection)
        if engine is None:
            url = self._urls.get(connection)
            if url is None:
                raise KeyError(f"Connection [{connection}] is not configured")
            engine = create_engine(url, pool_pre_ping=True)
            self._engines[connection] = engine
        return engine

    def purge(self, name: str) -> None:
        """Dispose the pooled engine for ``name``; it is recreated on next use."""
        engine = self._engines.pop(name, None)
        if engine is not None:
            engine.dispose()
