"""Task protocol run on every effective context switch."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import EntityContext


@runtime_checkable
class ContextTask(Protocol):
    """Reversible side-effect handler.

    ``make_current`` runs when a context becomes active and
    ``forget_current`` when it stops being active. Calls always arrive in
    properly nested pairs, so a task may snapshot state in ``make_current``
    and restore exactly that snapshot in the matching ``forget_current``.
    """

    def make_current(self, context: EntityContext) -> None: ...

    def forget_current(self, context: EntityContext) -> None: ...
