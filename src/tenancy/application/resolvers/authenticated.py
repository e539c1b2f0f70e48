"""Resolve an entity from the authenticated principal."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tenancy.domain.entities import Entity
from tenancy.ports.repositories import IEntityRepository
from tenancy.ports.resolvers import TenancyRequest
from tenancy.shared_kernel.dot_path import data_get


class AuthenticatedResolver:
    """Read the entity (or its identifier) off the signed-in user.

    A principal that is itself an entity of this kind resolves to itself.
    Otherwise ``user_attribute`` (a dot-path such as ``"tenant"`` or
    ``"profile.tenant_id"``) is read from it.
    """

    def __init__(
        self,
        repository: IEntityRepository,
        entity_type: Callable[[Any], bool],
        user_attribute: str | None = None,
    ) -> None:
        self._repository = repository
        self._is_entity = entity_type
        self._user_attribute = user_attribute

    def resolve(self, request: TenancyRequest) -> Entity | None:
        user = request.user
        if user is None:
            return None
        if self._is_entity(user):
            return user
        if not self._user_attribute:
            return None

        value = data_get(user, self._user_attribute)
        if value is None:
            return None
        if self._is_entity(value):
            return value
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return self._repository.find_by_identifier(value)
        return None
