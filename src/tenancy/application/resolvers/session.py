"""Resolve an entity from the request session."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from tenancy.domain.entities import Entity
from tenancy.ports.repositories import IEntityRepository
from tenancy.ports.resolvers import TenancyRequest


class SessionResolver:
    """Read an entity reference stored under a session key.

    The stored value may be the entity itself, an identifier, or a mapping
    holding ``id`` or ``slug``.
    """

    def __init__(
        self,
        repository: IEntityRepository,
        entity_type: Callable[[Any], bool],
        session_key: str,
    ) -> None:
        self._repository = repository
        self._is_entity = entity_type
        self._session_key = session_key

    def resolve(self, request: TenancyRequest) -> Entity | None:
        session = request.session
        if session is None or not self._session_key:
            return None

        value = session.get(self._session_key)
        if value is None:
            return None
        if self._is_entity(value):
            return value
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return self._repository.find_by_identifier(value)
        if isinstance(value, Mapping):
            identifier = value.get("id")
            if isinstance(identifier, (int, str)) and not isinstance(identifier, bool):
                return self._repository.find_by_identifier(identifier)
            slug = value.get("slug")
            if isinstance(slug, str):
                return self._repository.find_by_slug(slug)
        return None
