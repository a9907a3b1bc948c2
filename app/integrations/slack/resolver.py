"""Identifier resolution for Slack channels and users.

Turns human-friendly references (``#general``, ``@alice``) into Slack
identifiers (``C0123456789``, ``U0123456789``). Identifiers pass through
untouched; names are looked up through the resolution cache and, on a miss,
through one scan of ``conversations.list`` / ``users.list``. A scan is a
single logical lookup: it follows ``next_cursor`` page by page and stops at
the first match, so a large workspace may take several listing requests.

Concurrent misses for the same name may each perform the lookup; both write
the same identifier and the last write wins.
"""

import re
from typing import Any, Callable, Dict, Mapping, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations.errors import FailureRecord
from infrastructure.operations.status import ErrorKind
from infrastructure.resilience.retry import RetryExecutor
from integrations.slack.cache import EntityKind, ResolutionCache
from integrations.slack.connections import SlackConnection


IDENTIFIER_PATTERNS = {
    EntityKind.CHANNEL: re.compile(r"[CGD][A-Z0-9]{8,}"),
    EntityKind.USER: re.compile(r"[UW][A-Z0-9]{8,}"),
}

COSMETIC_PREFIXES = {
    EntityKind.CHANNEL: "#",
    EntityKind.USER: "@",
}

LISTING_METHODS = {
    EntityKind.CHANNEL: (
        "conversations.list",
        "channels",
        {"types": "public_channel,private_channel", "exclude_archived": False},
    ),
    EntityKind.USER: ("users.list", "members", {}),
}


def is_identifier(kind: EntityKind, value: str) -> bool:
    """Whether ``value`` already has the shape of a ``kind`` identifier."""
    return bool(IDENTIFIER_PATTERNS[kind].fullmatch(value))


def normalize_name(kind: EntityKind, value: str) -> str:
    """Strip whitespace and the cosmetic prefix (``#`` or ``@``)."""
    name = value.strip()
    prefix = COSMETIC_PREFIXES[kind]
    if name.startswith(prefix):
        name = name[len(prefix):]
    return name.strip()


def _matches(kind: EntityKind, item: Mapping[str, Any], name: str) -> bool:
    if item.get("name") == name:
        return True
    return kind == EntityKind.USER and item.get("real_name") == name


class IdentifierResolver:
    """Resolve channel and user names to identifiers.

    Args:
        connection_provider: Returns the connection used for listing calls
        cache: Resolution cache shared by all resolutions
        executor: Optional retry executor wrapped around each listing page
        page_limit: Page size requested from the listing methods

    Example:
        resolver = IdentifierResolver(
            lambda: manager.get_connection(TokenClass.SERVICE),
            ResolutionCache(ttl_seconds=300),
        )
        channel_id = await resolver.resolve(EntityKind.CHANNEL, "#general")
    """

    def __init__(
        self,
        connection_provider: Callable[[], SlackConnection],
        cache: ResolutionCache,
        executor: Optional[RetryExecutor] = None,
        page_limit: int = 200,
    ):
        self._connection_provider = connection_provider
        self._cache = cache
        self._executor = executor
        self._page_limit = page_limit
        self._log = get_module_logger(component="identifier_resolver")

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    async def resolve(self, kind: EntityKind, name_or_id: str) -> str:
        """Resolve ``name_or_id`` to a ``kind`` identifier.

        Args:
            kind: EntityKind.CHANNEL or EntityKind.USER
            name_or_id: Identifier, or name with optional ``#``/``@`` prefix

        Returns:
            The Slack identifier

        Raises:
            FailureRecord: VALIDATION for an empty name, NOT_FOUND when no
                entity carries the name, or the failure of the lookup call
        """
        if not isinstance(name_or_id, str):
            raise FailureRecord(
                ErrorKind.VALIDATION,
                f"{kind.value} reference must be a string",
                error_code="INVALID_NAME",
            )
        if is_identifier(kind, name_or_id):
            return name_or_id

        name = normalize_name(kind, name_or_id)
        if not name:
            raise FailureRecord(
                ErrorKind.VALIDATION,
                f"{kind.value} name is empty",
                error_code="INVALID_NAME",
            )

        log = self._log.bind(kind=kind.value, name=name)

        cached = self._cache.get(kind, name)
        if cached is not None:
            log.debug("identifier_resolved", identifier=cached, cache_hit=True)
            return cached

        identifier = await self._lookup(kind, name)
        if identifier is None:
            log.info("identifier_not_found")
            raise FailureRecord(
                ErrorKind.NOT_FOUND,
                f"{kind.value.capitalize()} '{name_or_id}' not found",
                error_code=f"{kind.value}_not_found",
            )

        self._cache.set(kind, name, identifier)
        log.info("identifier_resolved", identifier=identifier, cache_hit=False)
        return identifier

    async def resolve_channel(self, channel: str) -> str:
        return await self.resolve(EntityKind.CHANNEL, channel)

    async def resolve_user(self, user: str) -> str:
        return await self.resolve(EntityKind.USER, user)

    async def _lookup(self, kind: EntityKind, name: str) -> Optional[str]:
        """Scan the listing method page by page for ``name``."""
        method, items_key, base_params = LISTING_METHODS[kind]
        cursor: Optional[str] = None

        while True:
            params = dict(base_params, limit=self._page_limit)
            if cursor:
                params["cursor"] = cursor
            page = await self._fetch_page(method, params)

            for item in page.get(items_key) or []:
                if _matches(kind, item, name) and item.get("id"):
                    return item["id"]

            meta = page.get("response_metadata")
            cursor = meta.get("next_cursor") if isinstance(meta, Mapping) else None
            if not cursor:
                return None

    async def _fetch_page(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        connection = self._connection_provider()
        if self._executor is None:
            return await connection.call(method, **params)

        result = await self._executor.execute(
            lambda: connection.request(method, **params), name=method
        )
        return result.data
