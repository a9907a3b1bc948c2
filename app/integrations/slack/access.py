"""Slack access layer facade.

``SlackAccessLayer`` is the object tool handlers talk to. It composes the
connection manager, the identifier resolver with its cache, the retry engine
and the circuit breaker, all built from one Settings instance. Every instance
holds its own state; build one per host (or per test) and ``close`` it when
done.

Usage:
    access = SlackAccessLayer(get_settings())

    channel_id = await access.resolve(EntityKind.CHANNEL, "#general")
    result = await access.call("chat.postMessage", channel=channel_id, text="hi")
    print(result.data["ts"], result.attempts)

    await access.close()
"""

import time
from typing import Any, Awaitable, Callable, Optional

from infrastructure.configuration import Settings
from infrastructure.logging import bind_operation_context, get_module_logger
from infrastructure.observability import instrument
from infrastructure.operations.result import OperationResult
from infrastructure.resilience.circuit_breaker import CircuitBreaker
from infrastructure.resilience.retry import RetryConfig, RetryExecutor
from integrations.slack.cache import EntityKind, ResolutionCache
from integrations.slack.connections import (
    ClientFactory,
    SlackConnection,
    SlackConnectionManager,
)
from integrations.slack.credentials import TokenClass
from integrations.slack.resolver import IdentifierResolver


class SlackAccessLayer:
    """Resilient access to the Slack Web API.

    Args:
        settings: Settings instance (Slack, retry and circuit breaker sections)
        client_factory: Builds the SDK client for a credential; injectable
            for tests
        clock: Monotonic clock shared by the resolution cache and the breaker
        sleep: Awaitable sleep used for backoff waits
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Optional[ClientFactory] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        self._settings = settings
        retry_config = RetryConfig.from_settings(settings.retry)

        self.connections = SlackConnectionManager(
            settings.slack,
            client_factory=client_factory,
            default_rate_limit_seconds=retry_config.default_rate_limit_seconds,
        )
        self.executor = RetryExecutor(retry_config, sleep=sleep)
        self.cache = ResolutionCache(
            ttl_seconds=settings.slack.SLACK_RESOLUTION_CACHE_TTL_SECONDS,
            clock=clock,
        )
        self.resolver = IdentifierResolver(
            lambda: self.connections.get_connection(TokenClass.SERVICE),
            self.cache,
            executor=self.executor,
        )

        breaker_settings = settings.circuit_breaker
        self.circuit_breaker: Optional[CircuitBreaker] = None
        if breaker_settings.enabled:
            self.circuit_breaker = CircuitBreaker(
                "slack",
                failure_threshold=breaker_settings.failure_threshold,
                timeout_seconds=breaker_settings.timeout_seconds,
                half_open_max_calls=breaker_settings.half_open_max_calls,
                clock=clock,
            )

        self._sweep_interval = settings.slack.SLACK_RESOLUTION_CACHE_SWEEP_SECONDS
        self._log = get_module_logger(component="slack_access_layer")

    def get_connection(self, token_class: TokenClass = TokenClass.SERVICE) -> SlackConnection:
        """Return the (single) connection for ``token_class``.

        Raises:
            MissingCredential: No token configured for the class
            ValidationFailure: The configured token is malformed
        """
        return self.connections.get_connection(token_class)

    def reset_connection(self, token_class: TokenClass) -> None:
        """Force the next ``get_connection`` to rebuild and re-validate."""
        self.connections.reset_connection(token_class)

    async def resolve(self, kind: EntityKind, name_or_id: str) -> str:
        """Resolve a channel/user name (or pass through an identifier)."""
        if self._sweep_interval > 0:
            self.cache.start_sweeper(self._sweep_interval)
        return await self.resolver.resolve(kind, name_or_id)

    async def resolve_channel(self, channel: str) -> str:
        return await self.resolve(EntityKind.CHANNEL, channel)

    async def resolve_user(self, user: str) -> str:
        return await self.resolve(EntityKind.USER, user)

    async def execute(
        self, operation: Callable[[], Awaitable[Any]], name: Optional[str] = None
    ) -> OperationResult:
        """Run ``operation`` through the circuit breaker and the retry engine.

        Returns:
            OperationResult.success with the payload and attempt count

        Raises:
            FailureRecord: The failure that ended the call, with ``attempts``
        """
        if self.circuit_breaker is None:
            return await self.executor.execute(operation, name=name)
        return await self.circuit_breaker.call(
            lambda: self.executor.execute(operation, name=name)
        )

    async def call(
        self,
        api_method: str,
        token_class: TokenClass = TokenClass.SERVICE,
        http_verb: str = "POST",
        **params: Any,
    ) -> OperationResult:
        """Call a Web API method with the full resilience stack.

        Args:
            api_method: Slack method name (e.g. "pins.add")
            token_class: Token class to sign the call with
            http_verb: HTTP verb for the call
            **params: Method arguments

        Returns:
            OperationResult.success with the response payload
        """
        connection = self.get_connection(token_class)
        operation = instrument(
            api_method,
            lambda: connection.request(api_method, http_verb=http_verb, **params),
            token_class=token_class.value,
        )
        with bind_operation_context(operation=api_method, token_class=token_class.value):
            return await self.execute(operation, name=api_method)

    async def test_connection(self, token_class: TokenClass = TokenClass.SERVICE) -> bool:
        """Check that Slack accepts the credential of ``token_class``."""
        return await self.get_connection(token_class).test_connection()

    def get_stats(self) -> dict:
        """Snapshot of cache, breaker and connection state."""
        return {
            "connections": [tc.value for tc in self.connections.materialized],
            "resolution_cache": self.cache.get_stats(),
            "circuit_breaker": (
                self.circuit_breaker.get_stats() if self.circuit_breaker else None
            ),
        }

    async def close(self) -> None:
        """Stop the cache sweep and drop all connections."""
        await self.cache.close()
        self.connections.reset_all()
        self._log.info("slack_access_layer_closed")

    async def __aenter__(self) -> "SlackAccessLayer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
