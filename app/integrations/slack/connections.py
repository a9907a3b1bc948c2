"""Slack connection management.

One SlackConnection is materialized per token class, lazily, on first use,
and reused for the lifetime of the manager. The connection owns an
``AsyncWebClient`` configured with the validated credential; the SDK's own
retry handlers are disabled; retries happen in the access layer.
"""

import asyncio
import math
import threading
from typing import Any, Callable, Dict, Optional, Tuple

import structlog
from slack_sdk.web.async_client import AsyncWebClient

from infrastructure.configuration.integrations import SlackSettings
from infrastructure.operations.classifiers import (
    DEFAULT_RATE_LIMIT_SECONDS,
    classify,
    classify_slack_payload,
)
from infrastructure.operations.errors import MissingCredential
from infrastructure.operations.result import OperationResult
from integrations.slack.credentials import Credential, TokenClass, validate_credential

logger = structlog.get_logger()

ClientFactory = Callable[[Credential, float], Any]


def build_web_client(credential: Credential, timeout_seconds: float) -> AsyncWebClient:
    """Build the Slack SDK client backing a connection."""
    return AsyncWebClient(
        token=credential.value,
        timeout=max(1, math.ceil(timeout_seconds)),
        retry_handlers=[],
    )


def _encode_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None values and turn bools/lists into the strings Slack expects."""
    encoded: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            encoded[key] = ",".join(str(item) for item in value)
        else:
            encoded[key] = value
    return encoded


class SlackConnection:
    """Reusable, request-signing handle for one token class.

    Args:
        credential: Validated credential the connection signs with
        client: Slack SDK client (AsyncWebClient or a compatible object)
        timeout_seconds: Bound applied to every call
        default_rate_limit_seconds: Wait hint for rate limited responses
            without Retry-After

    Example:
        >>> connection = manager.get_connection(TokenClass.SERVICE)
        >>> result = await connection.request("conversations.info", channel="C0123456789")
        >>> if result.is_success:
        ...     print(result.data["channel"]["name"])
    """

    def __init__(
        self,
        credential: Credential,
        client: Any,
        timeout_seconds: float,
        default_rate_limit_seconds: float = DEFAULT_RATE_LIMIT_SECONDS,
    ):
        self._credential = credential
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._default_rate_limit_seconds = default_rate_limit_seconds
        self._log = structlog.get_logger(
            component="slack_connection", token_class=credential.token_class.value
        )

    @property
    def token_class(self) -> TokenClass:
        return self._credential.token_class

    @property
    def client(self) -> Any:
        """Underlying SDK client, for calls the connection does not wrap."""
        return self._client

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    async def request(
        self, api_method: str, http_verb: str = "POST", **params: Any
    ) -> OperationResult:
        """Issue one Web API call and decode the response.

        Never raises for API or network failures: the outcome is an
        OperationResult carrying either the response payload or the
        classified FailureRecord.

        Args:
            api_method: Slack method name (e.g. "conversations.list")
            http_verb: HTTP verb, POST unless the method requires GET
            **params: Method arguments

        Returns:
            OperationResult with the decoded payload on success
        """
        log = self._log.bind(api_method=api_method)
        try:
            response = await asyncio.wait_for(
                self._client.api_call(
                    api_method, http_verb=http_verb, params=_encode_params(params)
                ),
                timeout=self._timeout_seconds,
            )
        except Exception as exc:
            failure = classify(
                exc, default_rate_limit_seconds=self._default_rate_limit_seconds
            )
            log.warning(
                "slack_api_call_failed",
                kind=failure.kind.value,
                error_code=failure.error_code,
            )
            return OperationResult.failure(failure)

        payload = getattr(response, "data", response)
        if not isinstance(payload, dict) or not payload.get("ok"):
            failure = classify_slack_payload(
                payload if isinstance(payload, dict) else None,
                status_code=getattr(response, "status_code", None),
                headers=getattr(response, "headers", None),
                default_rate_limit_seconds=self._default_rate_limit_seconds,
            )
            log.warning(
                "slack_api_call_failed",
                kind=failure.kind.value,
                error_code=failure.error_code,
            )
            return OperationResult.failure(failure)

        log.debug("slack_api_call_succeeded")
        return OperationResult.success(data=payload, message=f"{api_method} succeeded")

    async def call(self, api_method: str, http_verb: str = "POST", **params: Any) -> Dict[str, Any]:
        """Like ``request`` but returns the payload and raises the failure.

        Raises:
            FailureRecord: The classified failure of the call
        """
        result = await self.request(api_method, http_verb=http_verb, **params)
        return result.unwrap()

    async def test_connection(self) -> bool:
        """Check the credential against Slack with ``auth.test``.

        Returns:
            True if Slack accepted the credential, False otherwise
        """
        result = await self.request("auth.test")
        if not result.is_success:
            self._log.error(
                "slack_connection_test_failed",
                kind=result.error.kind.value if result.error else None,
                error=result.message,
            )
            return False
        self._log.info(
            "slack_connection_test_succeeded",
            user=result.data.get("user"),
            team=result.data.get("team"),
            url=result.data.get("url"),
        )
        return True

    def __repr__(self) -> str:
        return f"SlackConnection(token_class={self.token_class.value!r})"


class SlackConnectionManager:
    """Manages Slack connections. Ensures a single instance per token class.

    Args:
        settings: SlackSettings holding the configured tokens and timeout
        client_factory: Builds the SDK client for a credential; injectable
            for tests
        default_rate_limit_seconds: Passed on to every connection
    """

    def __init__(
        self,
        settings: SlackSettings,
        client_factory: Optional[ClientFactory] = None,
        default_rate_limit_seconds: float = DEFAULT_RATE_LIMIT_SECONDS,
    ):
        self._settings = settings
        self._client_factory = client_factory or build_web_client
        self._default_rate_limit_seconds = default_rate_limit_seconds
        self._connections: Dict[TokenClass, SlackConnection] = {}
        self._lock = threading.Lock()

    def get_connection(self, token_class: TokenClass = TokenClass.SERVICE) -> SlackConnection:
        """Return the connection for ``token_class``, creating it on first use.

        Raises:
            MissingCredential: No token is configured for the class
            ValidationFailure: The configured token is malformed
        """
        connection = self._connections.get(token_class)
        if connection is not None:
            return connection

        with self._lock:
            connection = self._connections.get(token_class)
            if connection is None:
                connection = self._create_connection(token_class)
                self._connections[token_class] = connection
        return connection

    def _create_connection(self, token_class: TokenClass) -> SlackConnection:
        raw = getattr(self._settings, token_class.env_var, "") or ""
        if not raw.strip():
            logger.error("slack_credential_missing", token_class=token_class.value)
            raise MissingCredential(token_class)

        credential = validate_credential(token_class, raw)
        timeout = self._settings.SLACK_API_TIMEOUT_SECONDS
        connection = SlackConnection(
            credential,
            self._client_factory(credential, timeout),
            timeout_seconds=timeout,
            default_rate_limit_seconds=self._default_rate_limit_seconds,
        )
        logger.info(
            "slack_connection_created",
            token_class=token_class.value,
            timeout_seconds=timeout,
        )
        return connection

    def reset_connection(self, token_class: TokenClass) -> None:
        """Drop the connection for ``token_class``; the next request rebuilds
        and re-validates it."""
        with self._lock:
            if self._connections.pop(token_class, None) is not None:
                logger.info("slack_connection_reset", token_class=token_class.value)

    def reset_all(self) -> None:
        """Drop every materialized connection."""
        with self._lock:
            self._connections.clear()

    @property
    def materialized(self) -> Tuple[TokenClass, ...]:
        """Token classes that currently have a connection."""
        with self._lock:
            return tuple(self._connections)
