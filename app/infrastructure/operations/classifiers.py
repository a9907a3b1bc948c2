"""Error classifiers for Slack Web API failures.

Converts raw failure signals (SDK exceptions, network errors, timeouts and
``ok: false`` payloads) into FailureRecord objects with a closed ErrorKind.
Classification is total: every input yields exactly one record, falling back
to UNKNOWN instead of raising.

Key Functions:
- classify(): any exception -> FailureRecord
- classify_slack_payload(): decoded ``ok: false`` response -> FailureRecord

Usage:
    from infrastructure.operations.classifiers import classify

    try:
        response = await client.api_call("conversations.info", params=params)
    except Exception as exc:
        record = classify(exc)
        if record.recoverable:
            ...
"""

import asyncio
from typing import Any, Mapping, Optional

import aiohttp
from slack_sdk.errors import SlackApiError, SlackRequestError

from infrastructure.operations.errors import FailureRecord
from infrastructure.operations.status import ErrorKind

DEFAULT_RATE_LIMIT_SECONDS = 30.0

AUTHENTICATION_CODES = frozenset(
    {
        "invalid_auth",
        "not_authed",
        "account_inactive",
        "token_revoked",
        "token_expired",
        "no_permission",
        "missing_scope",
        "not_allowed_token_type",
    }
)

NOT_FOUND_CODES = frozenset(
    {
        "channel_not_found",
        "user_not_found",
        "users_not_found",
        "message_not_found",
        "file_not_found",
        "file_deleted",
        "thread_not_found",
        "not_in_channel",
    }
)

RATE_LIMITED_CODES = frozenset({"rate_limited", "ratelimited"})

TRANSIENT_CODES = frozenset(
    {
        "internal_error",
        "fatal_error",
        "service_unavailable",
        "request_timeout",
    }
)

SLACK_ERROR_MESSAGES = {
    # Authentication errors
    "invalid_auth": "Invalid authentication token. Please check your Slack token.",
    "not_authed": "No authentication token provided.",
    "account_inactive": "Slack account is inactive. Please reactivate your account.",
    "token_revoked": "Authentication token has been revoked. Please generate a new token.",
    "token_expired": "Authentication token has expired. Please refresh the token.",
    "no_permission": "Insufficient permissions. Please check your token scopes.",
    "missing_scope": "Missing required OAuth scope. Please update your app permissions.",
    "not_allowed_token_type": "This method does not accept this type of token.",
    # Channel errors
    "channel_not_found": "Channel not found. Please check the channel ID or name.",
    "not_in_channel": "Bot is not a member of this channel. Please invite the bot first.",
    "is_archived": "Cannot perform action on archived channel.",
    "already_in_channel": "User is already a member of this channel.",
    # User errors
    "user_not_found": "User not found. Please check the user ID or username.",
    "users_not_found": "One or more users not found. Please check user IDs.",
    "cant_invite_self": "Cannot invite yourself to a channel.",
    # Message errors
    "message_not_found": "Message not found. It may have been deleted.",
    "thread_not_found": "Thread not found. Please check the thread timestamp.",
    "cant_update_message": "Cannot update this message. You may not have permission.",
    "edit_window_closed": "Message edit window has closed.",
    "msg_too_long": "Message is too long. Please shorten your message.",
    # File errors
    "file_not_found": "File not found or has been deleted.",
    "file_deleted": "File has been deleted and cannot be accessed.",
    # Rate limiting
    "rate_limited": "API rate limit exceeded. Please wait before making more requests.",
    "ratelimited": "API rate limit exceeded. Please wait before making more requests.",
    # Server side
    "internal_error": "Slack reported an internal error. Please try again.",
    "fatal_error": "Slack reported a fatal error. Please try again.",
    "service_unavailable": "Slack is temporarily unavailable. Please try again.",
    "request_timeout": "Slack timed out processing the request. Please try again.",
    # General errors
    "invalid_arguments": "Invalid arguments provided. Please check your input.",
    "not_allowed": "This action is not allowed.",
}

SUGGESTED_ACTIONS = {
    "invalid_auth": "Verify SLACK_BOT_TOKEN / SLACK_USER_TOKEN in the environment",
    "token_revoked": "Reinstall the Slack app to obtain a new token",
    "no_permission": "Add required OAuth scopes to your Slack app",
    "missing_scope": "Update OAuth scopes in your Slack app settings",
    "channel_not_found": "Check the channel exists and the bot has access",
    "not_in_channel": "Invite the bot to the channel or use a public channel",
    "user_not_found": "Verify the user ID or username is correct",
    "rate_limited": "Reduce request frequency; the call will be retried with backoff",
    "ratelimited": "Reduce request frequency; the call will be retried with backoff",
}


def _parse_retry_after(value: Any) -> Optional[float]:
    """Parse a Retry-After value (header string or number) into seconds."""
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None


def _retry_after_from(
    headers: Optional[Mapping[str, Any]], payload: Optional[Mapping[str, Any]]
) -> Optional[float]:
    if headers:
        for name in ("Retry-After", "retry-after"):
            if name in headers:
                parsed = _parse_retry_after(headers[name])
                if parsed is not None:
                    return parsed
    if payload:
        return _parse_retry_after(payload.get("retry_after"))
    return None


def _metadata_messages(body: Mapping[str, Any]) -> Optional[list]:
    """Return ``response_metadata.messages`` when it is a list, else None."""
    meta = body.get("response_metadata")
    if not isinstance(meta, Mapping):
        return None
    messages = meta.get("messages")
    return messages if isinstance(messages, list) else None


def _kind_for_code(error_code: str) -> ErrorKind:
    if error_code in AUTHENTICATION_CODES:
        return ErrorKind.AUTHENTICATION
    if error_code in NOT_FOUND_CODES:
        return ErrorKind.NOT_FOUND
    if error_code in RATE_LIMITED_CODES:
        return ErrorKind.RATE_LIMITED
    if error_code in TRANSIENT_CODES:
        return ErrorKind.TRANSIENT
    return ErrorKind.UNKNOWN


def _kind_for_status(status_code: Optional[int]) -> Optional[ErrorKind]:
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code == 401:
        return ErrorKind.AUTHENTICATION
    if status_code is not None and 500 <= status_code < 600:
        return ErrorKind.TRANSIENT
    return None


def slack_error_message(error_code: str, details: Optional[list] = None) -> str:
    """Build the user-facing message for a Slack error code.

    Args:
        error_code: Slack ``error`` string (e.g. "channel_not_found")
        details: Optional ``response_metadata.messages`` entries

    Returns:
        Friendly message followed by the code in parentheses
    """
    friendly = SLACK_ERROR_MESSAGES.get(error_code, f"Slack API error: {error_code}")
    message = f"{friendly} ({error_code})"
    if details:
        message += f" Additional info: {', '.join(str(d) for d in details)}"
    return message


def classify_slack_payload(
    payload: Optional[Mapping[str, Any]],
    status_code: Optional[int] = None,
    headers: Optional[Mapping[str, Any]] = None,
    cause: Optional[BaseException] = None,
    default_rate_limit_seconds: float = DEFAULT_RATE_LIMIT_SECONDS,
) -> FailureRecord:
    """Classify a decoded Slack response that reported a failure.

    The HTTP status wins over the payload's error code for 429/401/5xx, since
    Slack may return a generic body alongside those statuses.

    Args:
        payload: Decoded JSON body (expects ``ok`` and ``error`` keys)
        status_code: HTTP status code of the response, when known
        headers: HTTP response headers, used for Retry-After
        cause: Exception that carried the payload, if any
        default_rate_limit_seconds: Hint used when a rate limited response
            carries no Retry-After

    Returns:
        FailureRecord for the response
    """
    body: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    error_code = str(body.get("error") or "unknown_error")
    details = _metadata_messages(body)

    kind = _kind_for_status(status_code) or _kind_for_code(error_code)

    retry_after = None
    if kind == ErrorKind.RATE_LIMITED:
        retry_after = _retry_after_from(headers, body)
        if retry_after is None:
            retry_after = default_rate_limit_seconds

    if error_code == "unknown_error" and status_code is not None:
        message = f"Slack API request failed with HTTP {status_code}"
    else:
        message = slack_error_message(error_code, details)

    return FailureRecord(
        kind,
        message,
        error_code=error_code,
        retry_after=retry_after,
        cause=cause,
        suggested_action=SUGGESTED_ACTIONS.get(error_code),
    )


def classify(
    exc: Any,
    default_rate_limit_seconds: float = DEFAULT_RATE_LIMIT_SECONDS,
) -> FailureRecord:
    """Classify any failure into a FailureRecord.

    Mapping:
    - FailureRecord: returned unchanged
    - SlackApiError: HTTP status, then Slack error code (see
      classify_slack_payload)
    - asyncio.TimeoutError / TimeoutError: TRANSIENT (TIMEOUT)
    - aiohttp.ClientError, ConnectionError, OSError, SlackRequestError:
      TRANSIENT (CONNECTION_ERROR)
    - anything else: UNKNOWN (UNKNOWN_ERROR)

    Args:
        exc: The raw failure, usually an exception
        default_rate_limit_seconds: Hint for rate limited failures without one

    Returns:
        FailureRecord; never raises
    """
    if isinstance(exc, FailureRecord):
        return exc

    try:
        if isinstance(exc, SlackApiError):
            response = exc.response
            return classify_slack_payload(
                getattr(response, "data", None),
                status_code=getattr(response, "status_code", None),
                headers=getattr(response, "headers", None),
                cause=exc,
                default_rate_limit_seconds=default_rate_limit_seconds,
            )

        # TimeoutError must be checked before OSError (it is a subclass).
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
            return FailureRecord(
                ErrorKind.TRANSIENT,
                "Slack API request timed out",
                error_code="TIMEOUT",
                cause=exc,
            )

        if isinstance(
            exc, (aiohttp.ClientError, ConnectionError, OSError, SlackRequestError)
        ):
            return FailureRecord(
                ErrorKind.TRANSIENT,
                f"Connection error: {type(exc).__name__}: {exc}",
                error_code="CONNECTION_ERROR",
                cause=exc,
            )

        cause = exc if isinstance(exc, BaseException) else None
        return FailureRecord(
            ErrorKind.UNKNOWN,
            f"Unexpected error: {type(exc).__name__}: {exc}",
            error_code="UNKNOWN_ERROR",
            cause=cause,
        )
    except Exception as inner:  # classify is total
        return FailureRecord(
            ErrorKind.UNKNOWN,
            f"Unclassifiable error: {type(exc).__name__}",
            error_code="UNKNOWN_ERROR",
            cause=inner,
        )
