"""Slack Integration Package.

Resilient access to the Slack Web API. Contains:

- credentials: Token classes and credential format validation.
- connections: One reusable SlackConnection per token class.
- cache: TTL cache of resolved channel/user identifiers.
- resolver: Name to identifier resolution.
- access: SlackAccessLayer, the facade composing all of the above with the
  retry engine and circuit breaker.
"""

from integrations.slack.access import SlackAccessLayer
from integrations.slack.cache import EntityKind, ResolutionCache, ResolutionCacheEntry
from integrations.slack.connections import (
    SlackConnection,
    SlackConnectionManager,
    build_web_client,
)
from integrations.slack.credentials import Credential, TokenClass, validate_credential
from integrations.slack.resolver import IdentifierResolver

__all__ = [
    "Credential",
    "EntityKind",
    "IdentifierResolver",
    "ResolutionCache",
    "ResolutionCacheEntry",
    "SlackAccessLayer",
    "SlackConnection",
    "SlackConnectionManager",
    "TokenClass",
    "build_web_client",
    "validate_credential",
]
