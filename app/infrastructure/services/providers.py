"""
Factory functions for process-wide singletons.

Provides application-scoped providers for the settings and the Slack access
layer. Tests should build their own instances instead of using these.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from integrations.slack.access import SlackAccessLayer


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_slack_access() -> SlackAccessLayer:
    """
    Get application-scoped Slack access layer.

    Connections inside the layer are created lazily, so building it does not
    require any token to be configured.

    Returns:
        SlackAccessLayer: Cached access layer built from ``get_settings()``.

    Usage:
        access = get_slack_access()
        channel_id = await access.resolve_channel("#incidents")
    """
    return SlackAccessLayer(get_settings())
