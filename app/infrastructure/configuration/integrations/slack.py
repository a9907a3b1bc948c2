"""Slack integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SlackSettings(IntegrationSettings):
    """Slack Web API access configuration.

    Environment Variables:
        SLACK_BOT_TOKEN: Service (bot) token, xoxb-*. Required at first use.
        SLACK_USER_TOKEN: Delegated (user) token, xoxp-*. Optional.
        SLACK_API_TIMEOUT_SECONDS: Timeout applied to every Web API call
        SLACK_RESOLUTION_CACHE_TTL_SECONDS: How long a resolved channel/user
            identifier stays valid in the resolution cache
        SLACK_RESOLUTION_CACHE_SWEEP_SECONDS: Interval of the background purge
            of expired resolutions. 0 disables the sweep (lazy eviction only).

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        bot_token = settings.slack.SLACK_BOT_TOKEN
        ttl = settings.slack.SLACK_RESOLUTION_CACHE_TTL_SECONDS
        ```
    """

    SLACK_BOT_TOKEN: str = ""
    SLACK_USER_TOKEN: str = ""
    SLACK_API_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    SLACK_RESOLUTION_CACHE_TTL_SECONDS: float = Field(default=300.0, gt=0)
    SLACK_RESOLUTION_CACHE_SWEEP_SECONDS: float = Field(default=0.0, ge=0)
