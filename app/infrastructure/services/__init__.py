"""
Singleton service providers.
"""

from infrastructure.services.providers import get_settings, get_slack_access

__all__ = [
    "get_settings",
    "get_slack_access",
]
