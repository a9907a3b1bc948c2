"""Infrastructure modules for the Slack access layer.

Centralized infrastructure components:
- configuration: Settings management (Settings, SlackSettings, RetrySettings)
- logging: structlog setup, processors and correlation context
- observability: Operation instrumentation
- operations: Operation results and error classification
- resilience: Retry engine and circuit breaker
- services: Process-wide providers (get_settings, get_slack_access)
"""
