"""Slack credential validation.

Two token classes exist: the Service class (bot tokens, ``xoxb-``) and the
Delegated class (user tokens, ``xoxp-``). A credential is only created once its
string has passed the format check of its own class, so a malformed token
fails at construction time and never reaches the network.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from infrastructure.operations.errors import ValidationFailure


class TokenClass(Enum):
    """Credential categories.

    Attributes:
        SERVICE: Bot-scoped token (xoxb-*), configured as SLACK_BOT_TOKEN
        DELEGATED: User-scoped token (xoxp-*), configured as SLACK_USER_TOKEN
    """

    SERVICE = "service"
    DELEGATED = "delegated"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @property
    def env_var(self) -> str:
        return _ENV_VARS[self]


_PREFIXES = {
    TokenClass.SERVICE: "xoxb-",
    TokenClass.DELEGATED: "xoxp-",
}

_ENV_VARS = {
    TokenClass.SERVICE: "SLACK_BOT_TOKEN",
    TokenClass.DELEGATED: "SLACK_USER_TOKEN",
}

# Prefix, then two or more hyphen-delimited alphanumeric segments.
MIN_SEGMENT_LENGTH = 3
_SEGMENTS = rf"[A-Za-z0-9]{{{MIN_SEGMENT_LENGTH},}}(?:-[A-Za-z0-9]{{{MIN_SEGMENT_LENGTH},}})+"

TOKEN_PATTERNS = {
    token_class: re.compile(rf"{re.escape(prefix)}{_SEGMENTS}")
    for token_class, prefix in _PREFIXES.items()
}


@dataclass(frozen=True)
class Credential:
    """A validated token bound to exactly one token class.

    Build it with ``validate_credential``; the secret value is kept out of
    ``repr`` so credentials can be logged safely.
    """

    token_class: TokenClass
    value: str = field(repr=False)


def validate_credential(token_class: TokenClass, raw: str) -> Credential:
    """Validate ``raw`` against the format of ``token_class``.

    Args:
        token_class: Class the token is supposed to belong to
        raw: Token string as configured

    Returns:
        Credential bound to ``token_class``

    Raises:
        ValidationFailure: If the string is empty or does not match the class
            pattern. A token that is well-formed for the other class is
            rejected too.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationFailure(token_class, "token is empty")

    if TOKEN_PATTERNS[token_class].fullmatch(raw):
        return Credential(token_class=token_class, value=raw)

    for other in TokenClass:
        if other is not token_class and TOKEN_PATTERNS[other].fullmatch(raw):
            raise ValidationFailure(
                token_class,
                f"token looks like a {other.value} token ({other.prefix}*), "
                f"expected {token_class.prefix}*",
            )

    if not raw.startswith(token_class.prefix):
        reason = f"token must start with {token_class.prefix}"
    else:
        reason = (
            "token must contain at least two hyphen-delimited alphanumeric "
            f"segments of {MIN_SEGMENT_LENGTH}+ characters after the prefix"
        )
    raise ValidationFailure(token_class, reason)
