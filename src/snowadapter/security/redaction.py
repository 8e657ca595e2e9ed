"""Redaction helpers for option sets and logged parameters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .dsns import parse_dsn

REDACTED_VALUE = "***"

# Matched against the last dotted segment of an option key.
_SENSITIVE_KEY_TOKENS = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "private_key",
    "privatekey",
)

# Flags whose names mention a secret but whose values are not secret.
_NON_SENSITIVE_KEYS = frozenset({"cache_mfa_token", "store_temp_creds"})

_SENSITIVE_VALUE_TOKENS = (
    "password",
    "passwd",
    "secret",
    "token",
    "private_key",
    "begin rsa private key",
    "begin private key",
    "bearer",
    "authorization",
)


def _leaf(key: str) -> str:
    return key.rsplit(".", 1)[-1].lower()


def is_sensitive_key(key: str) -> bool:
    leaf = _leaf(key)
    if leaf in _NON_SENSITIVE_KEYS:
        return False
    return any(token in leaf for token in _SENSITIVE_KEY_TOKENS)


def is_sensitive_value(value: str) -> bool:
    normalized = value.lower()
    return any(token in normalized for token in _SENSITIVE_VALUE_TOKENS)


def redact_mapping(options: Mapping[str, str]) -> dict[str, str]:
    """
    Copy ``options`` with secrets replaced; a ``uri`` keeps its structure.
    """

    redacted: dict[str, str] = {}
    for key, value in options.items():
        if key == "uri":
            try:
                redacted[key] = parse_dsn(value).redacted()
            except ValueError:
                redacted[key] = REDACTED_VALUE
        elif is_sensitive_key(key):
            redacted[key] = REDACTED_VALUE
        else:
            redacted[key] = value
    return redacted


def redact_value(value: Any) -> Any:
    if isinstance(value, tuple):
        return tuple(redact_value(item) for item in value)
    if isinstance(value, list):
        return [redact_value(item) for item in value]
    if isinstance(value, dict):
        return {k: REDACTED_VALUE if is_sensitive_key(str(k)) else redact_value(v) for k, v in value.items()}
    if isinstance(value, bytes):
        decoded = value.decode("utf-8", errors="ignore")
        if decoded and is_sensitive_value(decoded):
            return REDACTED_VALUE
        return value
    if isinstance(value, str) and is_sensitive_value(value):
        return REDACTED_VALUE
    return value


def redact_params(params: Iterable[Any]) -> list[Any]:
    return [redact_value(value) for value in params]
