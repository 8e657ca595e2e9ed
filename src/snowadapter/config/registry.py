"""
Validation of Snowflake option sets.

:func:`configure` turns a caller-supplied ``{key: str}`` mapping into an
immutable :class:`ValidatedOptions`. Validation is two-pass: the
authentication mode is resolved first, then every remaining key is checked
against it. Nothing here touches the network.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..errors import ConfigError
from ..security.dsns import parse_dsn
from ..security.redaction import redact_mapping
from . import keys
from .durations import parse_duration
from .keys import AuthType

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_DIGITS_RE = re.compile(r"[0-9]+")


def _parse_text(value: str, *, key: str) -> str:
    return value


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for '{key}': {value!r}", key=key)


def _parse_port(value: str, *, key: str) -> int:
    if not _DIGITS_RE.fullmatch(value):
        raise ConfigError(f"Invalid integer value for '{key}': {value!r}", key=key)
    port = int(value)
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range for '{key}': {value!r}", key=key)
    return port


def _parse_tracing(value: str, *, key: str) -> str:
    level = value.strip().lower()
    if level not in keys.TRACING_LEVELS:
        raise ConfigError(
            f"Invalid tracing level for '{key}': {value!r} (expected one of {', '.join(keys.TRACING_LEVELS)})",
            key=key,
        )
    return level


def _load_private_key(value: str, *, key: str) -> RSAPrivateKey:
    path = Path(value).expanduser()
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"Cannot read private key file for '{key}': {value!r}", key=key) from exc
    try:
        private_key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"Failed parsing private key file for '{key}': {value!r}", key=key) from exc
    if not isinstance(private_key, RSAPrivateKey):
        raise ConfigError(f"Private key for '{key}' is not an RSA key: {value!r}", key=key)
    return private_key


@dataclass(frozen=True)
class OptionSpec:
    attribute: str
    parser: Callable[..., Any]


# The authoritative list of accepted keys. auth_type is handled separately.
OPTION_SPECS: Mapping[str, OptionSpec] = MappingProxyType(
    {
        keys.OPTION_URI: OptionSpec("uri", _parse_text),
        keys.OPTION_USERNAME: OptionSpec("username", _parse_text),
        keys.OPTION_PASSWORD: OptionSpec("password", _parse_text),
        keys.OPTION_DATABASE: OptionSpec("database", _parse_text),
        keys.OPTION_SCHEMA: OptionSpec("schema", _parse_text),
        keys.OPTION_WAREHOUSE: OptionSpec("warehouse", _parse_text),
        keys.OPTION_ROLE: OptionSpec("role", _parse_text),
        keys.OPTION_REGION: OptionSpec("region", _parse_text),
        keys.OPTION_ACCOUNT: OptionSpec("account", _parse_text),
        keys.OPTION_PROTOCOL: OptionSpec("protocol", _parse_text),
        keys.OPTION_PORT: OptionSpec("port", _parse_port),
        keys.OPTION_HOST: OptionSpec("host", _parse_text),
        keys.OPTION_LOGIN_TIMEOUT: OptionSpec("login_timeout", parse_duration),
        keys.OPTION_REQUEST_TIMEOUT: OptionSpec("request_timeout", parse_duration),
        keys.OPTION_JWT_EXPIRE_TIMEOUT: OptionSpec("jwt_expire_timeout", parse_duration),
        keys.OPTION_CLIENT_TIMEOUT: OptionSpec("client_timeout", parse_duration),
        keys.OPTION_APPLICATION_NAME: OptionSpec("application_name", _parse_text),
        keys.OPTION_SSL_SKIP_VERIFY: OptionSpec("insecure_mode", _parse_bool),
        keys.OPTION_OCSP_FAIL_OPEN_MODE: OptionSpec("ocsp_fail_open", _parse_bool),
        keys.OPTION_AUTH_TOKEN: OptionSpec("auth_token", _parse_text),
        keys.OPTION_AUTH_OKTA_URL: OptionSpec("okta_url", _parse_text),
        keys.OPTION_KEEP_SESSION_ALIVE: OptionSpec("keep_session_alive", _parse_bool),
        keys.OPTION_JWT_PRIVATE_KEY: OptionSpec("private_key", _load_private_key),
        keys.OPTION_DISABLE_TELEMETRY: OptionSpec("disable_telemetry", _parse_bool),
        keys.OPTION_LOG_TRACING: OptionSpec("tracing", _parse_tracing),
        keys.OPTION_CLIENT_REQUEST_MFA_TOKEN: OptionSpec("cache_mfa_token", _parse_bool),
        keys.OPTION_CLIENT_STORE_TEMP_CRED: OptionSpec("store_temp_creds", _parse_bool),
    }
)

# DSN query parameters and the option keys they stand for.
_URI_QUERY_KEYS = {
    "account": keys.OPTION_ACCOUNT,
    "warehouse": keys.OPTION_WAREHOUSE,
    "role": keys.OPTION_ROLE,
    "region": keys.OPTION_REGION,
    "database": keys.OPTION_DATABASE,
    "schema": keys.OPTION_SCHEMA,
    "protocol": keys.OPTION_PROTOCOL,
    "host": keys.OPTION_HOST,
    "port": keys.OPTION_PORT,
    "application": keys.OPTION_APPLICATION_NAME,
}

_AUTHENTICATORS = {
    AuthType.SNOWFLAKE: "snowflake",
    AuthType.OAUTH: "oauth",
    AuthType.EXTERNAL_BROWSER: "externalbrowser",
    AuthType.JWT: "snowflake_jwt",
    AuthType.USER_PASS_MFA: "username_password_mfa",
}


@dataclass(frozen=True)
class ValidatedOptions:
    """
    Immutable, fully parsed option set for one database handle.
    """

    auth_type: AuthType = keys.DEFAULT_AUTH_TYPE
    raw: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), repr=False)
    supplied: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), repr=False)
    uri: str | None = field(default=None, repr=False)
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    database: str | None = None
    schema: str | None = None
    warehouse: str | None = None
    role: str | None = None
    region: str | None = None
    account: str | None = None
    protocol: str | None = None
    port: int | None = None
    host: str | None = None
    login_timeout: timedelta | None = None
    request_timeout: timedelta | None = None
    jwt_expire_timeout: timedelta | None = None
    client_timeout: timedelta | None = None
    application_name: str | None = None
    insecure_mode: bool | None = None
    ocsp_fail_open: bool | None = None
    auth_token: str | None = field(default=None, repr=False)
    okta_url: str | None = None
    keep_session_alive: bool | None = None
    private_key: RSAPrivateKey | None = field(default=None, repr=False)
    disable_telemetry: bool | None = None
    tracing: str | None = None
    cache_mfa_token: bool | None = None
    store_temp_creds: bool | None = None

    def get(self, key: str) -> str | None:
        return self.raw.get(key)

    def describe(self) -> dict[str, str]:
        """
        Return the option set with secrets redacted, suitable for logging.
        """

        return redact_mapping(self.raw)

    def connect_kwargs(self) -> dict[str, Any]:
        """
        Render keyword arguments for ``snowflake.connector.connect``.
        """

        kwargs: dict[str, Any] = {}

        def put(name: str, value: Any) -> None:
            if value is not None:
                kwargs[name] = value

        put("account", self.account)
        put("user", self.username)
        put("password", self.password)
        put("database", self.database)
        put("schema", self.schema)
        put("warehouse", self.warehouse)
        put("role", self.role)
        put("region", self.region)
        put("protocol", self.protocol)
        put("host", self.host)
        put("port", self.port)

        if self.auth_type is AuthType.OKTA:
            kwargs["authenticator"] = self.okta_url
        else:
            kwargs["authenticator"] = _AUTHENTICATORS[self.auth_type]
        put("token", self.auth_token)
        put("private_key", self.private_key)

        put("login_timeout", _seconds(self.login_timeout))
        put("network_timeout", _seconds(self.request_timeout))
        put("socket_timeout", _seconds(self.client_timeout))
        if self.jwt_expire_timeout is not None:
            kwargs["jwt_timeout"] = int(self.jwt_expire_timeout.total_seconds())

        put("application", self.application_name)
        put("insecure_mode", self.insecure_mode)
        put("ocsp_fail_open", self.ocsp_fail_open)
        put("client_session_keep_alive", self.keep_session_alive)
        put("client_request_mfa_token", self.cache_mfa_token)
        put("client_store_temporary_credential", self.store_temp_creds)
        if self.disable_telemetry:
            kwargs["session_parameters"] = {"CLIENT_TELEMETRY_ENABLED": False}
        return kwargs


def _seconds(value: timedelta | None) -> float | None:
    if value is None:
        return None
    return value.total_seconds()


def _options_from_uri(uri: str) -> dict[str, str]:
    try:
        dsn = parse_dsn(uri)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for '{keys.OPTION_URI}': {exc}", key=keys.OPTION_URI) from exc

    derived: dict[str, str] = {}
    for name, value in (
        (keys.OPTION_USERNAME, dsn.username),
        (keys.OPTION_PASSWORD, dsn.password),
        (keys.OPTION_ACCOUNT, dsn.account),
        (keys.OPTION_HOST, dsn.host),
        (keys.OPTION_PORT, str(dsn.port) if dsn.port else None),
        (keys.OPTION_DATABASE, dsn.database),
        (keys.OPTION_SCHEMA, dsn.schema),
    ):
        if value is not None:
            derived[name] = value
    for param, value in dsn.query.items():
        key = _URI_QUERY_KEYS.get(param)
        if key is None:
            raise ConfigError(
                f"Unknown parameter {param!r} in '{keys.OPTION_URI}'",
                key=keys.OPTION_URI,
            )
        derived[key] = value
    return derived


def _check_keys(options: Mapping[str, Any]) -> None:
    for key in sorted(options):
        if key != keys.OPTION_AUTH_TYPE and key not in OPTION_SPECS:
            raise ConfigError(f"Unknown option '{key}'", key=key)
        if not isinstance(options[key], str):
            raise ConfigError(
                f"Option '{key}' must be a string, got {type(options[key]).__name__}",
                key=key,
            )


def configure(options: Mapping[str, str]) -> ValidatedOptions:
    """
    Validate ``options`` and return the parsed, immutable configuration.

    Raises :class:`ConfigError` naming the offending key on the first problem.
    """

    supplied = dict(options)
    _check_keys(supplied)

    auth_type = AuthType.parse(supplied.get(keys.OPTION_AUTH_TYPE, keys.DEFAULT_AUTH_TYPE.value))

    merged: dict[str, str] = {}
    if keys.OPTION_URI in supplied:
        merged.update(_options_from_uri(supplied[keys.OPTION_URI]))
    merged.update(supplied)
    merged.pop(keys.OPTION_AUTH_TYPE, None)

    parsed: dict[str, Any] = {}
    for key in sorted(merged):
        allowed_modes = keys.MODE_ONLY_OPTIONS.get(key)
        if allowed_modes is not None and auth_type not in allowed_modes:
            modes = ", ".join(sorted(mode.value for mode in allowed_modes))
            raise ConfigError(
                f"Option '{key}' is only valid with {keys.OPTION_AUTH_TYPE}={modes}, "
                f"not {auth_type.value}",
                key=key,
            )
        spec = OPTION_SPECS[key]
        parsed[spec.attribute] = spec.parser(merged[key], key=key)

    for key in keys.REQUIRED_OPTIONS.get(auth_type, ()):
        if key not in merged:
            raise ConfigError(
                f"Option '{key}' is required when {keys.OPTION_AUTH_TYPE}={auth_type.value}",
                key=key,
            )

    merged[keys.OPTION_AUTH_TYPE] = auth_type.value
    return ValidatedOptions(
        auth_type=auth_type,
        raw=MappingProxyType(merged),
        supplied=MappingProxyType(supplied),
        **parsed,
    )


def options_from_env(env_var: str) -> dict[str, str]:
    """
    Build an option set from an environment variable holding a Snowflake DSN.
    """

    value = os.getenv(env_var)
    if not value:
        raise ConfigError(f"Environment variable {env_var} is not set")
    return {keys.OPTION_URI: value}
