"""
Option keys and authentication modes understood by the Snowflake adapter.

The strings are an external contract: CLI flag parsers and config loaders
must use them verbatim.
"""

from __future__ import annotations

from enum import Enum

from ..errors import ConfigError

# Generic keys shared with every ADBC driver.
OPTION_URI = "uri"
OPTION_USERNAME = "username"
OPTION_PASSWORD = "password"

OPTION_DATABASE = "adbc.snowflake.sql.db"
OPTION_SCHEMA = "adbc.snowflake.sql.schema"
OPTION_WAREHOUSE = "adbc.snowflake.sql.warehouse"
OPTION_ROLE = "adbc.snowflake.sql.role"
OPTION_REGION = "adbc.snowflake.sql.region"
OPTION_ACCOUNT = "adbc.snowflake.sql.account"
OPTION_PROTOCOL = "adbc.snowflake.sql.uri.protocol"
OPTION_PORT = "adbc.snowflake.sql.uri.port"
OPTION_HOST = "adbc.snowflake.sql.uri.host"

# Selects the authenticator; one of the AuthType values, "auth_snowflake" when unset.
OPTION_AUTH_TYPE = "adbc.snowflake.sql.auth_type"

# Durations use Go syntax ("300ms", "1.5s", "1m30s"). Negative values are
# accepted and their absolute value is used.
OPTION_LOGIN_TIMEOUT = "adbc.snowflake.sql.client_option.login_timeout"
OPTION_REQUEST_TIMEOUT = "adbc.snowflake.sql.client_option.request_timeout"
OPTION_JWT_EXPIRE_TIMEOUT = "adbc.snowflake.sql.client_option.jwt_expire_timeout"
OPTION_CLIENT_TIMEOUT = "adbc.snowflake.sql.client_option.client_timeout"

OPTION_APPLICATION_NAME = "adbc.snowflake.sql.client_option.app_name"
OPTION_SSL_SKIP_VERIFY = "adbc.snowflake.sql.client_option.tls_skip_verify"
OPTION_OCSP_FAIL_OPEN_MODE = "adbc.snowflake.sql.client_option.ocsp_fail_open_mode"
OPTION_AUTH_TOKEN = "adbc.snowflake.sql.client_option.auth_token"
OPTION_AUTH_OKTA_URL = "adbc.snowflake.sql.client_option.okta_url"
OPTION_KEEP_SESSION_ALIVE = "adbc.snowflake.sql.client_option.keep_session_alive"
# Path to a PEM encoded RSA private key used to sign the JWT.
OPTION_JWT_PRIVATE_KEY = "adbc.snowflake.sql.client_option.jwt_private_key"
OPTION_DISABLE_TELEMETRY = "adbc.snowflake.sql.client_option.disable_telemetry"
OPTION_LOG_TRACING = "adbc.snowflake.sql.client_option.tracing"
OPTION_CLIENT_REQUEST_MFA_TOKEN = "adbc.snowflake.sql.client_option.cache_mfa_token"
OPTION_CLIENT_STORE_TEMP_CRED = "adbc.snowflake.sql.client_option.store_temp_creds"


class AuthType(str, Enum):
    SNOWFLAKE = "auth_snowflake"
    OAUTH = "auth_oauth"
    EXTERNAL_BROWSER = "auth_ext_browser"
    OKTA = "auth_okta"
    JWT = "auth_jwt"
    USER_PASS_MFA = "auth_mfa"

    @classmethod
    def parse(cls, value: str) -> "AuthType":
        try:
            return cls(value)
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ConfigError(
                f"Invalid value for '{OPTION_AUTH_TYPE}': {value!r} (expected one of {choices})",
                key=OPTION_AUTH_TYPE,
            ) from exc


DEFAULT_AUTH_TYPE = AuthType.SNOWFLAKE

# Options that only make sense for one authenticator; any other mode rejects them.
MODE_ONLY_OPTIONS: dict[str, frozenset[AuthType]] = {
    OPTION_AUTH_TOKEN: frozenset({AuthType.OAUTH}),
    OPTION_AUTH_OKTA_URL: frozenset({AuthType.OKTA}),
    OPTION_JWT_PRIVATE_KEY: frozenset({AuthType.JWT}),
    OPTION_JWT_EXPIRE_TIMEOUT: frozenset({AuthType.JWT}),
    OPTION_CLIENT_REQUEST_MFA_TOKEN: frozenset({AuthType.USER_PASS_MFA}),
    OPTION_CLIENT_STORE_TEMP_CRED: frozenset({AuthType.EXTERNAL_BROWSER}),
}

REQUIRED_OPTIONS: dict[AuthType, tuple[str, ...]] = {
    AuthType.OAUTH: (OPTION_AUTH_TOKEN,),
    AuthType.OKTA: (OPTION_AUTH_OKTA_URL,),
    AuthType.JWT: (OPTION_JWT_PRIVATE_KEY,),
}

# Tracing levels accepted by the Snowflake client.
TRACING_LEVELS = ("trace", "debug", "info", "print", "warning", "error", "fatal", "panic", "off")
