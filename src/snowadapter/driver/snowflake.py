"""
Snowflake driver, database and connection handles.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from ..config import ValidatedOptions, configure
from ..errors import AdbcError, ConfigError, Status, normalize_error
from ..security.redaction import redact_params
from ..utils import get_logger, resolve_slow_call_ms, time_call
from .base import BuildInfo, DriverBase, DriverImplBase, InfoCode, load_build_info

DRIVER_NAME = "snowadapter Snowflake Driver"
VENDOR_NAME = "Snowflake"

BACKEND_LOGGER = "snowflake.connector"

_TRACING_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "print": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}


def _load_driver():
    try:
        import snowflake.connector

        return snowflake.connector
    except ImportError:
        return None


class SnowflakeDriver:
    """
    Entry point producing :class:`SnowflakeDatabase` handles.
    """

    def __init__(self, build_info: BuildInfo | None = None, *, base: DriverBase | None = None) -> None:
        if base is None:
            base = DriverImplBase(
                name="Snowflake",
                driver_name=DRIVER_NAME,
                vendor_name=VENDOR_NAME,
                build_info=build_info or load_build_info(),
            )
        self.base: DriverBase = base
        self.logger = get_logger("driver.snowflake")

    @property
    def name(self) -> str:
        return self.base.name

    def get_info(self, codes: Iterable[InfoCode] | None = None) -> dict[InfoCode, str]:
        return self.base.get_info(codes)

    def new_database(self, options: Mapping[str, str]) -> "SnowflakeDatabase":
        """
        Validate ``options`` and build a database handle over them.

        The mapping is copied first; later changes to the caller's dict have
        no effect. :class:`ConfigError` propagates unchanged.
        """

        validated = configure(dict(options))
        self.logger.debug("Configured Snowflake database: %s", validated.describe())
        return SnowflakeDatabase(self, validated)


class SnowflakeDatabase:
    def __init__(self, driver: SnowflakeDriver, options: ValidatedOptions) -> None:
        self._driver = driver
        self._options = options
        self.logger = get_logger("driver.snowflake.database")

    @property
    def driver(self) -> SnowflakeDriver:
        return self._driver

    @property
    def options(self) -> ValidatedOptions:
        return self._options

    def get_option(self, key: str) -> str:
        value = self._options.get(key)
        if value is None:
            raise AdbcError(f"Option '{key}' is not set", status=Status.NOT_FOUND)
        return value

    def with_options(self, options: Mapping[str, str]) -> "SnowflakeDatabase":
        """
        Return a new handle with ``options`` layered over the options this
        handle was built from. Values derived from a replaced ``uri`` do not
        carry over.
        """

        merged = dict(self._options.supplied)
        merged.update(options)
        return self._driver.new_database(merged)

    def connect(self, *, slow_query_ms: int | None = None) -> "SnowflakeConnection":
        driver = _load_driver()
        if driver is None:
            raise ConfigError("snowflake-connector-python is required to open Snowflake connections.")

        if self._options.tracing:
            logging.getLogger(BACKEND_LOGGER).setLevel(_TRACING_LEVELS[self._options.tracing])

        self.logger.info(
            "Connecting to Snowflake %s (auth=%s)",
            self._options.account or self._options.host or "<unset account>",
            self._options.auth_type.value,
        )
        try:
            handle = driver.connect(**self._options.connect_kwargs())
        except Exception as exc:
            raise normalize_error(Status.IO, exc) from exc
        return SnowflakeConnection(self, handle, slow_query_ms=slow_query_ms)


class SnowflakeConnection:
    """
    Open session; every backend failure surfaces as :class:`AdbcError`.
    """

    def __init__(self, database: SnowflakeDatabase, handle: Any, *, slow_query_ms: int | None = None) -> None:
        self.database = database
        self._handle = handle
        self.logger = get_logger("driver.snowflake.connection")
        self.slow_query_ms = resolve_slow_call_ms(default=1000, override=slow_query_ms)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def get_info(self, codes: Iterable[InfoCode] | None = None) -> dict[InfoCode, str]:
        return self.database.driver.get_info(codes)

    def _ensure_open(self) -> Any:
        if self._handle is None:
            raise AdbcError("Connection is closed", status=Status.INVALID_STATE)
        return self._handle

    def execute(self, sql: str, params: Sequence[Any] | Mapping[str, Any] | None = None) -> Any:
        handle = self._ensure_open()
        logged = redact_params(params.values() if isinstance(params, Mapping) else params or ())
        try:
            cursor = handle.cursor()
            with time_call(
                "snowflake.execute",
                self.logger,
                sql=sql,
                params=logged,
                threshold_ms=self.slow_query_ms,
            ):
                cursor.execute(sql, params)
        except Exception as exc:
            raise normalize_error(Status.INTERNAL, exc) from exc
        return cursor

    def commit(self) -> None:
        handle = self._ensure_open()
        try:
            handle.commit()
        except Exception as exc:
            raise normalize_error(Status.IO, exc) from exc

    def rollback(self) -> None:
        handle = self._ensure_open()
        try:
            handle.rollback()
        except Exception as exc:
            raise normalize_error(Status.IO, exc) from exc

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except Exception as exc:
            raise normalize_error(Status.IO, exc) from exc

    def __enter__(self) -> "SnowflakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
