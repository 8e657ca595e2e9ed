import logging

import pytest

from snowadapter.config import AuthType, keys
from snowadapter.driver import BuildInfo, InfoCode, SnowflakeDriver
from snowadapter.errors import AdbcError, ConfigError, Status


class FakeBackendError(Exception):
    def __init__(self, msg, errno, sqlstate):
        self.errno = errno
        self.sqlstate = sqlstate
        super().__init__(msg)


class FakeCursor:
    def __init__(self, fail_with=None):
        self.statements = []
        self.fail_with = fail_with

    def execute(self, sql, params=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.statements.append((sql, params))
        return self


class FakeConnection:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.closed = False
        self.committed = False
        self.rolled_back = False
        self.cursor_error = None

    def cursor(self):
        return FakeCursor(self.cursor_error)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnector:
    def __init__(self, fail_with=None):
        self.connections = []
        self.fail_with = fail_with

    def connect(self, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        conn = FakeConnection(**kwargs)
        self.connections.append(conn)
        return conn


@pytest.fixture
def driver():
    return SnowflakeDriver(build_info=BuildInfo(driver_version="0.1.0", library_version="3.12.0"))


@pytest.fixture
def fake_connector(monkeypatch):
    connector = FakeConnector()
    monkeypatch.setattr("snowadapter.driver.snowflake._load_driver", lambda: connector)
    return connector


def test_new_database_defaults_to_basic_auth(driver):
    database = driver.new_database({keys.OPTION_ACCOUNT: "acme"})
    assert database.options.auth_type is AuthType.SNOWFLAKE
    assert database.get_option(keys.OPTION_AUTH_TYPE) == "auth_snowflake"
    assert database.driver is driver


def test_new_database_copies_caller_options(driver):
    options = {keys.OPTION_WAREHOUSE: "WH1"}
    database = driver.new_database(options)
    options[keys.OPTION_WAREHOUSE] = "WH2"
    options["adbc.snowflake.sql.bogus"] = "x"
    assert database.get_option(keys.OPTION_WAREHOUSE) == "WH1"


def test_new_database_propagates_config_error(driver):
    with pytest.raises(ConfigError) as excinfo:
        driver.new_database({"adbc.snowflake.sql.bogus": "x"})
    assert excinfo.value.key == "adbc.snowflake.sql.bogus"


def test_get_option_missing_is_not_found(driver):
    database = driver.new_database({})
    with pytest.raises(AdbcError) as excinfo:
        database.get_option(keys.OPTION_ROLE)
    assert excinfo.value.status is Status.NOT_FOUND


def test_with_options_returns_new_handle(driver):
    database = driver.new_database({keys.OPTION_WAREHOUSE: "WH1", keys.OPTION_ROLE: "R"})
    updated = database.with_options({keys.OPTION_WAREHOUSE: "WH2"})
    assert updated is not database
    assert updated.get_option(keys.OPTION_WAREHOUSE) == "WH2"
    assert updated.get_option(keys.OPTION_ROLE) == "R"
    assert database.get_option(keys.OPTION_WAREHOUSE) == "WH1"
    with pytest.raises(ConfigError):
        database.with_options({keys.OPTION_AUTH_TYPE: AuthType.OAUTH.value})


def test_with_options_replaces_uri_derived_values(driver):
    database = driver.new_database({keys.OPTION_URI: "alice@acct1/DB1"})
    updated = database.with_options({keys.OPTION_URI: "bob@acct2/DB2"})
    assert updated.options.account == "acct2"
    assert updated.options.database == "DB2"
    assert updated.options.username == "bob"
    assert database.options.account == "acct1"


def test_with_options_keeps_explicit_keys_over_new_uri(driver):
    database = driver.new_database({keys.OPTION_URI: "alice@acct1/DB1", keys.OPTION_ROLE: "R"})
    updated = database.with_options({keys.OPTION_URI: "bob@acct2/DB2?role=OTHER"})
    assert updated.get_option(keys.OPTION_ROLE) == "R"
    assert updated.options.account == "acct2"


def test_connect_passes_validated_kwargs(driver, fake_connector):
    database = driver.new_database(
        {
            keys.OPTION_ACCOUNT: "acme",
            keys.OPTION_USERNAME: "alice",
            keys.OPTION_PASSWORD: "hunter2",
            keys.OPTION_LOGIN_TIMEOUT: "30s",
        }
    )
    connection = database.connect()
    backend = fake_connector.connections[0]
    assert backend.kwargs["account"] == "acme"
    assert backend.kwargs["user"] == "alice"
    assert backend.kwargs["authenticator"] == "snowflake"
    assert backend.kwargs["login_timeout"] == 30.0
    assert connection.get_info([InfoCode.DRIVER_VERSION]) == {InfoCode.DRIVER_VERSION: "0.1.0"}


def test_connect_failure_is_normalized(driver, fake_connector):
    fake_connector.fail_with = FakeBackendError("Incorrect username or password", 390100, "08004")
    database = driver.new_database({keys.OPTION_ACCOUNT: "acme"})
    with pytest.raises(AdbcError) as excinfo:
        database.connect()
    assert excinfo.value.status is Status.IO
    assert excinfo.value.vendor_code == 390100
    assert excinfo.value.sqlstate == "08004"


def test_connect_without_backend_library(driver, monkeypatch):
    monkeypatch.setattr("snowadapter.driver.snowflake._load_driver", lambda: None)
    database = driver.new_database({})
    with pytest.raises(ConfigError):
        database.connect()


def test_connect_applies_tracing_level(driver, fake_connector):
    backend_logger = logging.getLogger("snowflake.connector")
    previous = backend_logger.level
    try:
        database = driver.new_database({keys.OPTION_LOG_TRACING: "error"})
        assert backend_logger.level == previous
        database.connect()
        assert backend_logger.level == logging.ERROR
    finally:
        backend_logger.setLevel(previous)


def test_execute_runs_statement(driver, fake_connector):
    connection = driver.new_database({}).connect()
    cursor = connection.execute("SELECT * FROM t WHERE id = %s", (1,))
    assert cursor.statements == [("SELECT * FROM t WHERE id = %s", (1,))]


def test_execute_missing_table_maps_to_not_found(driver, fake_connector):
    connection = driver.new_database({}).connect()
    fake_connector.connections[0].cursor_error = FakeBackendError(
        "Object 'T' does not exist or not authorized.", 2003, "42S02"
    )
    with pytest.raises(AdbcError) as excinfo:
        connection.execute("SELECT * FROM t")
    assert excinfo.value.status is Status.NOT_FOUND
    assert excinfo.value.vendor_code == 2003


def test_execute_generic_failure_is_internal(driver, fake_connector):
    connection = driver.new_database({}).connect()
    fake_connector.connections[0].cursor_error = RuntimeError("socket closed")
    with pytest.raises(AdbcError) as excinfo:
        connection.execute("SELECT 1")
    assert excinfo.value.status is Status.INTERNAL
    assert excinfo.value.message == "socket closed"
    assert excinfo.value.vendor_code is None


def test_execute_logs_redacted_params(driver, fake_connector, caplog):
    connection = driver.new_database({}).connect(slow_query_ms=0)
    caplog.set_level(logging.DEBUG, logger=connection.logger.name)
    connection.execute("SELECT %s, %s", ("ok", "password=hunter2"))
    records = [record for record in caplog.records if record.name == connection.logger.name]
    assert any("snowflake.execute took" in record.message for record in records)
    assert records[-1].params == ["ok", "***"]


def test_commit_rollback_and_close(driver, fake_connector):
    with driver.new_database({}).connect() as connection:
        connection.commit()
        connection.rollback()
        backend = fake_connector.connections[0]
        assert backend.committed and backend.rolled_back
    assert connection.closed
    assert backend.closed
    connection.close()
    with pytest.raises(AdbcError) as excinfo:
        connection.execute("SELECT 1")
    assert excinfo.value.status is Status.INVALID_STATE
