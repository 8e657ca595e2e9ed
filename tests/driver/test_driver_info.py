from importlib import metadata

from snowadapter.driver import (
    DRIVER_NAME,
    SUPPORTED_INFO_CODES,
    UNKNOWN_VERSION,
    BuildInfo,
    InfoCode,
    SnowflakeDriver,
    load_build_info,
)
from snowadapter.driver import base


def test_get_info_reports_supported_codes():
    driver = SnowflakeDriver(build_info=BuildInfo(driver_version="1.2.3", library_version="3.4.5"))
    info = driver.get_info()
    assert set(info) == set(SUPPORTED_INFO_CODES)
    assert info[InfoCode.DRIVER_NAME] == DRIVER_NAME
    assert info[InfoCode.DRIVER_VERSION] == "1.2.3"
    assert info[InfoCode.DRIVER_ARROW_VERSION] == "3.4.5"
    assert info[InfoCode.VENDOR_NAME] == "Snowflake"


def test_get_info_skips_unsupported_codes():
    driver = SnowflakeDriver(build_info=BuildInfo())
    info = driver.get_info([InfoCode.VENDOR_NAME, InfoCode.VENDOR_VERSION])
    assert info == {InfoCode.VENDOR_NAME: "Snowflake"}


def test_default_build_info_uses_sentinel():
    info = BuildInfo()
    assert info.driver_version == UNKNOWN_VERSION
    assert info.library_version == UNKNOWN_VERSION


def test_load_build_info_falls_back_when_metadata_missing(monkeypatch):
    def missing(name):
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(base.metadata, "version", missing)
    load_build_info.cache_clear()
    try:
        info = load_build_info()
        assert info == BuildInfo(UNKNOWN_VERSION, UNKNOWN_VERSION)
    finally:
        load_build_info.cache_clear()


def test_load_build_info_is_resolved_once(monkeypatch):
    calls = []

    def fake_version(name):
        calls.append(name)
        return "9.9.9"

    monkeypatch.setattr(base.metadata, "version", fake_version)
    load_build_info.cache_clear()
    try:
        first = load_build_info()
        second = load_build_info()
    finally:
        load_build_info.cache_clear()
    assert first is second
    assert first.driver_version == "9.9.9"
    assert len(calls) == 2


def test_driver_name():
    assert SnowflakeDriver(build_info=BuildInfo()).name == "Snowflake"


class RecordingBase:
    name = "Custom"
    build_info = BuildInfo(driver_version="7.0.0")
    info_codes = (InfoCode.DRIVER_NAME,)

    def __init__(self):
        self.requested = []

    def get_info(self, codes=None):
        self.requested.append(codes)
        return {InfoCode.DRIVER_NAME: "custom driver"}


def test_driver_delegates_to_supplied_base():
    custom = RecordingBase()
    driver = SnowflakeDriver(base=custom)
    assert driver.base is custom
    assert driver.name == "Custom"
    assert driver.get_info([InfoCode.DRIVER_NAME]) == {InfoCode.DRIVER_NAME: "custom driver"}
    assert custom.requested == [[InfoCode.DRIVER_NAME]]
