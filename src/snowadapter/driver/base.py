"""
Driver-wide metadata shared by every database handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from importlib import metadata
from typing import Iterable, Protocol

UNKNOWN_VERSION = "(unknown or development build)"

DRIVER_DISTRIBUTION = "snowadapter"
LIBRARY_DISTRIBUTION = "snowflake-connector-python"


class InfoCode(IntEnum):
    VENDOR_NAME = 0
    VENDOR_VERSION = 1
    VENDOR_ARROW_VERSION = 2
    DRIVER_NAME = 100
    DRIVER_VERSION = 101
    DRIVER_ARROW_VERSION = 102


SUPPORTED_INFO_CODES = (
    InfoCode.DRIVER_NAME,
    InfoCode.DRIVER_VERSION,
    InfoCode.DRIVER_ARROW_VERSION,
    InfoCode.VENDOR_NAME,
)


@dataclass(frozen=True)
class BuildInfo:
    driver_version: str = UNKNOWN_VERSION
    library_version: str = UNKNOWN_VERSION


def _distribution_version(name: str) -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return UNKNOWN_VERSION


@lru_cache(maxsize=None)
def load_build_info() -> BuildInfo:
    """
    Resolve installed versions once per process.
    """

    return BuildInfo(
        driver_version=_distribution_version(DRIVER_DISTRIBUTION),
        library_version=_distribution_version(LIBRARY_DISTRIBUTION),
    )


class DriverBase(Protocol):
    """
    Generic driver capabilities a backend adapter holds by reference.
    """

    @property
    def name(self) -> str: ...

    @property
    def build_info(self) -> BuildInfo: ...

    @property
    def info_codes(self) -> tuple[InfoCode, ...]: ...

    def get_info(self, codes: Iterable[InfoCode] | None = None) -> dict[InfoCode, str]:
        """
        Return driver metadata for the requested (or all supported) info codes.
        """


@dataclass(frozen=True)
class DriverImplBase:
    name: str
    driver_name: str
    vendor_name: str
    build_info: BuildInfo
    info_codes: tuple[InfoCode, ...] = SUPPORTED_INFO_CODES

    def get_info(self, codes: Iterable[InfoCode] | None = None) -> dict[InfoCode, str]:
        values = {
            InfoCode.DRIVER_NAME: self.driver_name,
            InfoCode.DRIVER_VERSION: self.build_info.driver_version,
            InfoCode.DRIVER_ARROW_VERSION: self.build_info.library_version,
            InfoCode.VENDOR_NAME: self.vendor_name,
        }
        requested = self.info_codes if codes is None else tuple(codes)
        return {code: values[code] for code in requested if code in self.info_codes}
