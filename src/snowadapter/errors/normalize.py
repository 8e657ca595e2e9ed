"""
Translate backend exceptions into :class:`AdbcError`.

Every call from the adapter into the backend client funnels its failures
through :func:`normalize_error` so upstream callers only ever branch on
:class:`Status`, never on vendor exception types or message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional, Protocol, cast, overload, runtime_checkable

from .exceptions import AdbcError
from .status import Status

# Snowflake's SQLSTATE for "object does not exist or not authorized".
NOT_FOUND_SQLSTATE = "42S02"


@runtime_checkable
class StructuredBackendError(Protocol):
    """
    Shape of a backend error carrying a vendor code and a SQLSTATE.

    ``snowflake.connector.errors.Error`` satisfies it.
    """

    errno: Optional[int]
    sqlstate: Optional[str]


class ErrorShape(Enum):
    NORMALIZED = "normalized"
    BACKEND = "backend"
    GENERIC = "generic"


def _error_chain(err: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def classify_error(err: BaseException) -> tuple[ErrorShape, BaseException]:
    """
    Resolve the shape of ``err``, looking through explicit ``__cause__`` links.

    Implicit ``__context__`` links are not followed: an error raised while
    handling another one describes a new failure. Normalized errors win over
    backend errors anywhere in the chain; when neither is found the outermost
    error is treated as generic.
    """

    chain = list(_error_chain(err))
    for candidate in chain:
        if isinstance(candidate, AdbcError):
            return ErrorShape.NORMALIZED, candidate
    for candidate in chain:
        if isinstance(candidate, StructuredBackendError):
            return ErrorShape.BACKEND, candidate
    return ErrorShape.GENERIC, err


def _vendor_code(value: object) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


@overload
def normalize_error(default_status: Status, err: None) -> None: ...


@overload
def normalize_error(default_status: Status, err: BaseException) -> AdbcError: ...


def normalize_error(default_status: Status, err: BaseException | None) -> AdbcError | None:
    """
    Map ``err`` onto an :class:`AdbcError` classified as ``default_status``.

    Returns ``None`` for ``None`` input. Already-normalized errors are only
    re-tagged; backend errors keep their vendor code and SQLSTATE, and a
    ``42S02`` SQLSTATE is always reported as :attr:`Status.NOT_FOUND`.
    """

    if err is None:
        return None

    shape, source = classify_error(err)
    if shape is ErrorShape.NORMALIZED:
        normalized = cast(AdbcError, source).with_status(default_status)
    elif shape is ErrorShape.BACKEND:
        sqlstate = getattr(source, "sqlstate", None) or None
        status = default_status
        if sqlstate == NOT_FOUND_SQLSTATE:
            status = Status.NOT_FOUND
        normalized = AdbcError(
            str(source),
            status=status,
            vendor_code=_vendor_code(getattr(source, "errno", None)),
            sqlstate=sqlstate,
        )
    else:
        normalized = AdbcError(str(err), status=default_status)
    normalized.__cause__ = err
    return normalized
