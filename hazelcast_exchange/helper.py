"""Helpers shared by all dispatchers: operation decoding and header propagation."""

from collections.abc import Sized
from typing import Any, Dict, Iterable, Optional

from hazelcast_exchange.constants import CONTROL_HEADERS, OPERATION, Operation
from hazelcast_exchange.exceptions import InvalidOperationException
from hazelcast_exchange.exchange import Exchange
from hazelcast_exchange.logging import get_logger

_logger = get_logger("helper")


class _Undefined:
    """Marker for a header that is absent from the inbound message."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def _normalize_name(name: str) -> str:
    return name.strip().lower().replace("_", "").replace("-", "")


_OPERATIONS_BY_NAME: Dict[str, Operation] = {
    _normalize_name(op.name): op for op in Operation
}


def is_empty(value: Any) -> bool:
    """Check whether a header value carries nothing.

    The undefined slot, None, blank strings and empty containers are all
    considered empty.
    """
    if value is UNDEFINED or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def extract_operation_number(value: Any, header: str = OPERATION) -> int:
    """Decode an operation header value into an operation code.

    Args:
        value: An :class:`Operation`, an int, a numeric string or an
            operation name such as ``"put"`` or ``"getAll"``.
        header: The header name, used for error reporting.

    Returns:
        The operation code. Integers outside the enumeration are returned
        unchanged; the dispatcher decides whether it can serve them.

    Raises:
        InvalidOperationException: If the value is absent or cannot be decoded.
    """
    if isinstance(value, Operation):
        return int(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        operation = _OPERATIONS_BY_NAME.get(_normalize_name(value))
        if operation is not None:
            return int(operation)
    raise InvalidOperationException(None if value is UNDEFINED else value, header)


def lookup_operation_number(exchange: Exchange) -> int:
    """Read and decode the mandatory OPERATION header of an exchange."""
    value = exchange.get_in().get_header(OPERATION, UNDEFINED)
    return extract_operation_number(value, OPERATION)


class HeaderPropagator:
    """Copies inbound headers onto the outbound message after a dispatch.

    Dispatch-control headers (the object id and the operation) are not
    copied, so downstream stages see the remaining metadata only. Headers
    are copied only when the dispatch wrote an outbound message; an
    exchange without one is left without one.

    Args:
        excluded_headers: Header names that are never copied. Defaults to
            the dispatch-control headers.

    Example:
        >>> propagator = HeaderPropagator()
        >>> propagator.copy_headers(exchange)
    """

    def __init__(self, excluded_headers: Optional[Iterable[str]] = None):
        if excluded_headers is None:
            excluded_headers = CONTROL_HEADERS
        self._excluded = frozenset(excluded_headers)

    @property
    def excluded_headers(self) -> frozenset:
        return self._excluded

    def copy_headers(self, exchange: Exchange) -> None:
        if not exchange.has_out():
            _logger.debug("No outbound message on exchange %s, nothing to propagate", exchange.exchange_id)
            return
        headers = {
            name: value
            for name, value in exchange.get_in().headers.items()
            if name not in self._excluded
        }
        exchange.get_out().headers.update(headers)
        _logger.debug("Propagated %d headers on exchange %s", len(headers), exchange.exchange_id)
