"""Exchange dispatcher exceptions.

This module defines the exception hierarchy raised by the dispatchers.
All exceptions inherit from :class:`DispatcherException`.

Transport failures of the grid client (lost connections, timeouts, an
inactive client) are not wrapped: they reach the host unchanged and can be
recognised with :func:`is_transport_failure`.

Example:
    Handling dispatcher exceptions::

        from hazelcast_exchange.exceptions import (
            InvalidOperationException,
            OperationFailedException,
        )

        try:
            dispatcher.process(exchange)
        except InvalidOperationException as e:
            print(f"Rejected operation {e.operation!r}")
        except OperationFailedException as e:
            print(f"Map rejected the call: {e.cause}")
"""

from typing import Any, Optional

from hazelcast.errors import (
    HazelcastClientNotActiveError,
    HazelcastIOError,
    OperationTimeoutError,
    TargetDisconnectedError,
)


TRANSPORT_ERRORS = (
    HazelcastIOError,
    TargetDisconnectedError,
    HazelcastClientNotActiveError,
    OperationTimeoutError,
    ConnectionError,
    TimeoutError,
)


class DispatcherException(Exception):
    """Base class for all dispatcher exceptions.

    Args:
        message: The error message describing the exception.
        cause: The underlying exception that caused this error, if any.

    Attributes:
        cause: The underlying cause of this exception, if any.
    """

    def __init__(self, message: str = "", cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class InvalidOperationException(DispatcherException):
    """Raised when the operation header cannot be served.

    The operation code is missing, cannot be decoded, is unknown, or names
    an operation that the target collection type does not support. No map
    call is attempted when this is raised.

    Args:
        operation: The offending operation value (None when absent).
        header: The name of the header the value was read from.

    Example:
        >>> try:
        ...     dispatcher.process(exchange)
        ... except InvalidOperationException as e:
        ...     print(e.operation, e.header)
    """

    def __init__(
        self,
        operation: Any,
        header: str,
        message: str = "",
        cache_type: Optional[str] = None,
    ):
        if not message:
            message = f"The value '{operation}' is not allowed for parameter '{header}'"
            if cache_type:
                message += f" on the {cache_type.upper()} cache"
            message += "."
        super().__init__(message)
        self._operation = operation
        self._header = header
        self._cache_type = cache_type

    @property
    def operation(self) -> Any:
        """Get the offending operation value."""
        return self._operation

    @property
    def header(self) -> str:
        """Get the name of the operation header."""
        return self._header

    @property
    def cache_type(self) -> Optional[str]:
        """Get the collection type that rejected the operation, if known."""
        return self._cache_type


class OperationFailedException(DispatcherException):
    """Raised when the map rejected a call or the headers have the wrong shape.

    Examples include a malformed query predicate, a serialization error on
    the cluster side, or a GET_ALL request whose key header is not a
    collection. The original error, when there is one, is available as
    :attr:`cause` and is also chained as ``__cause__``.
    """
    pass


class ConfigurationException(DispatcherException):
    """Raised when there is a configuration error.

    Example:
        - Empty map name
        - Non-positive connection timeout or lock lease time
        - Unparseable YAML configuration
    """
    pass


class IllegalStateException(DispatcherException):
    """Raised when a component is used in an inappropriate state.

    Example:
        - Creating endpoints on a component that is not started
        - Starting a component that has been shut down
    """
    pass


def is_transport_failure(error: BaseException) -> bool:
    """Check whether an error is a network or cluster availability failure.

    Args:
        error: The error raised by a map call.

    Returns:
        True if the error is one of the grid client's transport failures.
    """
    return isinstance(error, TRANSPORT_ERRORS)
