"""Dispatcher performing exchange-encoded operations on a distributed map."""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, NamedTuple, Optional, TYPE_CHECKING

from hazelcast import predicate

from hazelcast_exchange.constants import (
    MAP_CACHE_TYPE,
    OBJECT_ID,
    OBJECT_VALUE,
    OPERATION,
    QUERY,
    Operation,
)
from hazelcast_exchange.dispatcher.base import Dispatcher
from hazelcast_exchange.exceptions import (
    DispatcherException,
    InvalidOperationException,
    OperationFailedException,
    is_transport_failure,
)
from hazelcast_exchange.exchange import Exchange
from hazelcast_exchange.helper import UNDEFINED, HeaderPropagator, is_empty
from hazelcast_exchange.logging import get_logger

if TYPE_CHECKING:
    from hazelcast_exchange.component import MapEndpoint

_logger = get_logger("dispatcher.map")

_KEY_COLLECTION_TYPES = (set, frozenset, list, tuple)


class MapRequest(NamedTuple):
    """Operation request decoded from one exchange.

    Slots for absent headers hold ``UNDEFINED``.
    """

    operation: Operation
    key: Any
    value: Any
    query: Any
    body: Any


class MapDispatcher(Dispatcher):
    """Performs the map operation encoded in an exchange's headers.

    The dispatcher binds to a single map for its whole lifetime. Each call
    to :meth:`process` performs exactly one operation, selected by the
    OPERATION header, writes the result to the outbound body for GET,
    GET_ALL and QUERY, and finally propagates the inbound headers.

    The dispatcher keeps no per-exchange state, so :meth:`process` may be
    called concurrently from several workers.

    Args:
        hazelcast_instance: Provider of distributed maps; ``get_map(name)``
            must return a blocking map handle.
        endpoint: The endpoint owning this dispatcher, if any.
        map_name: Name of the distributed map to bind to.
        header_propagator: Collaborator copying headers after a dispatch.
        predicate_factory: Builds a predicate from a query string. Defaults
            to the grid client's SQL predicate.
        lock_lease_time: Lease time in seconds for the lock held by UPDATE,
            or None to hold it until released.

    Example:
        >>> dispatcher = MapDispatcher(provider, None, "users")
        >>> exchange = Exchange.create(
        ...     {OPERATION: Operation.PUT, OBJECT_ID: "user:1"}, body="Alice"
        ... )
        >>> dispatcher.process(exchange)
    """

    _BODY_OPERATIONS = frozenset({Operation.GET, Operation.GET_ALL, Operation.QUERY})

    def __init__(
        self,
        hazelcast_instance: Any,
        endpoint: Optional["MapEndpoint"],
        map_name: str,
        header_propagator: Optional[HeaderPropagator] = None,
        predicate_factory: Optional[Callable[[str], Any]] = None,
        lock_lease_time: Optional[float] = None,
    ):
        super().__init__(endpoint, header_propagator)
        self._map_name = map_name
        self._map = hazelcast_instance.get_map(map_name)
        self._predicate_factory = predicate_factory
        self._lock_lease_time = lock_lease_time
        self._handlers: Dict[Operation, Callable[[MapRequest], Any]] = {
            Operation.PUT: self._put,
            Operation.GET: self._get,
            Operation.GET_ALL: self._get_all,
            Operation.DELETE: self._delete,
            Operation.UPDATE: self._update,
            Operation.QUERY: self._query,
            Operation.REPLACE: self._replace,
            Operation.CLEAR: self._clear,
        }
        _logger.debug("Map dispatcher bound to map %s", map_name)

    @property
    def map_name(self) -> str:
        return self._map_name

    @property
    def map(self) -> Any:
        return self._map

    @property
    def supported_operations(self) -> frozenset:
        return frozenset(self._handlers)

    def process(self, exchange: Exchange) -> None:
        """Perform the operation encoded in the exchange headers.

        Args:
            exchange: The exchange to process. Only its outbound message
                is modified.

        Raises:
            InvalidOperationException: If the operation code is missing,
                unknown or not supported on maps. No map call is made.
            OperationFailedException: If a header has the wrong shape for
                the operation or the map rejected the call.
        """
        request = self._decode(exchange)
        handler = self._handlers[request.operation]

        _logger.debug(
            "Dispatching %s on map %s (exchange %s)",
            request.operation.name,
            self._map_name,
            exchange.exchange_id,
        )

        try:
            result = handler(request)
        except DispatcherException:
            raise
        except Exception as e:
            if is_transport_failure(e):
                raise
            raise OperationFailedException(
                f"{request.operation.name} on map '{self._map_name}' failed: {e}",
                cause=e,
            ) from e

        if request.operation in self._BODY_OPERATIONS:
            exchange.get_out().body = result

        self._header_propagator.copy_headers(exchange)

    def _decode(self, exchange: Exchange) -> MapRequest:
        key = self.read_header(exchange, OBJECT_ID)
        value = self.read_header(exchange, OBJECT_VALUE)
        query = self.read_header(exchange, QUERY)

        code = self.lookup_operation_number(exchange)
        if code not in self._handlers:
            raise InvalidOperationException(code, OPERATION, cache_type=MAP_CACHE_TYPE)

        return MapRequest(
            operation=Operation(code),
            key=key,
            value=value,
            query=query,
            body=exchange.get_in().body,
        )

    def _require_key(self, request: MapRequest) -> Any:
        if request.key is UNDEFINED or request.key is None:
            raise OperationFailedException(
                f"Header '{OBJECT_ID}' is required for {request.operation.name} "
                f"on map '{self._map_name}'"
            )
        return request.key

    def _put(self, request: MapRequest) -> None:
        self._map.put(self._require_key(request), request.body)

    def _get(self, request: MapRequest) -> Any:
        return self._map.get(self._require_key(request))

    def _get_all(self, request: MapRequest) -> Dict[Any, Any]:
        keys = request.key
        if not isinstance(keys, _KEY_COLLECTION_TYPES):
            raise OperationFailedException(
                f"Header '{OBJECT_ID}' must be a collection of keys for GET_ALL, "
                f"got {type(keys).__name__}"
            )
        return self._map.get_all(keys)

    def _delete(self, request: MapRequest) -> None:
        self._map.remove(self._require_key(request))

    def _update(self, request: MapRequest) -> None:
        key = self._require_key(request)
        with self._locked(key):
            self._map.replace(key, request.body)

    def _query(self, request: MapRequest) -> Any:
        query = request.query
        if query is UNDEFINED or query is None:
            return self._map.values()
        if not isinstance(query, str):
            raise OperationFailedException(
                f"Header '{QUERY}' must be a string, got {type(query).__name__}"
            )
        if not query.strip():
            return self._map.values()
        return self._map.values(self._create_predicate(query))

    def _replace(self, request: MapRequest) -> None:
        key = self._require_key(request)
        if is_empty(request.value):
            self._map.replace(key, request.body)
        else:
            self._map.replace_if_same(key, request.value, request.body)

    def _clear(self, request: MapRequest) -> None:
        self._map.clear()

    def _create_predicate(self, query: str) -> Any:
        if self._predicate_factory is not None:
            return self._predicate_factory(query)
        return predicate.sql(query)

    @contextmanager
    def _locked(self, key: Any) -> Iterator[None]:
        """Hold the cluster-wide lock on a key for the duration of the block.

        The lock is released on every exit path once acquired. If releasing
        fails while another error is propagating, the release failure is
        logged and the original error surfaces.
        """
        if self._lock_lease_time is None:
            self._map.lock(key)
        else:
            self._map.lock(key, lease_time=self._lock_lease_time)
        try:
            yield
        except BaseException:
            try:
                self._map.unlock(key)
            except Exception as unlock_error:
                _logger.warning(
                    "Failed to unlock key %r on map %s: %s",
                    key,
                    self._map_name,
                    unlock_error,
                )
            raise
        self._map.unlock(key)

    def __repr__(self) -> str:
        return f"MapDispatcher(map_name={self._map_name!r})"
