"""Message-driven dispatcher for Hazelcast distributed map operations."""

from hazelcast_exchange.component import ComponentState, MapComponent, MapEndpoint
from hazelcast_exchange.config import ComponentConfig, MapEndpointConfig
from hazelcast_exchange.constants import (
    CACHE_NAME,
    CACHE_TYPE,
    MAP_OPERATIONS,
    OBJECT_ID,
    OBJECT_VALUE,
    OPERATION,
    QUERY,
    Operation,
)
from hazelcast_exchange.dispatcher import Dispatcher, MapDispatcher, MapRequest
from hazelcast_exchange.exceptions import (
    ConfigurationException,
    DispatcherException,
    IllegalStateException,
    InvalidOperationException,
    OperationFailedException,
    is_transport_failure,
)
from hazelcast_exchange.exchange import Exchange, Message
from hazelcast_exchange.helper import (
    UNDEFINED,
    HeaderPropagator,
    extract_operation_number,
    is_empty,
    lookup_operation_number,
)
from hazelcast_exchange.logging import configure_logging, get_logger, set_level

__version__ = "0.1.0"

__all__ = [
    "CACHE_NAME",
    "CACHE_TYPE",
    "ComponentConfig",
    "ComponentState",
    "ConfigurationException",
    "Dispatcher",
    "DispatcherException",
    "Exchange",
    "HeaderPropagator",
    "IllegalStateException",
    "InvalidOperationException",
    "MAP_OPERATIONS",
    "MapComponent",
    "MapDispatcher",
    "MapEndpoint",
    "MapEndpointConfig",
    "MapRequest",
    "Message",
    "OBJECT_ID",
    "OBJECT_VALUE",
    "OPERATION",
    "Operation",
    "OperationFailedException",
    "QUERY",
    "UNDEFINED",
    "configure_logging",
    "extract_operation_number",
    "get_logger",
    "is_empty",
    "is_transport_failure",
    "lookup_operation_number",
    "set_level",
]
