"""Dispatchers turning exchanges into distributed object operations."""

from hazelcast_exchange.dispatcher.base import Dispatcher
from hazelcast_exchange.dispatcher.map import MapDispatcher, MapRequest

__all__ = [
    "Dispatcher",
    "MapDispatcher",
    "MapRequest",
]
