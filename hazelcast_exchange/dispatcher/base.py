"""Base class for collection dispatchers."""

from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING

from hazelcast_exchange.exchange import Exchange
from hazelcast_exchange.helper import UNDEFINED, HeaderPropagator, lookup_operation_number

if TYPE_CHECKING:
    from hazelcast_exchange.component import MapEndpoint


class Dispatcher(ABC):
    """Abstract base class for dispatchers bound to one distributed object.

    A dispatcher turns an exchange into a single operation on its
    distributed object. Subclasses implement :meth:`process`; header
    propagation is delegated to the :class:`HeaderPropagator` collaborator.

    Args:
        endpoint: The endpoint that created this dispatcher, if any.
        header_propagator: Copies inbound headers to the outbound message
            after a dispatch. Defaults to a :class:`HeaderPropagator`.
    """

    def __init__(
        self,
        endpoint: Optional["MapEndpoint"] = None,
        header_propagator: Optional[HeaderPropagator] = None,
    ):
        self._endpoint = endpoint
        self._header_propagator = header_propagator or HeaderPropagator()

    @property
    def endpoint(self) -> Optional["MapEndpoint"]:
        return self._endpoint

    @property
    def header_propagator(self) -> HeaderPropagator:
        return self._header_propagator

    @abstractmethod
    def process(self, exchange: Exchange) -> None:
        """Perform the operation encoded in the exchange headers."""
        pass

    def lookup_operation_number(self, exchange: Exchange) -> int:
        return lookup_operation_number(exchange)

    @staticmethod
    def read_header(exchange: Exchange, name: str) -> Any:
        """Read an optional inbound header, returning UNDEFINED when absent."""
        return exchange.get_in().get_header(name, UNDEFINED)
