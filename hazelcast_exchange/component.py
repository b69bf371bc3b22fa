"""Component and endpoints wiring dispatchers to a grid client."""

import threading
from enum import Enum
from typing import Any, Dict, Optional

import hazelcast

from hazelcast_exchange.config import ComponentConfig, MapEndpointConfig
from hazelcast_exchange.dispatcher.map import MapDispatcher
from hazelcast_exchange.exceptions import IllegalStateException
from hazelcast_exchange.exchange import Exchange
from hazelcast_exchange.helper import HeaderPropagator
from hazelcast_exchange.logging import get_logger, set_level

_logger = get_logger("component")


class ComponentState(Enum):
    """Lifecycle state of a component."""

    INITIAL = "INITIAL"
    STARTED = "STARTED"
    SHUTDOWN = "SHUTDOWN"


class _BlockingMapProvider:
    """Hands out the blocking view of the client's distributed maps."""

    def __init__(self, client: Any):
        self._client = client

    def get_map(self, name: str) -> Any:
        return self._client.get_map(name).blocking()


class MapEndpoint:
    """Endpoint bound to one distributed map of a component.

    The endpoint creates its dispatcher on first use and reuses it for
    every exchange.

    Attributes:
        component: The component that created this endpoint.
        map_name: Name of the distributed map.
        config: The endpoint configuration.
    """

    def __init__(self, component: "MapComponent", map_name: str, config: MapEndpointConfig):
        self._component = component
        self._map_name = map_name
        self._config = config
        self._dispatcher: Optional[MapDispatcher] = None
        self._lock = threading.Lock()

    @property
    def component(self) -> "MapComponent":
        return self._component

    @property
    def map_name(self) -> str:
        return self._map_name

    @property
    def config(self) -> MapEndpointConfig:
        return self._config

    @property
    def uri(self) -> str:
        return f"hazelcast-map:{self._map_name}"

    def create_dispatcher(self) -> MapDispatcher:
        """Create a dispatcher bound to this endpoint's map."""
        return MapDispatcher(
            self._component.map_provider,
            self,
            self._map_name,
            header_propagator=self._component.header_propagator,
            lock_lease_time=self._config.lock_lease_time,
        )

    @property
    def dispatcher(self) -> MapDispatcher:
        """Get the endpoint's dispatcher, creating it if needed."""
        with self._lock:
            if self._dispatcher is None:
                self._dispatcher = self.create_dispatcher()
            return self._dispatcher

    def process(self, exchange: Exchange) -> None:
        """Dispatch an exchange to this endpoint's map."""
        self.dispatcher.process(exchange)

    def __repr__(self) -> str:
        return f"MapEndpoint(uri={self.uri!r})"


class MapComponent:
    """Owns the grid client and the map endpoints created from it.

    Unless a map provider is injected, :meth:`start` creates a
    ``hazelcast.HazelcastClient`` from the configuration and
    :meth:`shutdown` shuts it down. An injected provider is never shut
    down by the component.

    Args:
        config: Component configuration. Defaults to a local ``dev`` cluster.
        hazelcast_instance: Optional provider whose ``get_map(name)``
            returns blocking map handles.

    Example:
        >>> with MapComponent(ComponentConfig.from_yaml("exchange.yaml")) as component:
        ...     endpoint = component.create_endpoint("orders")
        ...     endpoint.process(exchange)
    """

    def __init__(
        self,
        config: Optional[ComponentConfig] = None,
        hazelcast_instance: Any = None,
    ):
        self._config = config or ComponentConfig()
        self._map_provider = hazelcast_instance
        self._client: Any = None
        self._owns_client = hazelcast_instance is None
        self._header_propagator = HeaderPropagator(self._config.excluded_headers)
        self._endpoints: Dict[str, MapEndpoint] = {}
        self._state = ComponentState.INITIAL
        self._state_lock = threading.RLock()

    @property
    def config(self) -> ComponentConfig:
        return self._config

    @property
    def state(self) -> ComponentState:
        with self._state_lock:
            return self._state

    @property
    def running(self) -> bool:
        return self.state == ComponentState.STARTED

    @property
    def header_propagator(self) -> HeaderPropagator:
        return self._header_propagator

    @property
    def map_provider(self) -> Any:
        """Get the provider of blocking map handles."""
        self._check_running()
        return self._map_provider

    def start(self) -> "MapComponent":
        """Start the component, creating the grid client if needed.

        Returns:
            This component for method chaining.

        Raises:
            IllegalStateException: If the component has been shut down.
        """
        with self._state_lock:
            if self._state == ComponentState.STARTED:
                return self
            if self._state == ComponentState.SHUTDOWN:
                raise IllegalStateException("Component has been shut down")

            if self._config.log_level is not None:
                set_level(self._config.log_level)

            if self._owns_client:
                _logger.info(
                    "Starting grid client (cluster=%s, members=%s)",
                    self._config.cluster_name,
                    self._config.cluster_members,
                )
                try:
                    self._client = hazelcast.HazelcastClient(**self._config.client_options())
                except Exception as e:
                    _logger.error("Failed to start grid client: %s", e)
                    raise
                self._map_provider = _BlockingMapProvider(self._client)

            self._state = ComponentState.STARTED
            _logger.info("Map component started")
        return self

    def create_endpoint(self, map_name: str) -> MapEndpoint:
        """Get or create the endpoint bound to a distributed map.

        Raises:
            IllegalStateException: If the component is not started.
        """
        with self._state_lock:
            self._check_running()
            endpoint = self._endpoints.get(map_name)
            if endpoint is None:
                endpoint = MapEndpoint(self, map_name, self._config.get_map_config(map_name))
                self._endpoints[map_name] = endpoint
                _logger.debug("Created endpoint %s", endpoint.uri)
            return endpoint

    def shutdown(self) -> None:
        """Shut the component down. Calling it more than once has no effect."""
        with self._state_lock:
            if self._state == ComponentState.SHUTDOWN:
                return
            _logger.info("Shutting down map component")
            self._endpoints.clear()
            client, self._client = self._client, None
            self._state = ComponentState.SHUTDOWN

        if client is not None:
            client.shutdown()
            _logger.info("Grid client shut down")

    def _check_running(self) -> None:
        if self._state != ComponentState.STARTED:
            raise IllegalStateException(f"Component is not started (state={self._state.value})")

    def __enter__(self) -> "MapComponent":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return (
            f"MapComponent(state={self._state.value}, "
            f"cluster={self._config.cluster_name!r})"
        )
