"""Integration test fixtures using testcontainers."""

import os
import time
import uuid
from typing import Generator, Optional

import pytest

# Check if testcontainers is available
try:
    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs
    TESTCONTAINERS_AVAILABLE = True
except ImportError:
    TESTCONTAINERS_AVAILABLE = False
    DockerContainer = None

# Check if Docker is available
DOCKER_AVAILABLE = False
if TESTCONTAINERS_AVAILABLE:
    try:
        import docker
        docker.from_env().ping()
        DOCKER_AVAILABLE = True
    except Exception:
        pass

SKIP_INTEGRATION = os.environ.get("SKIP_INTEGRATION_TESTS", "false").lower() == "true"

HAZELCAST_IMAGE = os.environ.get("HAZELCAST_IMAGE", "hazelcast/hazelcast:5.3")
HAZELCAST_PORT = 5701


skip_integration = pytest.mark.skipif(
    SKIP_INTEGRATION or not DOCKER_AVAILABLE,
    reason="Integration tests disabled or Docker unavailable"
)


class HazelcastContainer:
    """Wrapper for a single-member Hazelcast Docker container."""

    def __init__(
        self,
        image: str = HAZELCAST_IMAGE,
        cluster_name: str = "dev",
        port: int = HAZELCAST_PORT,
    ):
        self._image = image
        self._cluster_name = cluster_name
        self._port = port
        self._container: Optional[DockerContainer] = None
        self._host: Optional[str] = None
        self._mapped_port: Optional[int] = None

    def start(self) -> "HazelcastContainer":
        """Start the Hazelcast container."""
        if not TESTCONTAINERS_AVAILABLE:
            raise RuntimeError("testcontainers package is not installed")

        self._container = (
            DockerContainer(self._image)
            .with_exposed_ports(self._port)
            .with_env("HZ_CLUSTERNAME", self._cluster_name)
            .with_env("JAVA_OPTS", "-Dhazelcast.phone.home.enabled=false")
        )
        self._container.start()

        wait_for_logs(self._container, "is STARTED", timeout=60)
        time.sleep(2)

        self._host = self._container.get_container_host_ip()
        self._mapped_port = int(self._container.get_exposed_port(self._port))

        return self

    def stop(self) -> None:
        """Stop the Hazelcast container."""
        if self._container:
            self._container.stop()
            self._container = None

    @property
    def address(self) -> str:
        """Get the full address string."""
        return f"{self._host or 'localhost'}:{self._mapped_port or self._port}"

    @property
    def cluster_name(self) -> str:
        return self._cluster_name


@pytest.fixture(scope="session")
def hazelcast_container() -> Generator[HazelcastContainer, None, None]:
    """Session-scoped fixture for a single Hazelcast container."""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available")

    container = HazelcastContainer(cluster_name="integration-test")
    container.start()
    yield container
    container.stop()


@pytest.fixture(scope="session")
def component_config(hazelcast_container: HazelcastContainer):
    """Create a ComponentConfig pointing at the test container."""
    from hazelcast_exchange.config import ComponentConfig

    return ComponentConfig(
        cluster_name=hazelcast_container.cluster_name,
        cluster_members=[hazelcast_container.address],
        connection_timeout=10.0,
    )


@pytest.fixture(scope="session")
def map_component(component_config):
    """Session-scoped component owning a connected grid client."""
    from hazelcast_exchange.component import MapComponent

    component = MapComponent(component_config).start()
    yield component
    component.shutdown()


@pytest.fixture
def map_endpoint(map_component):
    """Endpoint bound to a fresh, uniquely named map."""
    endpoint = map_component.create_endpoint(f"dispatch-{uuid.uuid4().hex[:8]}")
    yield endpoint
    endpoint.dispatcher.map.destroy()
