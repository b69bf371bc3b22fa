"""Configuration for map endpoints and their component."""

import logging
import os
from typing import Any, Dict, List, Optional

from hazelcast_exchange.constants import CONTROL_HEADERS
from hazelcast_exchange.exceptions import ConfigurationException


ROOT_KEY = "hazelcast_exchange"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def _string_list(name: str, value: Any) -> List[str]:
    """Normalize a list-of-strings setting; a lone string is one entry."""
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigurationException(f"{name} must be a list of strings, got {value!r}")
    return list(value)


class MapEndpointConfig:
    """Configuration for an endpoint bound to one distributed map."""

    def __init__(self, map_name: str, lock_lease_time: Optional[float] = None):
        self._map_name = map_name
        self._lock_lease_time = lock_lease_time
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self._map_name, str) or not self._map_name.strip():
            raise ConfigurationException("map_name cannot be empty")
        if self._lock_lease_time is None:
            return
        if isinstance(self._lock_lease_time, bool) or not isinstance(
            self._lock_lease_time, (int, float)
        ):
            raise ConfigurationException("lock_lease_time must be a number of seconds")
        if self._lock_lease_time <= 0:
            raise ConfigurationException("lock_lease_time must be positive")

    @property
    def map_name(self) -> str:
        """Get the name of the distributed map."""
        return self._map_name

    @property
    def lock_lease_time(self) -> Optional[float]:
        """Get the lease time in seconds of the lock taken by UPDATE."""
        return self._lock_lease_time

    @lock_lease_time.setter
    def lock_lease_time(self, value: Optional[float]) -> None:
        self._lock_lease_time = value
        self._validate()

    @classmethod
    def from_dict(cls, map_name: str, data: Optional[dict]) -> "MapEndpointConfig":
        """Create MapEndpointConfig from a dictionary."""
        data = data or {}
        return cls(
            map_name=data.get("map_name", map_name),
            lock_lease_time=data.get("lock_lease_time"),
        )

    def __repr__(self) -> str:
        return (
            f"MapEndpointConfig(map_name={self._map_name!r}, "
            f"lock_lease_time={self._lock_lease_time!r})"
        )


class ComponentConfig:
    """Configuration for a map component and the grid client it owns.

    Example:
        >>> config = ComponentConfig()
        >>> config.cluster_name = "production"
        >>> config.cluster_members = ["node1:5701", "node2:5701"]
        >>> config.add_map(MapEndpointConfig("orders", lock_lease_time=30))
    """

    def __init__(
        self,
        cluster_name: str = "dev",
        cluster_members: Optional[List[str]] = None,
        client_name: Optional[str] = None,
        connection_timeout: float = 5.0,
        excluded_headers: Optional[List[str]] = None,
        log_level: Optional[str] = None,
    ):
        self._cluster_name = cluster_name
        self._cluster_members = (
            _string_list("cluster_members", cluster_members)
            if cluster_members is not None
            else ["127.0.0.1:5701"]
        )
        self._client_name = client_name
        self._connection_timeout = connection_timeout
        self._excluded_headers = (
            _string_list("excluded_headers", excluded_headers)
            if excluded_headers is not None
            else list(CONTROL_HEADERS)
        )
        self._log_level = log_level
        self._maps: Dict[str, MapEndpointConfig] = {}
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self._cluster_name, str) or not self._cluster_name.strip():
            raise ConfigurationException("cluster_name cannot be empty")
        if not self._cluster_members:
            raise ConfigurationException("cluster_members cannot be empty")
        if isinstance(self._connection_timeout, bool) or not isinstance(
            self._connection_timeout, (int, float)
        ):
            raise ConfigurationException("connection_timeout must be a number of seconds")
        if self._connection_timeout <= 0:
            raise ConfigurationException("connection_timeout must be positive")
        if self._log_level is not None and str(self._log_level).upper() not in _LOG_LEVELS:
            raise ConfigurationException(f"Unknown log_level: {self._log_level}")

    @property
    def cluster_name(self) -> str:
        """Get the cluster name."""
        return self._cluster_name

    @cluster_name.setter
    def cluster_name(self, value: str) -> None:
        self._cluster_name = value
        self._validate()

    @property
    def cluster_members(self) -> List[str]:
        """Get the cluster member addresses."""
        return self._cluster_members

    @cluster_members.setter
    def cluster_members(self, value: List[str]) -> None:
        self._cluster_members = _string_list("cluster_members", value)
        self._validate()

    @property
    def client_name(self) -> Optional[str]:
        """Get the client name."""
        return self._client_name

    @client_name.setter
    def client_name(self, value: Optional[str]) -> None:
        self._client_name = value

    @property
    def connection_timeout(self) -> float:
        """Get the connection timeout in seconds."""
        return self._connection_timeout

    @connection_timeout.setter
    def connection_timeout(self, value: float) -> None:
        self._connection_timeout = value
        self._validate()

    @property
    def excluded_headers(self) -> List[str]:
        """Get the headers that are not propagated to outbound messages."""
        return self._excluded_headers

    @excluded_headers.setter
    def excluded_headers(self, value: List[str]) -> None:
        self._excluded_headers = _string_list("excluded_headers", value)

    @property
    def log_level(self) -> Optional[str]:
        """Get the package log level name, if set."""
        return self._log_level

    @log_level.setter
    def log_level(self, value: Optional[str]) -> None:
        self._log_level = value
        self._validate()

    @property
    def log_level_number(self) -> Optional[int]:
        if self._log_level is None:
            return None
        return logging.getLevelName(str(self._log_level).upper())

    @property
    def maps(self) -> Dict[str, MapEndpointConfig]:
        """Get map endpoint configurations by map name."""
        return self._maps

    def add_map(self, config: MapEndpointConfig) -> None:
        """Add a map endpoint configuration."""
        self._maps[config.map_name] = config

    def get_map_config(self, map_name: str) -> MapEndpointConfig:
        """Get the configuration of a map, or a default one if none was added."""
        config = self._maps.get(map_name)
        if config is None:
            config = MapEndpointConfig(map_name)
        return config

    def client_options(self) -> Dict[str, Any]:
        """Get the keyword arguments for creating the grid client."""
        options: Dict[str, Any] = {
            "cluster_name": self._cluster_name,
            "cluster_members": list(self._cluster_members),
            "connection_timeout": self._connection_timeout,
        }
        if self._client_name:
            options["client_name"] = self._client_name
        return options

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentConfig":
        """Create ComponentConfig from a dictionary."""
        config = cls(
            cluster_name=data.get("cluster_name", "dev"),
            cluster_members=data.get("cluster_members"),
            client_name=data.get("client_name"),
            connection_timeout=data.get("connection_timeout", 5.0),
            excluded_headers=data.get("excluded_headers"),
            log_level=data.get("log_level"),
        )

        maps = data.get("maps") or {}
        if not isinstance(maps, dict):
            raise ConfigurationException("maps must be a mapping of map name to settings")
        for name, map_data in maps.items():
            config.add_map(MapEndpointConfig.from_dict(name, map_data))

        return config

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "ComponentConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            ComponentConfig instance.

        Raises:
            ConfigurationException: If the file cannot be read or parsed.
        """
        import yaml

        if not os.path.exists(yaml_path):
            raise ConfigurationException(f"Configuration file not found: {yaml_path}")

        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Failed to parse YAML: {e}", cause=e)
        except IOError as e:
            raise ConfigurationException(f"Failed to read configuration file: {e}", cause=e)

        return cls._from_loaded(data)

    @classmethod
    def from_yaml_string(cls, yaml_content: str) -> "ComponentConfig":
        """Load configuration from a YAML string.

        Raises:
            ConfigurationException: If the YAML cannot be parsed.
        """
        import yaml

        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Failed to parse YAML: {e}", cause=e)

        return cls._from_loaded(data)

    @classmethod
    def _from_loaded(cls, data: Any) -> "ComponentConfig":
        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ConfigurationException("Configuration root must be a mapping")

        if ROOT_KEY in data:
            data = data[ROOT_KEY] or {}

        return cls.from_dict(data)

    def __repr__(self) -> str:
        return (
            f"ComponentConfig(cluster_name={self._cluster_name!r}, "
            f"cluster_members={self._cluster_members!r}, "
            f"maps={sorted(self._maps)!r})"
        )
