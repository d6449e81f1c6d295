"""Configuration loader for cluster-run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")


@dataclass(frozen=True)
class ClusterConfig:
    """Ordered list of node addresses."""

    nodes: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class Config:
    """Main configuration for a run."""

    cluster: ClusterConfig


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Load and validate configuration from a YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    config = _parse_config(raw)
    logger.debug("Loaded %d nodes from %s", len(config.cluster.nodes), config_path)
    return config


def _parse_config(raw: Any) -> Config:
    """Parse raw YAML data into a Config object."""
    if not isinstance(raw, dict):
        raise ConfigurationError("Configuration must be a mapping")

    cluster_raw = raw.get("cluster")
    if not isinstance(cluster_raw, dict):
        raise ConfigurationError("Configuration must have a 'cluster' section")

    return Config(cluster=_parse_cluster(cluster_raw))


def _parse_cluster(cluster_raw: dict[str, Any]) -> ClusterConfig:
    """Parse the cluster section."""
    if "nodes" not in cluster_raw:
        raise ConfigurationError("Cluster section must have a 'nodes' field")

    # An empty list is allowed and simply produces no work
    nodes_raw = cluster_raw["nodes"]
    if not isinstance(nodes_raw, list):
        raise ConfigurationError("'nodes' must be a list of node addresses")

    nodes = []
    for node in nodes_raw:
        if not isinstance(node, str) or not node.strip():
            raise ConfigurationError(f"Invalid node address: {node!r}")
        nodes.append(node.strip())

    return ClusterConfig(nodes=tuple(nodes))
