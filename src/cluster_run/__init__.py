"""cluster_run: Run one command on every node of a cluster over SSH."""

from .config import ClusterConfig, Config, load_config
from .credentials import KeyPair, resolve_credentials
from .errors import (
    AuthenticationError,
    ClusterRunError,
    ConfigurationError,
    ExecutionError,
    KeyNotFoundError,
    NodeError,
    TransportError,
    UsageError,
)
from .executor import CommandResult, Executor, NodeResult, NodeStatus, run_command

__all__ = [
    "ClusterConfig",
    "Config",
    "load_config",
    "KeyPair",
    "resolve_credentials",
    "AuthenticationError",
    "ClusterRunError",
    "ConfigurationError",
    "ExecutionError",
    "KeyNotFoundError",
    "NodeError",
    "TransportError",
    "UsageError",
    "CommandResult",
    "Executor",
    "NodeResult",
    "NodeStatus",
    "run_command",
]
