"""Error types for cluster-run."""


class ClusterRunError(Exception):
    """Base class for all cluster-run errors."""


class ConfigurationError(ClusterRunError):
    """Configuration file or environment is missing or invalid."""


class UsageError(ClusterRunError):
    """Command line is missing required arguments."""


class KeyNotFoundError(ClusterRunError):
    """SSH key files are not present in the expected location."""


class NodeError(ClusterRunError):
    """A single node's attempt failed at the protocol level."""

    description = "node failure"

    def __init__(self, node: str, original_error: Exception):
        """Initialize node error.

        Args:
            node: Address of the node that failed
            original_error: Exception raised by the SSH layer
        """
        self.node = node
        self.original_error = original_error
        super().__init__(f"{self.description}: {original_error}")


class TransportError(NodeError):
    """TCP connection or SSH handshake failed."""

    description = "transport failure"


class AuthenticationError(NodeError):
    """The remote host rejected the key, or the key could not be loaded."""

    description = "authentication failure"


class ExecutionError(NodeError):
    """Channel open, exec request, or output decoding failed."""

    description = "execution failure"
