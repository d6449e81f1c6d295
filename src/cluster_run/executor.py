"""SSH execution engine for cluster-run."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import asyncssh

from .config import Config
from .credentials import KeyPair, resolve_credentials
from .errors import (
    AuthenticationError,
    ClusterRunError,
    ExecutionError,
    TransportError,
)

logger = logging.getLogger(__name__)

SSH_PORT = 22
SSH_USER = "ubuntu"


class NodeStatus(Enum):
    """Status of a node's execution."""

    PENDING = "pending"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class CommandResult:
    """Output captured from one remote command."""

    output: str
    exit_status: int | None = None


@dataclass
class NodeResult:
    """Outcome of one node's attempt."""

    node: str
    status: NodeStatus = NodeStatus.PENDING
    result: CommandResult | None = None
    error: ClusterRunError | None = None

    @property
    def ok(self) -> bool:
        return self.status == NodeStatus.SUCCESS


# Type aliases for callbacks
StatusCallback = Callable[[str, NodeStatus], None]  # (node, status) -> None
ResultCallback = Callable[[NodeResult], None]


async def run_command(
    node: str,
    command: str,
    credentials: KeyPair | None = None,
    on_status: StatusCallback | None = None,
) -> CommandResult:
    """Run ``command`` on ``node`` and return its combined output.

    The command string is sent verbatim. stderr is merged into stdout so
    both arrive in the order the remote side wrote them. The connection is
    closed before returning, whether or not the command succeeded.

    Raises KeyNotFoundError or ConfigurationError when the local key pair
    cannot be resolved, TransportError, AuthenticationError or
    ExecutionError for failures at the matching protocol step.
    """

    def emit(status: NodeStatus) -> None:
        if on_status:
            on_status(node, status)

    emit(NodeStatus.CONNECTING)
    if credentials is None:
        credentials = resolve_credentials()

    private_key = _load_private_key(node, credentials)
    conn = await _connect(node, private_key)
    try:
        emit(NodeStatus.CONNECTED)
        return await _execute(conn, node, command, emit)
    finally:
        conn.close()
        await conn.wait_closed()


def _load_private_key(node: str, credentials: KeyPair) -> asyncssh.SSHKey:
    """Read the private key from disk, without a passphrase."""
    try:
        return asyncssh.read_private_key(credentials.private_key, passphrase=None)
    except (asyncssh.KeyImportError, OSError) as e:
        raise AuthenticationError(node, e) from e


async def _connect(node: str, private_key: asyncssh.SSHKey) -> asyncssh.SSHClientConnection:
    """Open an authenticated SSH connection to ``node``."""
    logger.debug("Connecting to %s@%s:%d", SSH_USER, node, SSH_PORT)
    try:
        conn = await asyncssh.connect(
            node,
            port=SSH_PORT,
            username=SSH_USER,
            client_keys=[private_key],
            passphrase=None,
            preferred_auth="publickey",
            agent_path=None,  # Public key file only, no agent
            config=None,  # Ignore ~/.ssh/config so user and port stay fixed
            known_hosts=None,  # Host keys are not verified
        )
    except asyncssh.PermissionDenied as e:
        raise AuthenticationError(node, e) from e
    except (asyncssh.Error, OSError, asyncio.TimeoutError) as e:
        raise TransportError(node, e) from e

    logger.debug("Authenticated to %s as %s", node, SSH_USER)
    return conn


async def _execute(
    conn: asyncssh.SSHClientConnection,
    node: str,
    command: str,
    emit: Callable[[NodeStatus], None],
) -> CommandResult:
    """Execute ``command`` on an open connection and drain its output."""
    try:
        async with conn.create_process(
            command, stderr=asyncssh.STDOUT, encoding=None
        ) as proc:
            emit(NodeStatus.RUNNING)
            data = await proc.stdout.read()
            await proc.wait_closed()
            exit_status = proc.exit_status
    except asyncssh.DisconnectError as e:
        raise TransportError(node, e) from e
    except asyncssh.Error as e:
        raise ExecutionError(node, e) from e
    except OSError as e:
        raise TransportError(node, e) from e

    try:
        output = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExecutionError(node, e) from e

    logger.debug(
        "Command on %s finished with status %s (%d bytes)", node, exit_status, len(data)
    )
    return CommandResult(output=output, exit_status=exit_status)


class Executor:
    """Runs one command on every configured node, one node at a time."""

    def __init__(
        self,
        config: Config,
        command: str,
        on_status: StatusCallback | None = None,
        on_result: ResultCallback | None = None,
    ):
        self.config = config
        self.command = command
        self.on_status = on_status
        self.on_result = on_result

    def _emit_status(self, result: NodeResult, status: NodeStatus) -> None:
        """Record a status change for a node and notify the listener."""
        result.status = status
        if self.on_status:
            self.on_status(result.node, status)

    async def run_all(self) -> list[NodeResult]:
        """Run the command on all nodes sequentially, in configuration order."""
        results = []
        for node in self.config.cluster.nodes:
            result = await self._run_node(node)
            results.append(result)
            if self.on_result:
                self.on_result(result)
        return results

    async def _run_node(self, node: str) -> NodeResult:
        """Run the command on a single node, capturing any failure."""
        result = NodeResult(node=node)

        def on_status(_node: str, status: NodeStatus) -> None:
            self._emit_status(result, status)

        try:
            result.result = await run_command(node, self.command, on_status=on_status)
        except ClusterRunError as e:
            logger.debug("Node %s failed: %r", node, e)
            result.error = e
            self._emit_status(result, NodeStatus.FAILED)
            return result

        self._emit_status(result, NodeStatus.SUCCESS)
        return result
