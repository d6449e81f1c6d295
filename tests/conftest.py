"""Shared fixtures for cluster-run tests."""

from pathlib import Path
from typing import Callable, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.fixture
def ssh_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Home directory holding a default RSA key pair."""
    ssh_dir = tmp_path / ".ssh"
    ssh_dir.mkdir()
    (ssh_dir / "id_rsa").write_text("private")
    (ssh_dir / "id_rsa.pub").write_text("ssh-rsa AAAA test@host")
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def make_connection() -> Callable[..., MagicMock]:
    """Factory for mock SSH connections whose process yields given output."""

    def factory(output: bytes = b"", exit_status: int | None = 0) -> MagicMock:
        proc = MagicMock()
        proc.stdout.read = AsyncMock(return_value=output)
        proc.wait_closed = AsyncMock()
        proc.exit_status = exit_status

        conn = MagicMock()
        conn.create_process.return_value.__aenter__.return_value = proc
        conn.wait_closed = AsyncMock()
        return conn

    return factory


@pytest.fixture
def read_private_key() -> Generator[MagicMock, None, None]:
    """Patch the private key reader; its return_value is the loaded key."""
    with patch("cluster_run.executor.asyncssh.read_private_key") as mock:
        yield mock
