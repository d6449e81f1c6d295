"""Locate the local SSH key pair used to authenticate to every node."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import ConfigurationError, KeyNotFoundError

logger = logging.getLogger(__name__)

SSH_DIR = ".ssh"
PRIVATE_KEY_NAME = "id_rsa"
PUBLIC_KEY_NAME = "id_rsa.pub"


@dataclass(frozen=True)
class KeyPair:
    """Paths of a matching public/private key pair."""

    public_key: Path
    private_key: Path


def resolve_credentials(environ: Mapping[str, str] | None = None) -> KeyPair:
    """Return the default key pair under ``$HOME/.ssh``.

    Raises ConfigurationError when HOME is not set and KeyNotFoundError
    when either key file is missing.
    """
    if environ is None:
        environ = os.environ

    home = environ.get("HOME")
    if not home:
        raise ConfigurationError("Unable to determine home directory: HOME is not set")

    ssh_dir = Path(home) / SSH_DIR
    keys = KeyPair(
        public_key=ssh_dir / PUBLIC_KEY_NAME,
        private_key=ssh_dir / PRIVATE_KEY_NAME,
    )

    missing = [str(path) for path in (keys.public_key, keys.private_key) if not path.exists()]
    if missing:
        raise KeyNotFoundError(
            f"SSH key files not found in the default location: {', '.join(missing)}"
        )

    logger.debug("Using SSH keys %s and %s", keys.private_key, keys.public_key)
    return keys
