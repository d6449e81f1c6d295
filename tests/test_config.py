"""Tests for configuration loading."""

import dataclasses
from pathlib import Path

import pytest

from cluster_run.config import ClusterConfig, Config, load_config
from cluster_run.errors import ConfigurationError


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(content)
    return path


def test_loads_nodes_in_order(tmp_path: Path) -> None:
    """Nodes keep their configured order."""
    path = write_config(tmp_path, """
cluster:
  nodes:
    - 10.0.0.2
    - node-a.example.com
    - 10.0.0.1
""")

    config = load_config(path)

    assert config == Config(
        cluster=ClusterConfig(nodes=("10.0.0.2", "node-a.example.com", "10.0.0.1"))
    )
    assert [f.name for f in dataclasses.fields(Config)] == ["cluster"]


def test_empty_node_list_is_allowed(tmp_path: Path) -> None:
    """An empty list loads and produces no work."""
    path = write_config(tmp_path, "cluster:\n  nodes: []\n")

    config = load_config(path)

    assert config.cluster.nodes == ()


def test_missing_file(tmp_path: Path) -> None:
    """A missing config file is a configuration error."""
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path: Path) -> None:
    """YAML syntax errors are reported as configuration errors."""
    path = write_config(tmp_path, "cluster: [nodes: {\n")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_config(path)


@pytest.mark.parametrize(
    "content",
    [
        "",
        "- just\n- a list\n",
        "other: {}\n",
        "cluster: 10.0.0.1\n",
    ],
)
def test_missing_cluster_section(tmp_path: Path, content: str) -> None:
    """The top level must be a mapping with a cluster section."""
    path = write_config(tmp_path, content)

    with pytest.raises(ConfigurationError):
        load_config(path)


def test_missing_nodes_field(tmp_path: Path) -> None:
    """A cluster section without nodes is rejected."""
    path = write_config(tmp_path, "cluster:\n  name: lab\n")

    with pytest.raises(ConfigurationError, match="nodes"):
        load_config(path)


def test_nodes_must_be_a_list(tmp_path: Path) -> None:
    """A scalar nodes value is rejected."""
    path = write_config(tmp_path, "cluster:\n  nodes: 10.0.0.1\n")

    with pytest.raises(ConfigurationError, match="list"):
        load_config(path)


def test_node_entries_must_be_strings(tmp_path: Path) -> None:
    """Non-string entries are rejected."""
    path = write_config(tmp_path, "cluster:\n  nodes:\n    - 10.0.0.1\n    - {host: x}\n")

    with pytest.raises(ConfigurationError, match="Invalid node address"):
        load_config(path)
