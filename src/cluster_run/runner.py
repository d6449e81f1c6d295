#!/usr/bin/env python3
"""Main entry point for cluster-run."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_CONFIG_PATH, Config, load_config
from .errors import ConfigurationError, UsageError
from .executor import Executor, NodeResult, NodeStatus

logger = logging.getLogger(__name__)

# ANSI colors for different nodes
COLORS = [
    "\033[36m",  # Cyan
    "\033[33m",  # Yellow
    "\033[35m",  # Magenta
    "\033[32m",  # Green
    "\033[34m",  # Blue
    "\033[91m",  # Light Red
    "\033[96m",  # Light Cyan
    "\033[93m",  # Light Yellow
]
RESET = "\033[0m"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cluster-run",
        description="Run a command on every node of a cluster over SSH",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to YAML configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored node labels",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run on each node",
    )
    return parser


def build_command(words: Sequence[str]) -> str:
    """Join command-line words into the command string sent to every node."""
    # argparse.REMAINDER keeps the "--" that separates options from the command
    if words and words[0] == "--":
        words = words[1:]
    if not words:
        raise UsageError("No command given")
    return " ".join(words)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        command = build_command(args.command)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 1

    setup_logging(args.verbose)
    print("Welcome to cluster_run!")

    # Load configuration
    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    use_color = not args.no_color and sys.stdout.isatty()
    return _run(config, command, use_color)


def _run(config: Config, command: str, use_color: bool) -> int:
    """Run the command on every node and print each result as it arrives."""
    # Assign colors to nodes
    node_colors = {}
    if use_color:
        node_colors = {
            node: COLORS[i % len(COLORS)] for i, node in enumerate(config.cluster.nodes)
        }

    def label(node: str) -> str:
        color = node_colors.get(node)
        return f"{color}{node}{RESET}" if color else node

    def on_status(node: str, status: NodeStatus) -> None:
        if status == NodeStatus.CONNECTING:
            print(f"Connecting to node {label(node)}...", flush=True)

    def on_result(result: NodeResult) -> None:
        if result.ok and result.result is not None:
            print(
                f"Output from {label(result.node)} for command '{command}': \n"
                f"{result.result.output}"
            )
            exit_status = result.result.exit_status
            if exit_status is not None and exit_status != 0:
                print(f"Command exited with status {exit_status}")
        else:
            print(f"Error for node {label(result.node)}: {result.error}", file=sys.stderr)
        print(flush=True)

    logger.debug("Running %r on %d nodes", command, len(config.cluster.nodes))
    executor = Executor(config, command, on_status=on_status, on_result=on_result)
    results = asyncio.run(executor.run_all())

    # Per-node failures are reported but do not change the exit status
    failed_nodes = [result.node for result in results if not result.ok]
    if failed_nodes:
        print(f"Failed nodes: {', '.join(failed_nodes)}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
