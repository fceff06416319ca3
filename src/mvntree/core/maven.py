"""Invoke Maven for the resolved dependency listing and the dependency graph dump."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from mvntree.core.capture import CapturedPipeline
from mvntree.core.errors import ExternalToolError
from mvntree.core.finder import default_graph_file, find_maven_executable
from mvntree.core.graph import AdjacencyMap, parse_transitive_graph

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600.0


def _maven(maven: str | None) -> str:
    exe = maven or find_maven_executable()
    if exe is None:
        raise ExternalToolError(
            ["mvn"], "Maven executable not found (set MVNTREE_MAVEN or add mvn to PATH)"
        )
    return exe


def dependency_list_commands(maven: str, *, offline: bool = True) -> list[list[str]]:
    """`mvn -o dependency:list | grep ':.*:.*:.*' | cut -d] -f2- | sort -u`."""
    mvn = [maven, "-o", "dependency:list"] if offline else [maven, "dependency:list"]
    return [
        mvn,
        ["grep", ":.*:.*:.*"],
        ["cut", "-d]", "-f2-"],
        ["sort", "-u"],
    ]


def get_dependency_list(
    project_dir: Path,
    *,
    maven: str | None = None,
    offline: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> list[str]:
    """
    Run Maven's dependency:list through the filter/sort chain and return its lines.

    Raises ExternalToolError if a stage cannot be started, the chain times
    out, or Maven itself exits non-zero. grep finding nothing is not an error.
    """
    commands = dependency_list_commands(_maven(maven), offline=offline)
    try:
        # C locale: grep and sort treat non-UTF-8 log bytes as plain text.
        env = {**os.environ, "LC_ALL": "C"}
        with CapturedPipeline(commands, cwd=project_dir, timeout=timeout, env=env) as pipe:
            output = pipe.read()
            returncodes = pipe.returncodes
    except OSError as e:
        raise ExternalToolError(commands[0], f"cannot start pipeline: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalToolError(commands[0], f"timed out after {timeout}s") from e
    if returncodes and returncodes[0] != 0:
        raise ExternalToolError(commands[0], "dependency:list failed", returncode=returncodes[0])
    lines = output.split("\n")
    logger.info(f"dependency:list produced {len(lines)} line(s)")
    return lines


def dependency_tree_command(maven: str, output_file: Path, *, offline: bool = True) -> list[str]:
    command = [
        maven,
        "dependency:tree",
        "-DoutputType=dot",
        "-DappendOutput=true",
        f"-DoutputFile={output_file}",
    ]
    if offline:
        command.insert(1, "-o")
    return command


def read_transitive_dependency_list(path: Path) -> AdjacencyMap:
    """Re-read a DOT dump written by dependency:tree and parse it."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ExternalToolError(["read", str(path)], f"cannot read graph dump: {e}") from e
    return parse_transitive_graph(text.splitlines())


def get_transitive_dependency_list(
    project_dir: Path,
    *,
    maven: str | None = None,
    output_file: Path | None = None,
    offline: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> AdjacencyMap:
    """
    Run dependency:tree in DOT mode into a fixed file, then read it back.

    The file is removed first since -DappendOutput=true would otherwise
    accumulate earlier runs.
    """
    output_file = Path(output_file) if output_file is not None else default_graph_file()
    output_file.unlink(missing_ok=True)
    command = dependency_tree_command(_maven(maven), output_file, offline=offline)
    try:
        result = subprocess.run(
            command,
            cwd=project_dir,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except OSError as e:
        raise ExternalToolError(command, f"cannot start: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalToolError(command, f"timed out after {timeout}s") from e
    if result.returncode != 0:
        logger.debug(f"dependency:tree output tail: {result.stdout[-2000:]!r}")
        raise ExternalToolError(command, "dependency:tree failed", returncode=result.returncode)
    adjacency = read_transitive_dependency_list(output_file)
    logger.info(f"dependency:tree produced edges for {len(adjacency)} package(s)")
    return adjacency
