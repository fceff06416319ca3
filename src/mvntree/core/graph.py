"""Parse the DOT dump of `mvn dependency:tree -DoutputType=dot` into an adjacency map."""

from __future__ import annotations

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

# artifactId -> artifactIds it directly depends on, in first-seen order.
AdjacencyMap = dict[str, list[str]]

EDGE_MARKER = "->"
BLOCK_OPEN = "{"


def artifact_identifier(text: str) -> str:
    """
    Pull the artifactId out of a DOT node reference.

    ' "com.x:bar:jar:2.0:compile" ;' -> 'bar'. Returns "" when the text
    holds no colon-delimited coordinate.
    """
    fields = text.split(":")
    if len(fields) < 2:
        return ""
    return fields[1].strip().strip('"').strip()


def parse_transitive_graph(lines: Iterable[str]) -> AdjacencyMap:
    """
    Build an AdjacencyMap from the lines of a dependency:tree DOT dump.

    A line containing ``->`` is an edge, recorded under its left side; each
    source keeps a target only once. Lines containing ``{`` open a package
    block and ``}`` close it. With -DappendOutput=true a multi-module build
    emits one block per module, and an aggregator pom may emit an empty or
    anonymous block first; edges are still attributed by their left side,
    so neither attaches stray edges to the root package. Lines that match
    neither shape are skipped.
    """
    adjacency: AdjacencyMap = {}
    for lineno, line in enumerate(lines, start=1):
        if BLOCK_OPEN in line:
            if not artifact_identifier(line.split(BLOCK_OPEN, 1)[0]):
                logger.debug(f"line {lineno}: anonymous package block")
            continue
        if EDGE_MARKER not in line:
            continue
        lhs, _, rhs = line.partition(EDGE_MARKER)
        source = artifact_identifier(lhs)
        target = artifact_identifier(rhs)
        if not source or not target:
            logger.debug(f"line {lineno}: skipping malformed edge {line.strip()!r}")
            continue
        targets = adjacency.setdefault(source, [])
        if target not in targets:
            targets.append(target)
    return adjacency
