"""Attach dependency-graph edges onto the resolved module list."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from mvntree.core.model import Module

logger = logging.getLogger(__name__)


def index_modules(modules: Sequence[Module]) -> dict[str, Module]:
    """Name -> module; the first occurrence of a name wins."""
    index: dict[str, Module] = {}
    for mod in modules:
        index.setdefault(mod.name, mod)
    return index


def merge_graph(modules: list[Module], adjacency: Mapping[str, Sequence[str]]) -> list[Module]:
    """
    Attach every known edge of adjacency to modules, in place.

    For each source present in modules, a copy of each known target is
    stored in the source's children under the target's name. Sources and
    targets with no module (Maven-internal or filtered artifacts) are
    skipped. Returns modules.
    """
    index = index_modules(modules)
    attached = 0
    for source, targets in adjacency.items():
        parent = index.get(source)
        if parent is None:
            logger.debug(f"graph source {source!r} has no module, skipping")
            continue
        for target in targets:
            if not target:
                continue
            child = index.get(target)
            if child is None:
                logger.debug(f"graph target {target!r} of {source!r} has no module, skipping")
                continue
            parent.attach(child)
            attached += 1
    logger.info(f"attached {attached} graph edge(s)")
    return modules
