"""Expand the flat module list of a resolution pass into a nested display tree."""

from __future__ import annotations

from collections.abc import Sequence

from mvntree.core.merge import index_modules
from mvntree.core.model import Module

CYCLE_MARKER = "(cycle)"


def expand_tree(
    modules: Sequence[Module],
    root_name: str | None = None,
    *,
    max_depth: int | None = None,
    _depth: int = 0,
    _visited: set[str] | None = None,
    _index: dict[str, Module] | None = None,
) -> Module | None:
    """
    Build a nested copy of the tree rooted at root_name.

    Each module only owns its direct children; this follows child names
    back into the module list so the result shows the transitive tree.
    Cycles are cut with a leaf whose package_comment is "(cycle)".

    Args:
        modules: Modules of a resolution pass.
        root_name: Module to start from; defaults to the root module.
        max_depth: Optional max depth; None means no limit.

    Returns:
        A detached Module tree, or None if root_name is unknown.
    """
    if _index is None:
        _index = index_modules(modules)
    if _visited is None:
        _visited = set()
    if root_name is None:
        root_name = next((m.name for m in modules if m.root), modules[0].name if modules else None)
    if root_name is None:
        return None

    source = _index.get(root_name)
    if source is None:
        return None
    if root_name in _visited:
        return Module(name=source.name, version=source.version, package_comment=CYCLE_MARKER)

    node = source.copy()
    if max_depth is not None and _depth >= max_depth:
        return node

    _visited.add(root_name)
    for name, child in source.modules.items():
        if name in _index:
            expanded = expand_tree(
                modules,
                name,
                max_depth=max_depth,
                _depth=_depth + 1,
                _visited=_visited,
                _index=_index,
            )
        else:
            expanded = child.copy(with_children=True)
        if expanded is not None:
            node.modules[name] = expanded
    _visited.discard(root_name)
    return node

