"""Public API: use mvntree from Python or from other tools."""

from __future__ import annotations

from pathlib import Path

from mvntree.core.finder import manifest_path
from mvntree.core.model import Module
from mvntree.core.parser import Project, read_pom
from mvntree.core.resolver import ResolutionResult, ResolveOptions, resolve_project
from mvntree.core.tree import expand_tree


def get_project_info(project_dir: Path) -> Project | None:
    """
    Parse the pom.xml of a project directory.

    Returns None if there is no pom.xml or it cannot be parsed.
    """
    return read_pom(manifest_path(Path(project_dir)))


def resolve(
    project_dir: Path,
    *,
    use_maven: bool = True,
    include_submodules: bool = True,
    offline: bool = True,
    strict: bool = False,
) -> ResolutionResult:
    """
    Resolve the full module list of a Maven project.

    Args:
        project_dir: Directory holding the root pom.xml (or the pom.xml itself).
        use_maven: Run Maven for dependency:list and dependency:tree.
        include_submodules: Fold in modules declared under <modules>.
        offline: Pass -o to Maven.
        strict: Raise when Maven fails instead of returning a pom.xml-only result.

    Raises:
        ManifestReadError: the root pom.xml is missing or malformed.
    """
    return resolve_project(
        Path(project_dir),
        ResolveOptions(
            use_maven=use_maven,
            include_submodules=include_submodules,
            offline=offline,
            strict=strict,
        ),
    )


def build_tree(
    project_dir: Path,
    *,
    max_depth: int | None = None,
    use_maven: bool = True,
    include_submodules: bool = True,
    offline: bool = True,
) -> Module | None:
    """
    Resolve a project and return its root module with the transitive tree expanded.

    Args:
        project_dir: Directory holding the root pom.xml.
        max_depth: Optional maximum depth; None = unlimited.
        use_maven: Run Maven; off = pom.xml declarations only.
        include_submodules: Fold in modules declared under <modules>.
        offline: Pass -o to Maven.

    Returns:
        Root Module of the expanded tree, or None if the pass produced no modules.
    """
    result = resolve(
        project_dir,
        use_maven=use_maven,
        include_submodules=include_submodules,
        offline=offline,
    )
    return expand_tree(result.modules, result.root.name, max_depth=max_depth)
