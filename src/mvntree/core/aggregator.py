"""Fold a project's declarations and its submodules' pom.xml files into modules."""

from __future__ import annotations

import logging
from pathlib import Path

from mvntree.core.errors import ManifestReadError, SubmoduleReadError
from mvntree.core.factory import (
    convert_project_to_module,
    create_module,
    project_module_name,
    sanitize_name,
)
from mvntree.core.model import Module
from mvntree.core.parser import MANIFEST_FILENAME, Project, parse_pom
from mvntree.core.properties import resolve_version

logger = logging.getLogger(__name__)


def convert_manifest(project: Project, license_dir: Path | None = None) -> list[Module]:
    """
    Convert the root pom.xml into its module set.

    Returns the root module first, followed by one module per
    dependencyManagement entry, dependency, plugin and pluginManagement
    entry (in that order). Each is also attached, as a copy, under the
    root module. A name declared twice is emitted once.
    """
    root = convert_project_to_module(project, license_dir=license_dir)
    modules = [root]
    seen = {root.name}

    declared = [(d.artifact_id, d.version) for d in project.dependency_management]
    declared += [(d.artifact_id, d.version) for d in project.dependencies]
    declared += [(p.artifact_id, p.version) for p in project.plugins]
    declared += [(p.artifact_id, p.version) for p in project.plugin_management]

    for artifact_id, version in declared:
        if not artifact_id:
            continue
        mod = create_module(artifact_id, version, project)
        if mod.name in seen:
            continue
        seen.add(mod.name)
        modules.append(mod)
        root.attach(mod)
    return modules


def load_submodule(base_dir: Path, module_name: str) -> Project:
    """Parse <base_dir>/<module_name>/pom.xml, raising SubmoduleReadError on failure."""
    path = Path(base_dir) / module_name / MANIFEST_FILENAME
    try:
        return parse_pom(path)
    except ManifestReadError as e:
        raise SubmoduleReadError(module_name, path, e.reason) from e


def _declared_in(artifact_id: str, *groups) -> bool:
    return any(item.artifact_id == artifact_id for group in groups for item in group)


def submodule_modules(project: Project, parent: Project) -> list[Module]:
    """
    Modules contributed by an already parsed submodule.

    The submodule's own module comes first. Dependencies and plugins already
    declared by the parent (directly or in its management sections) are
    left out; the rest become children of the submodule's module.
    """
    version = project.version or resolve_version(parent.version, parent)
    own = create_module(project_module_name(project), version, project)
    modules = [own]
    seen = {own.name}

    extras: list[tuple[str, str]] = []
    for dep in project.dependencies:
        name = sanitize_name(dep.artifact_id)
        if not _declared_in(name, parent.dependencies, parent.dependency_management):
            extras.append((name, dep.version))
    for plugin in project.plugins:
        name = sanitize_name(plugin.artifact_id)
        if not _declared_in(name, parent.plugins, parent.plugin_management):
            extras.append((name, plugin.version))

    for name, version in extras:
        if not name or name in seen:
            continue
        mod = create_module(name, version, project)
        seen.add(mod.name)
        modules.append(mod)
        own.attach(mod)
    return modules


def convert_submodule(base_dir: Path, module_name: str, parent: Project) -> list[Module]:
    """
    Load a declared submodule and return the modules it contributes.

    Raises SubmoduleReadError if its pom.xml cannot be opened or parsed.
    """
    project = load_submodule(base_dir, module_name)
    return submodule_modules(project, parent)


def aggregate_submodules(
    base_dir: Path,
    project: Project,
    *,
    recursive: bool = True,
    errors: list[Exception] | None = None,
    _visited: set[Path] | None = None,
) -> list[Module]:
    """
    Collect the modules of every submodule declared by project.

    A submodule that cannot be read is logged, recorded in errors (when
    given) and skipped; its siblings are still processed. With recursive,
    nested <modules> are folded in with the submodule as their parent.
    """
    if _visited is None:
        _visited = {Path(base_dir).resolve()}
    modules: list[Module] = []
    for module_name in project.modules:
        sub_dir = (Path(base_dir) / module_name).resolve()
        if sub_dir in _visited:
            logger.debug(f"submodule {module_name} already visited, skipping")
            continue
        _visited.add(sub_dir)
        try:
            sub_project = load_submodule(base_dir, module_name)
        except SubmoduleReadError as e:
            logger.warning(f"skipping submodule: {e}")
            if errors is not None:
                errors.append(e)
            continue
        contributed = submodule_modules(sub_project, project)
        logger.info(f"submodule {module_name}: {len(contributed)} module(s)")
        modules.extend(contributed)
        if recursive and sub_project.modules:
            modules.extend(
                aggregate_submodules(
                    sub_dir,
                    sub_project,
                    recursive=True,
                    errors=errors,
                    _visited=_visited,
                )
            )
    return modules
