"""One resolution pass: pom.xml + Maven output -> module tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mvntree.core.aggregator import aggregate_submodules, convert_manifest
from mvntree.core.errors import ExternalToolError
from mvntree.core.finder import manifest_path
from mvntree.core.graph import AdjacencyMap
from mvntree.core.listing import reconcile_dependency_list
from mvntree.core.maven import DEFAULT_TIMEOUT, get_dependency_list, get_transitive_dependency_list
from mvntree.core.merge import merge_graph
from mvntree.core.model import Module
from mvntree.core.parser import Project, parse_pom

logger = logging.getLogger(__name__)


@dataclass
class ResolveOptions:
    """Knobs for resolve_project."""

    include_submodules: bool = True
    recursive: bool = True
    # Run Maven for dependency:list and dependency:tree; off = pom.xml only.
    use_maven: bool = True
    offline: bool = True
    # Raise ExternalToolError instead of degrading to a pom.xml-only tree.
    strict: bool = False
    maven: str | None = None
    graph_file: Path | None = None
    timeout: float | None = DEFAULT_TIMEOUT


@dataclass
class ResolutionResult:
    """Modules of one pass. modules[0] is the root; errors holds what was recovered from."""

    project: Project
    modules: list[Module]
    adjacency: AdjacencyMap = field(default_factory=dict)
    errors: list[Exception] = field(default_factory=list)

    @property
    def root(self) -> Module:
        for mod in self.modules:
            if mod.root:
                return mod
        return self.modules[0]

    def to_dict(self) -> dict:
        return {
            "root": self.root.name,
            "modules": [m.to_dict() for m in self.modules],
            "errors": [str(e) for e in self.errors],
        }


def _recover(error: ExternalToolError, options: ResolveOptions, errors: list[Exception]) -> None:
    if options.strict:
        raise error
    logger.warning(f"continuing without Maven output: {error}")
    errors.append(error)


def resolve_project(project_dir: Path, options: ResolveOptions | None = None) -> ResolutionResult:
    """
    Resolve the module tree of the Maven project in project_dir.

    Steps: parse the root pom.xml, add the modules `mvn dependency:list`
    finds beyond the declared ones, fold in submodules, then attach the
    edges of `mvn dependency:tree`.

    Raises ManifestReadError if the root pom.xml cannot be used, and
    ExternalToolError when options.strict is set and Maven fails. Submodule
    and (non-strict) Maven failures are logged and collected in
    ResolutionResult.errors.
    """
    options = options or ResolveOptions()
    pom = manifest_path(Path(project_dir))
    project = parse_pom(pom)
    base_dir = pom.parent
    errors: list[Exception] = []

    modules = convert_manifest(project)
    root = modules[0]
    logger.info(f"{pom}: {len(modules)} declared module(s)")

    if options.use_maven:
        try:
            lines = get_dependency_list(
                base_dir,
                maven=options.maven,
                offline=options.offline,
                timeout=options.timeout,
            )
        except ExternalToolError as e:
            _recover(e, options, errors)
        else:
            extras = reconcile_dependency_list(lines, project, known=[m.name for m in modules])
            for mod in extras:
                modules.append(mod)
                root.attach(mod)

    if options.include_submodules and project.modules:
        modules.extend(
            aggregate_submodules(base_dir, project, recursive=options.recursive, errors=errors)
        )

    adjacency: AdjacencyMap = {}
    if options.use_maven:
        try:
            adjacency = get_transitive_dependency_list(
                base_dir,
                maven=options.maven,
                output_file=options.graph_file,
                offline=options.offline,
                timeout=options.timeout,
            )
        except ExternalToolError as e:
            _recover(e, options, errors)
        else:
            merge_graph(modules, adjacency)

    return ResolutionResult(project=project, modules=modules, adjacency=adjacency, errors=errors)
