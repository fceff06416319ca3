"""Core library: pom.xml parsing, Maven output parsing, module tree assembly."""

from mvntree.core.aggregator import aggregate_submodules, convert_manifest, convert_submodule
from mvntree.core.errors import (
    ExternalToolError,
    ManifestReadError,
    MvnTreeError,
    SubmoduleReadError,
)
from mvntree.core.factory import convert_project_to_module, create_module
from mvntree.core.graph import AdjacencyMap, parse_transitive_graph
from mvntree.core.listing import parse_dependency_list, reconcile_dependency_list
from mvntree.core.merge import merge_graph
from mvntree.core.model import CheckSum, Module, Supplier
from mvntree.core.parser import Project, parse_pom
from mvntree.core.properties import resolve_name, resolve_property, resolve_version
from mvntree.core.resolver import ResolutionResult, ResolveOptions, resolve_project
from mvntree.core.tree import expand_tree

__all__ = [
    "aggregate_submodules",
    "convert_manifest",
    "convert_submodule",
    "ExternalToolError",
    "ManifestReadError",
    "MvnTreeError",
    "SubmoduleReadError",
    "convert_project_to_module",
    "create_module",
    "AdjacencyMap",
    "parse_transitive_graph",
    "parse_dependency_list",
    "reconcile_dependency_list",
    "merge_graph",
    "CheckSum",
    "Module",
    "Supplier",
    "Project",
    "parse_pom",
    "resolve_name",
    "resolve_property",
    "resolve_version",
    "ResolutionResult",
    "ResolveOptions",
    "resolve_project",
    "expand_tree",
]
