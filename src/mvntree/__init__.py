"""mvntree: extract the module tree of a Maven project for an SBOM (library, TUI, CLI)."""

from importlib.metadata import version, PackageNotFoundError

from mvntree.api import (
    build_tree,
    get_project_info,
    resolve,
    ResolutionResult,
    ResolveOptions,
)

__all__ = [
    "build_tree",
    "get_project_info",
    "resolve",
    "ResolutionResult",
    "ResolveOptions",
    "__version__",
]

try:
    __version__ = version("mvntree")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package
