"""Command-line interface for mvntree: show, list and graph a Maven project's module tree."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from mvntree.core.errors import ExternalToolError, ManifestReadError
from mvntree.core.finder import find_project_root
from mvntree.core.model import Module
from mvntree.core.resolver import ResolutionResult, ResolveOptions, resolve_project
from mvntree.core.tree import CYCLE_MARKER, expand_tree


def _print_tree_text(node: Module, prefix: str = "", is_last: bool = True, top: bool = True) -> None:
    """Print a module tree as indented text."""
    marker = "" if top else ("└── " if is_last else "├── ")
    version = f" ({node.version})" if node.version else ""
    note = f" [{node.package_comment}]" if node.package_comment else ""
    print(f"{prefix}{marker}{node.name}{version}{note}")

    children = node.children
    child_prefix = "" if top else prefix + ("    " if is_last else "│   ")
    for i, child in enumerate(children):
        _print_tree_text(child, child_prefix, i == len(children) - 1, top=False)


def _options_from_args(args: argparse.Namespace) -> ResolveOptions:
    return ResolveOptions(
        include_submodules=not getattr(args, "no_modules", False),
        use_maven=not getattr(args, "no_maven", False),
        offline=not getattr(args, "online", False),
        strict=getattr(args, "strict", False),
    )


def _resolve(args: argparse.Namespace) -> ResolutionResult | None:
    """Run a resolution pass for args.path; print the error and return None on failure."""
    try:
        return resolve_project(Path(args.path), _options_from_args(args))
    except ManifestReadError as e:
        print(f"Error: {e}", file=sys.stderr)
    except ExternalToolError as e:
        print(f"Maven error: {e}", file=sys.stderr)
    return None


def cmd_tree(args: argparse.Namespace) -> int:
    """Show the module tree of a project."""
    result = _resolve(args)
    if result is None:
        return 1

    tree = expand_tree(result.modules, result.root.name, max_depth=args.depth)
    if tree is None:
        print(f"No modules resolved for {args.path}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(tree.to_dict(), indent=2))
    else:
        _print_tree_text(tree)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List every module of a project, one per line."""
    result = _resolve(args)
    if result is None:
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"Found {len(result.modules)} module(s) in {result.root.name}:\n")
    for mod in result.modules:
        version = mod.version or "?"
        if args.verbose:
            children = ", ".join(mod.modules) or "-"
            print(f"  {mod.name} {version}  -> {children}")
        else:
            print(f"  {mod.name} {version}")
    if result.errors:
        print(f"\n{len(result.errors)} problem(s) during resolution:")
        for err in result.errors:
            print(f"  - {err}")
    return 0


def _collect_edges(modules: list[Module]) -> set[tuple[str, str]]:
    """All (parent, child) edges of a resolution pass."""
    edges: set[tuple[str, str]] = set()
    for mod in modules:
        for child in mod.modules.values():
            if child.package_comment == CYCLE_MARKER:
                continue
            edges.add((mod.name, child.name))
    return edges


def _generate_dot(
    modules: list[Module],
    root_name: str,
    title: str | None = None,
    highlight_root: bool = True,
) -> str:
    """Generate DOT (Graphviz) format from the module edges."""
    edges = _collect_edges(modules)

    lines = [
        "digraph modules {",
        "    rankdir=LR;",
        '    node [shape=box, style=rounded, fontname="sans-serif"];',
    ]
    if title:
        lines.insert(1, f'    label="{title}";')
        lines.insert(2, "    labelloc=t;")

    if highlight_root:
        lines.append(f'    "{root_name}" [style="rounded,filled", fillcolor=lightblue];')

    for parent, child in sorted(edges):
        lines.append(f'    "{parent}" -> "{child}";')

    lines.append("}")
    return "\n".join(lines)


def _mermaid_id(name: str) -> str:
    """Convert a module name to a valid Mermaid node ID."""
    return name.replace("-", "_").replace(".", "_")


def _generate_mermaid(
    modules: list[Module],
    root_name: str,
    title: str | None = None,
    highlight_root: bool = True,
) -> str:
    """Generate Mermaid format from the module edges."""
    edges = _collect_edges(modules)

    lines = ["graph LR"]
    if title:
        lines[0] = f"---\ntitle: {title}\n---\ngraph LR"

    if highlight_root:
        lines.append(f"    {_mermaid_id(root_name)}[{root_name}]")
        lines.append(f"    style {_mermaid_id(root_name)} fill:#lightblue")

    for parent, child in sorted(edges):
        lines.append(f"    {_mermaid_id(parent)} --> {_mermaid_id(child)}")

    return "\n".join(lines)


def cmd_graph(args: argparse.Namespace) -> int:
    """Generate the module graph in DOT or Mermaid format."""
    result = _resolve(args)
    if result is None:
        return 1

    root_name = result.root.name
    title = None if args.no_title else f"{root_name} modules"
    if args.format == "mermaid":
        output = _generate_mermaid(result.modules, root_name, title=title)
    else:  # dot
        output = _generate_dot(result.modules, root_name, title=title)

    if args.output:
        Path(args.output).write_text(output)
        print(f"Graph written to: {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI."""
    from mvntree.tui.app import ModuleTreeApp

    path = Path(getattr(args, "path", "."))
    project_dir = find_project_root(path) or path
    app = ModuleTreeApp(project_dir=project_dir, options=_options_from_args(args))
    app.run()
    return 0


def _add_resolve_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or pom.xml (default: current directory)",
    )
    parser.add_argument(
        "--no-maven",
        action="store_true",
        help="Don't run Maven; use pom.xml declarations only",
    )
    parser.add_argument(
        "--no-modules",
        action="store_true",
        help="Don't fold in submodules declared under <modules>",
    )
    parser.add_argument(
        "--online",
        action="store_true",
        help="Let Maven go online (default: offline, -o)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when Maven fails instead of falling back to pom.xml only",
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the mvntree CLI."""
    parser = argparse.ArgumentParser(
        prog="mvntree",
        description="Extract the module tree of a Maven project for an SBOM.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "--log-level",
        "-L",
        action="count",
        default=0,
        dest="log_verbosity",
        help="Increase log output (-L = info, -LL = debug)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # mvntree tree
    tree_parser = subparsers.add_parser(
        "tree",
        help="Show the module tree of a project",
        description="Resolve a Maven project and display its module tree.",
    )
    _add_resolve_arguments(tree_parser)
    tree_parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=None,
        help="Maximum tree depth (default: unlimited)",
    )
    tree_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    tree_parser.set_defaults(func=cmd_tree)

    # mvntree list
    list_parser = subparsers.add_parser(
        "list",
        help="List every resolved module",
        description="Resolve a Maven project and list its modules with versions.",
    )
    _add_resolve_arguments(list_parser)
    list_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show each module's direct children",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    list_parser.set_defaults(func=cmd_list)

    # mvntree graph
    graph_parser = subparsers.add_parser(
        "graph",
        help="Generate a module graph (DOT/Mermaid format)",
        description="Generate the module dependency graph of a Maven project.",
    )
    _add_resolve_arguments(graph_parser)
    graph_parser.add_argument(
        "-f",
        "--format",
        choices=["dot", "mermaid"],
        default="dot",
        help="Output format: dot (Graphviz) or mermaid (default: dot)",
    )
    graph_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    graph_parser.add_argument(
        "--no-title",
        action="store_true",
        help="Don't include a title in the graph",
    )
    graph_parser.set_defaults(func=cmd_graph)

    # mvntree tui (default if no command)
    tui_parser = subparsers.add_parser(
        "tui",
        help="Launch the interactive terminal UI",
        description="Start the interactive TUI for browsing the module tree.",
    )
    _add_resolve_arguments(tui_parser)
    tui_parser.set_defaults(func=cmd_tui)

    args = parser.parse_args(argv)
    _configure_logging(args.log_verbosity)

    # Default to TUI if no command specified
    if args.command is None:
        return cmd_tui(argparse.Namespace(path="."))

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
