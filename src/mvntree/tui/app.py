"""Textual TUI for navigating a Maven project's module tree."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, LoadingIndicator, Static, Tree
from textual.widgets.tree import TreeNode
from textual.worker import Worker, WorkerState

from mvntree.core.resolver import ResolutionResult, ResolveOptions, resolve_project
from mvntree.core.tree import expand_tree

# Limits to avoid huge trees and crashes
MAX_TREE_DEPTH = 8
MAX_TREE_NODES = 500
EXPAND_DEPTH_DEFAULT = 2

COLOR_HEADER = "bold magenta"
COLOR_ROOT = "bold green"
COLOR_PKG = "white"
COLOR_STATS = "cyan"
COLOR_WARN = "yellow"


def _count_nodes(node: Any) -> int:
    """Count nodes in tree (for cap)."""
    n = 1
    for c in getattr(node, "children", []):
        n += _count_nodes(c)
    return n


def _node_stats(node: Any) -> tuple[int, int, int]:
    """Return (direct_children, total_descendants, max_depth) for a node."""
    children = getattr(node, "children", []) or []
    direct = len(children)
    total = 0
    max_d = 0
    for c in children:
        sub_direct, sub_total, sub_depth = _node_stats(c)
        total += 1 + sub_total
        max_d = max(max_d, 1 + sub_depth)
    return direct, total, max_d


def _node_label(node: Any) -> str:
    label = f"[{COLOR_PKG}]{node.name}[/] [dim]{node.version or '?'}[/]"
    comment = getattr(node, "package_comment", "")
    if comment:
        label += f" [dim]{comment}[/]"
    return label


def _populate_textual_tree(
    tn: TreeNode,
    node: Any,
    *,
    depth: int = 0,
    max_depth: int = MAX_TREE_DEPTH,
    max_nodes: int = MAX_TREE_NODES,
    node_count: list[int] | None = None,
) -> None:
    """Recursively add Module children; cap depth and total nodes."""
    if node_count is None:
        node_count = [0]
    for child in getattr(node, "children", []):
        if node_count[0] >= max_nodes:
            tn.add_leaf(f"[dim]… truncated ({max_nodes} nodes max)[/]")
            return
        if depth >= max_depth:
            tn.add_leaf(f"[dim]{child.name} …[/]")
            continue
        node_count[0] += 1
        child_tn = tn.add(_node_label(child), expand=False)
        child_tn.data = child
        _populate_textual_tree(
            child_tn,
            child,
            depth=depth + 1,
            max_depth=max_depth,
            max_nodes=max_nodes,
            node_count=node_count,
        )


def _expand_to_depth(tn: TreeNode, depth: int, current: int = 0) -> None:
    """Expand tree nodes up to given depth (0 = root only)."""
    if current >= depth:
        return
    tn.expand()
    for child in tn.children:
        _expand_to_depth(child, depth, current + 1)


def _format_module(node: Any) -> str:
    """Details panel text for a module."""
    direct, total_desc, max_depth = _node_stats(node)
    checksum = getattr(node, "checksum", None)
    supplier = getattr(node, "supplier", None)
    supplier_text = "(unknown)"
    if supplier is not None and supplier.name:
        supplier_text = f"{supplier.type}: {supplier.name}"
        if supplier.email:
            supplier_text += f" <{supplier.email}>"

    lines = [
        f"[{COLOR_HEADER}]Module[/]",
        f"  [{COLOR_PKG}]{node.name}[/]  [dim]{node.version or '(unresolved version)'}[/]",
        "",
        f"[{COLOR_HEADER}]SBOM[/]",
        f"  Checksum:  {checksum.algorithm + ' ' + checksum.value if checksum else '(none)'}",
        f"  Supplier:  {supplier_text}",
        f"  License:   {getattr(node, 'license_declared', '') or '(none)'}",
        f"  Home page: {getattr(node, 'package_home_page', '') or '(none)'}",
        "",
        f"[{COLOR_HEADER}]Stats[/]",
        f"  Direct dependencies:   [{COLOR_STATS}]{direct}[/]",
        f"  Total descendants:     [{COLOR_STATS}]{total_desc}[/] [dim](indirect)[/]",
        f"  Max depth from here:   [{COLOR_STATS}]{max_depth}[/] [dim]levels[/]",
    ]
    return "\n".join(lines)


class SearchScreen(ModalScreen[str | None]):
    """Modal to search for modules in the tree. Keyboard-only."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    DEFAULT_CSS = """
    SearchScreen {
        align: center middle;
        padding: 2 4;
    }
    SearchScreen #search_title {
        text-align: center;
        padding-bottom: 1;
    }
    SearchScreen #search_input {
        width: 60;
        margin: 1 0;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._input: Input | None = None

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(
                "[bold cyan]Search[/]\n\nType a module name or partial match.",
                id="search_title",
                markup=True,
            )
            yield Input(placeholder="artifactId...", id="search_input")
            yield Static(
                "[dim]Enter[/] = Search  ·  [dim]Escape[/] = Cancel  ·  "
                "then [bold]n[/bold]/[bold]N[/bold] = next/previous match",
                markup=True,
            )

    def on_mount(self) -> None:
        self._input = self.query_one("#search_input", Input)
        self._input.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = self._input.value.strip() if self._input else ""
        self.dismiss(value if value else None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ModuleTreeApp(App[None]):
    """Terminal UI to explore the module tree of a Maven project."""

    TITLE = "mvntree"
    BINDINGS = [
        Binding("/", "search", "Search"),
        Binding("n", "next_match", "Next match", show=False),
        Binding("N", "prev_match", "Prev match", show=False),
        Binding("d", "toggle_details", "Details"),
        Binding("r", "refresh", "Refresh"),
        Binding("e", "expand_all", "Expand all"),
        Binding("c", "collapse_all", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #loading {
        height: auto;
        display: none;
    }
    #loading.loading {
        display: block;
    }
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 8;
    }
    """

    def __init__(
        self,
        project_dir: Path | None = None,
        options: ResolveOptions | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._project_dir = Path(project_dir or Path.cwd()).resolve()
        self._options = options or ResolveOptions()
        self._result: ResolutionResult | None = None
        self._loading = False
        self._search_matches: list[TreeNode] = []
        self._search_index = 0
        self._details_visible = True

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Container(id="loading"):
            yield LoadingIndicator()
            yield Static("[dim]Resolving modules (running Maven)...[/]", markup=True)
        yield Tree("Modules", id="module_tree")
        yield Static("[dim]↑/↓[/] move  ·  [dim]Enter[/] select  ·  [dim]/[/] search", id="details")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = str(self._project_dir)
        self._start_resolution()

    def _start_resolution(self) -> None:
        """Resolve the project in a background thread; one pass at a time."""
        if self._loading:
            return
        self._loading = True
        self.query_one("#loading").add_class("loading")
        self.run_worker(self._resolve_worker, thread=True, exclusive=True)

    def _resolve_worker(self) -> ResolutionResult:
        return resolve_project(self._project_dir, self._options)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.SUCCESS:
            self._loading = False
            self.query_one("#loading").remove_class("loading")
            self._result = event.worker.result
            self._show_result()
        elif event.state == WorkerState.ERROR:
            self._loading = False
            self.query_one("#loading").remove_class("loading")
            self._set_details(f"[red]Error: {event.worker.error}[/]")

    def _show_result(self) -> None:
        result = self._result
        if result is None:
            return
        tree = self.query_one("#module_tree", Tree)
        tree.clear()
        root = expand_tree(result.modules, result.root.name, max_depth=MAX_TREE_DEPTH)
        if root is None:
            tree.root.add_leaf("[dim]No modules[/]")
            return
        tree.root.label = f"[{COLOR_ROOT}]{root.name}[/] [dim]{root.version or '?'}[/]"
        tree.root.data = root
        _populate_textual_tree(tree.root, root)
        _expand_to_depth(tree.root, EXPAND_DEPTH_DEFAULT)

        details = _format_module(root)
        details += f"\n\n  Modules resolved: [{COLOR_STATS}]{len(result.modules)}[/]"
        if result.errors:
            details += f"\n\n[{COLOR_WARN}]Problems[/]"
            for err in result.errors:
                details += f"\n  {err}"
        self._set_details(details)
        tree.focus()

    def _set_details(self, text: str) -> None:
        self.query_one("#details", Static).update(text)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        node = event.node.data
        if node is not None and hasattr(node, "name"):
            self._set_details(_format_module(node))

    def action_refresh(self) -> None:
        self._start_resolution()

    def action_expand_all(self) -> None:
        self.query_one("#module_tree", Tree).root.expand_all()

    def action_collapse_all(self) -> None:
        tree = self.query_one("#module_tree", Tree)
        tree.root.collapse_all()
        tree.root.expand()

    def action_search(self) -> None:
        self.push_screen(SearchScreen(), self._on_search_done)

    def _on_search_done(self, query: str | None) -> None:
        if not query:
            return
        self._search_matches = []
        self._search_index = 0
        tree = self.query_one("#module_tree", Tree)
        self._collect_matches(tree.root, query.lower())
        if not self._search_matches:
            self.notify(f"No matches for '{query}'", severity="warning", timeout=2)
            return
        self._goto_match(0)

    def _collect_matches(self, node: TreeNode, query: str) -> None:
        """Recursively collect nodes whose module name contains the query."""
        name = getattr(node.data, "name", "") if node.data is not None else ""
        if query in name.lower():
            self._search_matches.append(node)
        for child in node.children:
            self._collect_matches(child, query)

    def _goto_match(self, index: int) -> None:
        if not self._search_matches:
            return
        self._search_index = index % len(self._search_matches)
        match_node = self._search_matches[self._search_index]
        parent = match_node.parent
        while parent is not None:
            parent.expand()
            parent = parent.parent
        tree = self.query_one("#module_tree", Tree)
        tree.select_node(match_node)
        tree.scroll_to_node(match_node)
        self.notify(
            f"Match {self._search_index + 1}/{len(self._search_matches)}",
            severity="information",
            timeout=2,
        )

    def action_next_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index + 1)

    def action_prev_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index - 1)

    def action_toggle_details(self) -> None:
        self._details_visible = not self._details_visible
        details = self.query_one("#details", Static)
        details.styles.display = "block" if self._details_visible else "none"


def main() -> None:
    """Entry point for the mvntree TUI."""
    project_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    app = ModuleTreeApp(project_dir=project_dir)
    app.run()


if __name__ == "__main__":
    main()
