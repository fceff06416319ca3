"""Locate Maven projects and the Maven executable."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from mvntree.core.parser import MANIFEST_FILENAME

MAVEN_ENV = "MVNTREE_MAVEN"
GRAPH_FILE_ENV = "MVNTREE_GRAPH_FILE"
GRAPH_FILE_NAME = "JavaMavenTDTreeOutput.txt"


def find_maven_executable() -> str | None:
    """
    Find the Maven executable.

    $MVNTREE_MAVEN wins when set (a path or a command name on PATH), then
    ``mvn`` on PATH. Returns None when neither is available.
    """
    override = os.environ.get(MAVEN_ENV, "").strip()
    if override:
        if Path(override).is_file():
            return str(Path(override).resolve())
        return shutil.which(override)
    return shutil.which("mvn")


def default_graph_file() -> Path:
    """Where `mvn dependency:tree` writes its DOT dump ($MVNTREE_GRAPH_FILE overrides)."""
    override = os.environ.get(GRAPH_FILE_ENV, "").strip()
    if override:
        return Path(override)
    return Path(tempfile.gettempdir()) / GRAPH_FILE_NAME


def manifest_path(project_dir: Path) -> Path:
    """<project_dir>/pom.xml; a path that already names a pom.xml is returned as is."""
    p = Path(project_dir)
    if p.name == MANIFEST_FILENAME or p.is_file():
        return p
    return p / MANIFEST_FILENAME


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Walk up from start (default: the current directory) to the nearest
    directory holding a pom.xml. Returns None if there is none.
    """
    current = Path(start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    for candidate in (current, *current.parents):
        if (candidate / MANIFEST_FILENAME).is_file():
            return candidate
    return None

