"""Parse a Maven pom.xml into a Project record."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from mvntree.core.errors import ManifestReadError

MANIFEST_FILENAME = "pom.xml"


@dataclass(frozen=True)
class Dependency:
    group_id: str
    artifact_id: str
    version: str = ""
    scope: str = ""


@dataclass(frozen=True)
class Plugin:
    group_id: str
    artifact_id: str
    version: str = ""


@dataclass(frozen=True)
class Developer:
    name: str = ""
    email: str = ""
    organization: str = ""


@dataclass(frozen=True)
class ParentRef:
    """The <parent> reference of a pom.xml."""

    group_id: str
    artifact_id: str
    version: str = ""


@dataclass(frozen=True)
class Project:
    """Metadata parsed from a pom.xml."""

    artifact_id: str
    group_id: str = ""
    name: str = ""
    version: str = ""
    url: str = ""
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: tuple[Dependency, ...] = ()
    dependency_management: tuple[Dependency, ...] = ()
    plugins: tuple[Plugin, ...] = ()
    plugin_management: tuple[Plugin, ...] = ()
    modules: tuple[str, ...] = ()
    parent: ParentRef | None = None
    developers: tuple[Developer, ...] = ()
    path: Path | None = None

    @property
    def directory(self) -> Path | None:
        """Directory holding this pom.xml."""
        return self.path.parent if self.path is not None else None


def _local(tag: str) -> str:
    """Strip the XML namespace from a tag ('{ns}dependency' -> 'dependency')."""
    return tag.rsplit("}", 1)[-1]


def _child(elem: ET.Element | None, name: str) -> ET.Element | None:
    if elem is None:
        return None
    for child in elem:
        if _local(child.tag) == name:
            return child
    return None


def _children(elem: ET.Element | None, name: str) -> list[ET.Element]:
    if elem is None:
        return []
    return [child for child in elem if _local(child.tag) == name]


def _text(elem: ET.Element | None, name: str) -> str:
    child = _child(elem, name)
    if child is None or not child.text:
        return ""
    return child.text.strip()


def _dependencies(container: ET.Element | None) -> tuple[Dependency, ...]:
    deps = _child(container, "dependencies")
    return tuple(
        Dependency(
            group_id=_text(d, "groupId"),
            artifact_id=_text(d, "artifactId"),
            version=_text(d, "version"),
            scope=_text(d, "scope"),
        )
        for d in _children(deps, "dependency")
    )


def _plugins(container: ET.Element | None) -> tuple[Plugin, ...]:
    plugins = _child(container, "plugins")
    return tuple(
        Plugin(
            group_id=_text(p, "groupId"),
            artifact_id=_text(p, "artifactId"),
            version=_text(p, "version"),
        )
        for p in _children(plugins, "plugin")
    )


def _properties(root: ET.Element) -> dict[str, str]:
    props: dict[str, str] = {}
    elem = _child(root, "properties")
    if elem is None:
        return props
    for prop in elem:
        if isinstance(prop.tag, str):
            props[_local(prop.tag)] = (prop.text or "").strip()
    return props


def parse_pom(path: Path) -> Project:
    """
    Parse a pom.xml file into a Project.

    Reads the coordinates, <properties>, <dependencies>, <dependencyManagement>,
    <build><plugins>, <build><pluginManagement>, <modules>, <parent> and
    <developers>. Namespaces are ignored, nothing is validated against the
    POM schema.

    Raises ManifestReadError if the file cannot be read, is not valid XML,
    or its root element is not <project>.
    """
    path = Path(path)
    if not path.is_file():
        raise ManifestReadError(path, "no such file")
    try:
        tree = ET.parse(path)
    except ET.ParseError as e:
        raise ManifestReadError(path, f"malformed XML: {e}") from e
    except OSError as e:
        raise ManifestReadError(path, str(e)) from e
    root = tree.getroot()
    if _local(root.tag) != "project":
        raise ManifestReadError(path, f"unexpected root element <{_local(root.tag)}>")

    parent_elem = _child(root, "parent")
    parent = None
    if parent_elem is not None:
        parent = ParentRef(
            group_id=_text(parent_elem, "groupId"),
            artifact_id=_text(parent_elem, "artifactId"),
            version=_text(parent_elem, "version"),
        )

    build = _child(root, "build")
    return Project(
        artifact_id=_text(root, "artifactId"),
        group_id=_text(root, "groupId") or (parent.group_id if parent else ""),
        name=_text(root, "name"),
        version=_text(root, "version"),
        url=_text(root, "url"),
        properties=_properties(root),
        dependencies=_dependencies(root),
        dependency_management=_dependencies(_child(root, "dependencyManagement")),
        plugins=_plugins(build),
        plugin_management=_plugins(_child(build, "pluginManagement")),
        modules=tuple(
            m.text.strip() for m in _children(_child(root, "modules"), "module") if m.text
        ),
        parent=parent,
        developers=tuple(
            Developer(
                name=_text(d, "name"),
                email=_text(d, "email"),
                organization=_text(d, "organization"),
            )
            for d in _children(_child(root, "developers"), "developer")
        ),
        path=path.resolve(),
    )


def read_pom(path: Path) -> Project | None:
    """Like parse_pom, but returns None instead of raising when the file cannot be used."""
    try:
        return parse_pom(path)
    except ManifestReadError:
        return None
