"""Resolve ${...} placeholders against a project's <properties>."""

from __future__ import annotations

from mvntree.core.parser import Project

# ${project.xxx} refers to the enclosing project rather than to a property.
SELF_REFERENCE_ALIAS = "project"


def is_placeholder(raw: str) -> bool:
    return raw.strip().startswith("$")


def placeholder_key(raw: str) -> str:
    """'${foo.version}' -> 'foo.version'."""
    return raw.strip().rstrip("}").lstrip("${")


def resolve_property(raw: str, project: Project) -> str:
    """
    Resolve a placeholder through the property table.

    Non-placeholders come back unchanged. An undefined property resolves to ""
    since poms routinely declare properties that are injected from outside.
    """
    if not is_placeholder(raw):
        return raw
    return project.properties.get(placeholder_key(raw), "")


def resolve_name(raw: str, project: Project) -> str:
    """Resolve a module name; ${project.*} yields the parent's artifactId."""
    if not is_placeholder(raw):
        return raw
    if placeholder_key(raw).startswith(SELF_REFERENCE_ALIAS):
        if project.parent is not None and project.parent.artifact_id:
            return project.parent.artifact_id
        return project.artifact_id
    return resolve_property(raw, project)


def resolve_version(raw: str, project: Project) -> str:
    """Resolve a module version. Self-references go through the property table too."""
    return resolve_property(raw, project)
