"""Build normalized Module records from pom.xml identifiers."""

from __future__ import annotations

import hashlib
import posixpath
from pathlib import Path

from mvntree.core.licenses import detect_license
from mvntree.core.model import HASH_ALGO_SHA1, CheckSum, Module, Supplier
from mvntree.core.parser import Developer, Project
from mvntree.core.properties import is_placeholder, resolve_name, resolve_version

NAME_SEPARATOR = "-"


def sanitize_name(raw: str) -> str:
    """'org/apache commons' -> 'apache-commons'."""
    return posixpath.basename(raw.strip()).replace(" ", NAME_SEPARATOR)


def read_checksum(name: str) -> str:
    """SHA1 hex digest keyed by the module name."""
    return hashlib.sha1(name.encode("utf-8")).hexdigest()


def supplier_from_developers(developers: tuple[Developer, ...] | list[Developer]) -> Supplier:
    """Supplier from the first declared developer; empty when none is declared."""
    supplier = Supplier()
    if not developers:
        return supplier
    first = developers[0]
    if first.name:
        supplier.type = "Person"
        supplier.name = first.name
        supplier.email = first.email
    if first.organization:
        supplier.type = "Organization"
        if not supplier.name:
            supplier.name = first.organization
    return supplier


def create_module(name: str, version: str, project: Project) -> Module:
    """
    Create a Module for a dependency or plugin declared in project.

    The version may be a ${...} placeholder; an unresolved one yields an
    empty version rather than an error.
    """
    mod_name = sanitize_name(name)
    mod_version = resolve_version(version, project) if is_placeholder(version) else version
    return Module(
        name=mod_name,
        version=mod_version,
        checksum=CheckSum(algorithm=HASH_ALGO_SHA1, value=read_checksum(mod_name)),
    )


def project_module_name(project: Project) -> str:
    """Display name of a project: <name> (placeholders resolved) or else <artifactId>."""
    name = resolve_name(project.name, project) if project.name else ""
    return (name or project.artifact_id).replace(" ", NAME_SEPARATOR)


def convert_project_to_module(project: Project, license_dir: Path | None = None) -> Module:
    """
    Create the root Module for a parsed pom.xml.

    A pom without <version> takes its <parent> version. Supplier info comes
    from <developers>, the home page from <url>, and license fields from
    the license file found in license_dir (the project's directory by
    default).
    """
    name = project_module_name(project)
    declared = project.version or (project.parent.version if project.parent is not None else "")
    version = resolve_version(declared, project)
    mod = Module(
        name=name,
        version=version,
        checksum=CheckSum(algorithm=HASH_ALGO_SHA1, value=read_checksum(name)),
        supplier=supplier_from_developers(project.developers),
        package_home_page=project.url,
        root=True,
    )

    directory = license_dir if license_dir is not None else project.directory
    info = detect_license(directory) if directory is not None else None
    if info is not None:
        mod.license_declared = info.declared
        mod.license_concluded = info.concluded
        mod.copyright = info.copyright
        mod.comments_license = info.comments
    return mod
