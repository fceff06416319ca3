"""Parse the output of `mvn dependency:list` and reconcile it with the pom.xml."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from mvntree.core.factory import create_module
from mvntree.core.model import Module
from mvntree.core.parser import Project

logger = logging.getLogger(__name__)

# group:artifact:type:version[:scope][ -- module ...]; no field may contain spaces,
# which rules out the "Finished at: ..." summary that survives the grep filter.
_COORDINATE = re.compile(r"^[^\s:]+:[^\s:]+:[^\s:]+:[^\s:]+")


def parse_dependency_list(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    """Yield (artifactId, version) for every well-formed line of a dependency listing."""
    for line in lines:
        entry = line.strip()
        if not entry:
            continue
        if not _COORDINATE.match(entry):
            logger.debug(f"skipping dependency list line {entry!r}")
            continue
        fields = entry.split(":")
        yield fields[1], fields[3].split()[0]


def reconcile_dependency_list(
    lines: Iterable[str],
    project: Project,
    known: Iterable[str] = (),
) -> list[Module]:
    """
    Modules for listed artifacts the pom.xml does not declare directly.

    An artifact is left out when it appears among the project's
    dependencies or dependencyManagement entries, or in known (names
    already emitted for this manifest). Each artifact is emitted once.
    """
    declared = {d.artifact_id for d in project.dependencies}
    declared |= {d.artifact_id for d in project.dependency_management}
    seen = set(known)

    modules: list[Module] = []
    for artifact_id, version in parse_dependency_list(lines):
        if artifact_id in declared:
            continue
        mod = create_module(artifact_id, version, project)
        if mod.name in seen:
            continue
        seen.add(mod.name)
        modules.append(mod)
    logger.info(f"dependency list added {len(modules)} undeclared module(s)")
    return modules
