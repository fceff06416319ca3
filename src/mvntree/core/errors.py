"""Errors raised while resolving a Maven project's module tree."""

from __future__ import annotations

from pathlib import Path


class MvnTreeError(Exception):
    """Base class for all mvntree errors."""


class ManifestReadError(MvnTreeError):
    """The root pom.xml is missing or is not valid XML. Fatal for a resolution pass."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read manifest {self.path}: {reason}")


class SubmoduleReadError(MvnTreeError):
    """A submodule's pom.xml is missing or malformed. The submodule is skipped."""

    def __init__(self, module_name: str, path: Path | str, reason: str) -> None:
        self.module_name = module_name
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read submodule {module_name!r} ({self.path}): {reason}")


class ExternalToolError(MvnTreeError):
    """The Maven invocation failed or its output could not be read back."""

    def __init__(
        self,
        command: list[str] | tuple[str, ...],
        reason: str,
        returncode: int | None = None,
    ) -> None:
        self.command = list(command)
        self.reason = reason
        self.returncode = returncode
        super().__init__(f"{' '.join(self.command)}: {reason}")
