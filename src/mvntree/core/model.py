"""Normalized module records emitted for the SBOM document."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace

HASH_ALGO_SHA1 = "SHA1"


@dataclass
class CheckSum:
    algorithm: str
    value: str

    def to_dict(self) -> dict:
        return {"algorithm": self.algorithm, "value": self.value}


@dataclass
class Supplier:
    """Who supplies a package: a Person or an Organization (empty when unknown)."""

    type: str = ""
    name: str = ""
    email: str = ""

    def to_dict(self) -> dict:
        return {"type": self.type, "name": self.name, "email": self.email}


@dataclass
class Module:
    """One package, dependency or plugin node in the module tree."""

    name: str
    version: str
    checksum: CheckSum | None = None
    supplier: Supplier = field(default_factory=Supplier)
    license_declared: str = ""
    license_concluded: str = ""
    copyright: str = ""
    comments_license: str = ""
    package_home_page: str = ""
    package_comment: str = ""
    root: bool = False
    # Children keyed by module name. Each entry is owned by this module.
    modules: dict[str, Module] = field(default_factory=dict)

    @property
    def children(self) -> list[Module]:
        """Child modules in insertion order."""
        return list(self.modules.values())

    def copy(self, *, with_children: bool = False) -> Module:
        """
        Return an independent value copy of this module.

        Nested records (checksum, supplier) are copied too. Children are
        dropped unless with_children is True, in which case the whole subtree
        is copied.
        """
        children = copy.deepcopy(self.modules) if with_children else {}
        return replace(
            self,
            checksum=copy.copy(self.checksum),
            supplier=copy.copy(self.supplier),
            modules=children,
        )

    def attach(self, child: Module) -> Module:
        """Attach a copy of child under this module, keyed by its name. Returns the copy."""
        owned = child.copy()
        self.modules[owned.name] = owned
        return owned

    def to_dict(self) -> dict:
        """Serialize module to a JSON-friendly dict."""
        return {
            "name": self.name,
            "version": self.version,
            "checksum": self.checksum.to_dict() if self.checksum else None,
            "supplier": self.supplier.to_dict(),
            "license_declared": self.license_declared,
            "license_concluded": self.license_concluded,
            "copyright": self.copyright,
            "comments_license": self.comments_license,
            "package_home_page": self.package_home_page,
            "package_comment": self.package_comment,
            "root": self.root,
            "modules": [c.to_dict() for c in self.modules.values()],
        }
