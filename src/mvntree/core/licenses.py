"""Detect the license of a project directory from its license file."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

NOASSERTION = "NOASSERTION"

LICENSE_FILENAMES = (
    "LICENSE",
    "LICENSE.txt",
    "LICENSE.md",
    "LICENCE",
    "LICENCE.txt",
    "COPYING",
    "COPYING.txt",
)

_SPDX_TAG = re.compile(r"SPDX-License-Identifier:\s*([A-Za-z0-9.+\-]+)")
_COPYRIGHT = re.compile(r"^\s*(?:Copyright|\(c\)|©).*$", re.IGNORECASE | re.MULTILINE)

# Heading text -> SPDX identifier. Checked in order, first match wins.
_KNOWN_TEXTS = (
    ("Apache License", "Version 2.0", "Apache-2.0"),
    ("MIT License", "", "MIT"),
    ("Permission is hereby granted, free of charge", "", "MIT"),
    ("GNU LESSER GENERAL PUBLIC LICENSE", "Version 3", "LGPL-3.0-only"),
    ("GNU LESSER GENERAL PUBLIC LICENSE", "Version 2.1", "LGPL-2.1-only"),
    ("GNU GENERAL PUBLIC LICENSE", "Version 3", "GPL-3.0-only"),
    ("GNU GENERAL PUBLIC LICENSE", "Version 2", "GPL-2.0-only"),
    ("Eclipse Public License - v 2.0", "", "EPL-2.0"),
    ("Eclipse Public License - v 1.0", "", "EPL-1.0"),
    ("Mozilla Public License Version 2.0", "", "MPL-2.0"),
    ("BSD 3-Clause", "", "BSD-3-Clause"),
    ("BSD 2-Clause", "", "BSD-2-Clause"),
)


@dataclass
class LicenseInfo:
    """License found in a project directory."""

    id: str
    extracted_text: str
    comments: str = ""
    path: Path | None = None

    @property
    def declared(self) -> str:
        return self.id or NOASSERTION

    @property
    def concluded(self) -> str:
        return self.id or NOASSERTION

    @property
    def copyright(self) -> str:
        match = _COPYRIGHT.search(self.extracted_text)
        return match.group(0).strip() if match else NOASSERTION


def identify_license(text: str) -> str:
    """Return the SPDX identifier for a license text, or "" when unrecognized."""
    tag = _SPDX_TAG.search(text)
    if tag:
        return tag.group(1)
    head = text[:2000]
    for marker, version, spdx_id in _KNOWN_TEXTS:
        if marker.lower() in head.lower() and version.lower() in head.lower():
            return spdx_id
    return ""


def find_license_file(directory: Path) -> Path | None:
    for name in LICENSE_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def detect_license(directory: Path) -> LicenseInfo | None:
    """
    Detect the license declared by a project directory.

    Returns None when there is no license file or it cannot be read.
    """
    path = find_license_file(Path(directory))
    if path is None:
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"cannot read license file {path}: {e}")
        return None
    spdx_id = identify_license(text)
    comments = "" if spdx_id else f"License text found in {path.name} was not recognized."
    return LicenseInfo(id=spdx_id, extracted_text=text, comments=comments, path=path)
