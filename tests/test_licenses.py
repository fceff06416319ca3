"""Tests for license-file detection."""

from pathlib import Path

from mvntree.core.licenses import (
    NOASSERTION,
    LicenseInfo,
    detect_license,
    find_license_file,
    identify_license,
)


class TestIdentifyLicense:
    """Tests for identify_license."""

    def test_spdx_tag(self) -> None:
        assert identify_license("// SPDX-License-Identifier: EPL-2.0\n") == "EPL-2.0"

    def test_apache(self) -> None:
        text = "                                 Apache License\n                           Version 2.0, January 2004\n"
        assert identify_license(text) == "Apache-2.0"

    def test_lgpl_before_gpl(self) -> None:
        text = "GNU LESSER GENERAL PUBLIC LICENSE\nVersion 3, 29 June 2007\n"
        assert identify_license(text) == "LGPL-3.0-only"

    def test_gpl2(self) -> None:
        assert identify_license("GNU GENERAL PUBLIC LICENSE\nVersion 2, June 1991") == "GPL-2.0-only"

    def test_unknown(self) -> None:
        assert identify_license("All rights reserved.") == ""


class TestDetectLicense:
    """Tests for detect_license."""

    def test_no_file(self, tmp_path: Path) -> None:
        assert find_license_file(tmp_path) is None
        assert detect_license(tmp_path) is None

    def test_recognized(self, tmp_path: Path) -> None:
        (tmp_path / "LICENSE.txt").write_text("MIT License\nCopyright 2020 Someone\n")
        info = detect_license(tmp_path)
        assert info is not None
        assert info.id == "MIT"
        assert info.comments == ""
        assert info.copyright == "Copyright 2020 Someone"
        assert info.path == tmp_path / "LICENSE.txt"

    def test_unrecognized(self, tmp_path: Path) -> None:
        (tmp_path / "COPYING").write_text("Custom terms.\n")
        info = detect_license(tmp_path)
        assert info is not None
        assert info.declared == NOASSERTION
        assert info.concluded == NOASSERTION
        assert info.copyright == NOASSERTION
        assert "COPYING" in info.comments


class TestLicenseInfo:
    def test_declared_uses_id(self) -> None:
        info = LicenseInfo(id="MIT", extracted_text="")
        assert info.declared == "MIT"
