"""Tests for root manifest conversion and submodule aggregation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mvntree.core.aggregator import (
    aggregate_submodules,
    convert_manifest,
    convert_submodule,
)
from mvntree.core.errors import SubmoduleReadError
from mvntree.core.parser import parse_pom

PARENT_POM = """<?xml version="1.0"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <groupId>com.example</groupId>
  <artifactId>parent</artifactId>
  <version>1.0.0</version>
  <properties>
    <foo.version>1.2.3</foo.version>
  </properties>
  <modules>
{modules}
  </modules>
  <dependencyManagement>
    <dependencies>
      <dependency><groupId>g</groupId><artifactId>managed</artifactId><version>5.0</version></dependency>
    </dependencies>
  </dependencyManagement>
  <dependencies>
    <dependency><groupId>g</groupId><artifactId>foo</artifactId><version>${{foo.version}}</version></dependency>
    <dependency><groupId>g</groupId><artifactId>shared</artifactId><version>2.0</version></dependency>
  </dependencies>
  <build>
    <plugins>
      <plugin><artifactId>maven-compiler-plugin</artifactId><version>3.11.0</version></plugin>
    </plugins>
    <pluginManagement>
      <plugins>
        <plugin><artifactId>maven-surefire-plugin</artifactId><version>3.1.2</version></plugin>
      </plugins>
    </pluginManagement>
  </build>
</project>
"""

CHILD_POM = """<?xml version="1.0"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <parent><groupId>com.example</groupId><artifactId>parent</artifactId><version>1.0.0</version></parent>
  <artifactId>{artifact}</artifactId>
  {version}
  <properties><own.version>9.1</own.version></properties>
  <dependencies>
    <dependency><groupId>g</groupId><artifactId>shared</artifactId><version>2.0</version></dependency>
    <dependency><groupId>g</groupId><artifactId>managed</artifactId></dependency>
    <dependency><groupId>g</groupId><artifactId>{extra}</artifactId><version>${{own.version}}</version></dependency>
  </dependencies>
  <build>
    <plugins>
      <plugin><artifactId>maven-compiler-plugin</artifactId></plugin>
      <plugin><artifactId>maven-surefire-plugin</artifactId></plugin>
      <plugin><artifactId>exec-maven-plugin</artifactId><version>3.1.0</version></plugin>
    </plugins>
  </build>
</project>
"""


def _write_parent(root: Path, modules: list[str]) -> Path:
    body = "\n".join(f"    <module>{m}</module>" for m in modules)
    pom = root / "pom.xml"
    pom.write_text(PARENT_POM.format(modules=body))
    return pom


def _write_child(root: Path, dirname: str, extra: str, version: str = "") -> None:
    d = root / dirname
    d.mkdir(parents=True, exist_ok=True)
    (d / "pom.xml").write_text(
        CHILD_POM.format(
            artifact=dirname,
            extra=extra,
            version=f"<version>{version}</version>" if version else "",
        )
    )


class TestConvertManifest:
    """Tests for convert_manifest (root pom.xml)."""

    def test_root_first_then_declarations(self, tmp_path: Path) -> None:
        project = parse_pom(_write_parent(tmp_path, []))
        modules = convert_manifest(project)
        names = [m.name for m in modules]
        assert names == [
            "parent",
            "managed",
            "foo",
            "shared",
            "maven-compiler-plugin",
            "maven-surefire-plugin",
        ]
        assert modules[0].root is True
        assert sum(m.root for m in modules) == 1

    def test_property_version_resolved(self, tmp_path: Path) -> None:
        project = parse_pom(_write_parent(tmp_path, []))
        foo = next(m for m in convert_manifest(project) if m.name == "foo")
        assert foo.version == "1.2.3"

    def test_children_are_copies(self, tmp_path: Path) -> None:
        project = parse_pom(_write_parent(tmp_path, []))
        modules = convert_manifest(project)
        root = modules[0]
        assert set(root.modules) == {m.name for m in modules[1:]}
        foo = next(m for m in modules if m.name == "foo")
        assert root.modules["foo"] == foo
        assert root.modules["foo"] is not foo
        foo.version = "changed"
        assert root.modules["foo"].version == "1.2.3"

    def test_duplicate_declaration_emitted_once(self, tmp_path: Path) -> None:
        pom = tmp_path / "pom.xml"
        pom.write_text(
            "<project><artifactId>r</artifactId>"
            "<dependencyManagement><dependencies>"
            "<dependency><artifactId>dup</artifactId><version>1</version></dependency>"
            "</dependencies></dependencyManagement>"
            "<dependencies><dependency><artifactId>dup</artifactId></dependency></dependencies>"
            "</project>"
        )
        modules = convert_manifest(parse_pom(pom))
        assert [m.name for m in modules] == ["r", "dup"]
        assert modules[1].version == "1"


class TestConvertSubmodule:
    """Tests for convert_submodule."""

    def test_only_undeclared_extras(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core"]))
        _write_child(tmp_path, "core", extra="jackson")
        modules = convert_submodule(tmp_path, "core", parent)
        names = [m.name for m in modules]
        assert names == ["core", "jackson", "exec-maven-plugin"]
        own = modules[0]
        assert set(own.modules) == {"jackson", "exec-maven-plugin"}
        assert own.root is False

    def test_parent_declared_dependency_emitted_once(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core"]))
        _write_child(tmp_path, "core", extra="jackson")
        root_modules = convert_manifest(parent)
        sub_modules = convert_submodule(tmp_path, "core", parent)
        all_names = [m.name for m in root_modules + sub_modules]
        assert all_names.count("shared") == 1
        assert all_names.count("managed") == 1
        assert all_names.count("maven-compiler-plugin") == 1
        assert all_names.count("maven-surefire-plugin") == 1

    def test_version_inherited_from_parent(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core"]))
        _write_child(tmp_path, "core", extra="jackson")
        own = convert_submodule(tmp_path, "core", parent)[0]
        assert own.version == "1.0.0"

    def test_own_version_and_property(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core"]))
        _write_child(tmp_path, "core", extra="jackson", version="${own.version}")
        modules = convert_submodule(tmp_path, "core", parent)
        assert modules[0].version == "9.1"
        assert modules[1].version == "9.1"

    def test_missing_raises(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["ghost"]))
        with pytest.raises(SubmoduleReadError) as exc_info:
            convert_submodule(tmp_path, "ghost", parent)
        assert exc_info.value.module_name == "ghost"

    def test_malformed_raises(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["bad"]))
        (tmp_path / "bad").mkdir()
        (tmp_path / "bad" / "pom.xml").write_text("<project><unclosed>")
        with pytest.raises(SubmoduleReadError):
            convert_submodule(tmp_path, "bad", parent)


class TestAggregateSubmodules:
    """Tests for aggregate_submodules."""

    def test_bad_submodule_skipped_siblings_continue(self, tmp_path: Path, caplog) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core", "missing", "web"]))
        _write_child(tmp_path, "core", extra="jackson")
        _write_child(tmp_path, "web", extra="servlet-api")
        errors: list[Exception] = []
        with caplog.at_level(logging.WARNING):
            modules = aggregate_submodules(tmp_path, parent, errors=errors)
        names = [m.name for m in modules]
        assert names == [
            "core",
            "jackson",
            "exec-maven-plugin",
            "web",
            "servlet-api",
            "exec-maven-plugin",
        ]
        assert len(errors) == 1
        assert isinstance(errors[0], SubmoduleReadError)
        assert "missing" in caplog.text

    def test_failed_submodule_only_loses_its_contribution(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core", "web"]))
        _write_child(tmp_path, "core", extra="jackson")
        _write_child(tmp_path, "web", extra="servlet-api")
        healthy = aggregate_submodules(tmp_path, parent)
        (tmp_path / "web" / "pom.xml").write_text("garbage")
        degraded = aggregate_submodules(tmp_path, parent)
        assert len(healthy) - len(degraded) == 3
        assert "web" not in [m.name for m in degraded]

    def test_nested_modules(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["services"]))
        services = tmp_path / "services"
        services.mkdir()
        (services / "pom.xml").write_text(
            "<project><artifactId>services</artifactId><version>2.0</version>"
            "<modules><module>api</module></modules></project>"
        )
        _write_child(services, "api", extra="jackson")
        modules = aggregate_submodules(tmp_path, parent)
        names = [m.name for m in modules]
        assert names[:2] == ["services", "api"]
        # "shared" is not declared by the intermediate "services" pom
        assert "shared" in names

    def test_not_recursive(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["services"]))
        services = tmp_path / "services"
        services.mkdir()
        (services / "pom.xml").write_text(
            "<project><artifactId>services</artifactId>"
            "<modules><module>api</module></modules></project>"
        )
        _write_child(services, "api", extra="jackson")
        modules = aggregate_submodules(tmp_path, parent, recursive=False)
        assert [m.name for m in modules] == ["services"]

    def test_self_reference_is_visited_once(self, tmp_path: Path) -> None:
        parent = parse_pom(_write_parent(tmp_path, ["core", "./core"]))
        _write_child(tmp_path, "core", extra="jackson")
        modules = aggregate_submodules(tmp_path, parent)
        assert [m.name for m in modules].count("core") == 1
