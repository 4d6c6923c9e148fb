# SPDX-License-Identifier: MIT
"""Tests for cprobe CLI."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from cprobe.cli import find_manifest, main, setup_logging

MANIFEST = """\
[tool.cprobe]
build = ["foo"]

[tool.cprobe.spec.foo]
headers = ["foo.h"]
exe = ["foo-config"]
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the caller's environment and working directory out of the CLI."""
    for var in (
        "CPROBE_PKGS",
        "CPROBE_SPEC_PATH",
        "CPROBE_TARGET_OS",
        "CPROBE_OUT_DIR",
        "OUT_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


class TestFindManifest:
    """Tests for find_manifest function."""

    def test_find_existing_manifest(self, tmp_path: Path) -> None:
        manifest = tmp_path / "pyproject.toml"
        manifest.write_text("")

        assert find_manifest("pyproject.toml", tmp_path) == manifest

    def test_manifest_not_found(self, tmp_path: Path) -> None:
        assert find_manifest("pyproject.toml", tmp_path) is None

    def test_find_manifest_ignores_directories(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").mkdir()

        assert find_manifest("pyproject.toml", tmp_path) is None


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_normal(self) -> None:
        setup_logging(verbose=False, debug=False)

    def test_setup_logging_verbose(self) -> None:
        setup_logging(verbose=True, debug=False)

    def test_setup_logging_debug(self) -> None:
        setup_logging(verbose=False, debug=True)


class TestCLICommands:
    """Tests for CLI commands."""

    def test_specs(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        manifest = tmp_path / "pyproject.toml"
        manifest.write_text(MANIFEST)

        assert main(["specs", str(manifest), "--pkg", "z"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["build"] == ["foo", "z"]
        assert data["spec"] == {"foo": {"headers": ["foo.h"], "exe": ["foo-config"]}}

    def test_specs_uses_pyproject_in_cwd(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (tmp_path / "pyproject.toml").write_text(MANIFEST)

        assert main(["specs"]) == 0

        assert json.loads(capsys.readouterr().out)["build"] == ["foo"]

    def test_specs_includes_cache(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cache = tmp_path / "cache"
        cache.mkdir()
        (cache / "z.json").write_text('{"headers": ["zlib.h"]}')
        manifest = tmp_path / "pyproject.toml"
        manifest.write_text(MANIFEST)

        assert main(["specs", "--cache-dir", str(cache), str(manifest)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert sorted(data["spec"]) == ["foo", "z"]
        assert data["spec"]["z"] == {"headers": ["zlib.h"]}

    def test_specs_conflict(self, tmp_path: Path) -> None:
        manifest = tmp_path / "pyproject.toml"
        manifest.write_text(MANIFEST)
        spec_dir = tmp_path / "specs"
        spec_dir.mkdir()
        (spec_dir / "foo.toml").write_text('headers = ["other.h"]\n')

        assert main(["specs", "--spec-dir", str(spec_dir), str(manifest)]) == 1

    def test_flags_nothing_requested(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        manifest = tmp_path / "cprobe.toml"
        manifest.write_text("build = []\n")

        assert main(["flags", "--json", str(manifest)]) == 0

        out = capsys.readouterr().out
        data = json.loads(out)
        assert data["requested"] == []
        assert data["headers"] == []
        assert data["link_libs"] == []

    def test_resolve_nothing_requested(self, tmp_path: Path) -> None:
        manifest = tmp_path / "cprobe.toml"
        manifest.write_text("build = []\n")
        out_dir = tmp_path / "out"

        assert main(["resolve", "-o", str(out_dir), str(manifest)]) == 0
        assert (out_dir / "bindings.rs").read_text() == ""

    def test_resolve_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PKG_CONFIG", str(tmp_path / "no-such-pkg-config"))
        manifest = tmp_path / "pyproject.toml"
        manifest.write_text(MANIFEST)
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))

        assert main(["resolve", "-o", str(tmp_path / "out"), str(manifest)]) == 1
        assert not (tmp_path / "out" / "bindings.rs").exists()

    def test_cli_help(self) -> None:
        result = subprocess.run(
            [sys.executable, "-m", "cprobe", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "resolve" in result.stdout
        assert "flags" in result.stdout

    def test_cli_version(self) -> None:
        result = subprocess.run(
            [sys.executable, "-m", "cprobe", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "cprobe" in result.stdout
