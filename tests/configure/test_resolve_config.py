# SPDX-License-Identifier: MIT
"""Tests for cprobe.configure.config."""

import os
from pathlib import Path
from unittest.mock import patch

from cprobe.configure.config import ResolveConfig, env_key
from cprobe.configure.platform import Platform

LINUX = Platform("linux", "x86_64")
FREEBSD = Platform("freebsd", "x86_64")


def from_env(environ, host=LINUX, **overrides):
    with patch("cprobe.configure.config.get_platform", return_value=host):
        return ResolveConfig.from_environ(environ, **overrides)


class TestEnvKey:
    def test_env_key(self):
        assert env_key("gtk+-3.0") == "GTK__3_0"
        assert env_key("zlib") == "ZLIB"


class TestFromEnviron:
    def test_defaults(self):
        config = from_env({})

        assert config.pkg_config == "pkg-config"
        assert not config.allow_cross
        assert config.extra_packages == ()
        assert config.spec_paths == ()
        assert config.target == LINUX
        assert not config.is_cross
        assert config.out_dir == Path("build")
        assert config.bindgen == "bindgen"
        assert config.search_path is None

    def test_pkg_config_override(self):
        assert from_env({"PKG_CONFIG": "pkgconf"}).pkg_config == "pkgconf"

    def test_allow_cross(self):
        assert from_env({"PKG_CONFIG_ALLOW_CROSS": "1"}).allow_cross
        assert not from_env({"PKG_CONFIG_ALLOW_CROSS": "0"}).allow_cross

    def test_freebsd_allows_cross_by_default(self):
        assert from_env({}, host=FREEBSD).allow_cross
        assert not from_env({"PKG_CONFIG_ALLOW_CROSS": "0"}, host=FREEBSD).allow_cross

    def test_min_versions(self):
        config = from_env({"CPROBE_MIN_VERSION_GTK__3_0": "3.22", "CPROBE_MIN_VERSION_Z": ""})

        assert config.min_version("gtk+-3.0") == "3.22"
        assert config.min_version("z") is None
        assert config.min_version("other") is None

    def test_extra_packages(self):
        config = from_env({"CPROBE_PKGS": "zlib, libpng  gtk+-3.0"})
        assert config.extra_packages == ("zlib", "libpng", "gtk+-3.0")

    def test_spec_paths(self):
        value = os.pathsep.join(["/a/specs", "/b/specs"])
        config = from_env({"CPROBE_SPEC_PATH": value})
        assert config.spec_paths == (Path("/a/specs"), Path("/b/specs"))

    def test_target_os(self):
        config = from_env({"CPROBE_TARGET_OS": "windows"})

        assert config.target == Platform("windows", "x86_64")
        assert config.host == LINUX
        assert config.is_cross

    def test_out_dir(self):
        assert from_env({"OUT_DIR": "/tmp/out"}).out_dir == Path("/tmp/out")
        config = from_env({"OUT_DIR": "/tmp/out", "CPROBE_OUT_DIR": "/tmp/mine"})
        assert config.out_dir == Path("/tmp/mine")

    def test_path_and_bindgen(self):
        config = from_env({"PATH": "/usr/bin", "CPROBE_BINDGEN": "/opt/bindgen"})
        assert config.search_path == "/usr/bin"
        assert config.bindgen == "/opt/bindgen"

    def test_overrides(self):
        config = from_env({"PKG_CONFIG": "pkgconf"}, dedupe=True, pkg_config="other")
        assert config.dedupe
        assert config.pkg_config == "other"


class TestResolveConfig:
    def test_target_defaults_to_host(self):
        config = ResolveConfig(host=LINUX)
        assert config.target == LINUX
        assert config.target_platform == LINUX
