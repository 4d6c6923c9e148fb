# SPDX-License-Identifier: MIT
"""Tests for cprobe.configure.platform."""

from unittest.mock import patch

import pytest

from cprobe.configure.platform import (
    KNOWN_OS,
    Platform,
    get_platform,
    normalize_arch,
    normalize_os,
)


class TestPlatformMatches:
    @pytest.mark.parametrize("os_name", KNOWN_OS)
    def test_exact_match(self, os_name):
        assert Platform(os_name).matches(os_name)

    def test_other_os_does_not_match(self):
        assert not Platform("linux").matches("macos")
        assert not Platform("macos").matches("ios")

    @pytest.mark.parametrize(
        "os_name",
        ["android", "dragonfly", "freebsd", "ios", "linux", "macos", "netbsd", "openbsd"],
    )
    def test_unix_matches_posix(self, os_name):
        assert Platform(os_name).matches("unix")

    def test_unix_does_not_match_windows(self):
        assert not Platform("windows").matches("unix")

    def test_unknown_identifier(self):
        assert not Platform("linux").matches("plan9")
        assert not Platform("plan9").matches("plan9")

    @pytest.mark.parametrize("os_name", ["sunos5", "aix", "haiku"])
    def test_unix_matches_unlisted_posix(self, os_name):
        assert Platform(os_name).is_unix
        assert Platform(os_name).matches("unix")

    def test_empty_os_is_not_unix(self):
        assert not Platform("").matches("unix")

    def test_properties(self):
        assert Platform("windows").is_windows
        assert Platform("macos").is_macos
        assert Platform("linux").is_linux
        assert str(Platform("linux", "arm64")) == "linux/arm64"
        assert str(Platform("linux")) == "linux"


class TestNormalize:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("win32", "windows"),
            ("cygwin", "windows"),
            ("darwin", "macos"),
            ("Darwin", "macos"),
            ("linux", "linux"),
            ("linux2", "linux"),
            ("freebsd14", "freebsd"),
            ("macos", "macos"),
            ("haiku", "haiku"),
        ],
    )
    def test_normalize_os(self, name, expected):
        assert normalize_os(name) == expected

    def test_normalize_arch(self):
        assert normalize_arch("AMD64") == "x86_64"
        assert normalize_arch("aarch64") == "arm64"
        assert normalize_arch("riscv64") == "riscv64"

    def test_get_platform(self):
        with (
            patch("cprobe.configure.platform.sys.platform", "darwin"),
            patch("cprobe.configure.platform._platform.machine", return_value="arm64"),
        ):
            assert get_platform() == Platform("macos", "arm64")
