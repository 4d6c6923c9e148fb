# SPDX-License-Identifier: MIT
"""Tests for cprobe.generators.bindings."""

import subprocess
from unittest.mock import patch

import pytest

from cprobe.core.errors import GenerateError
from cprobe.core.state import ResolutionState
from cprobe.generators.bindings import (
    BindgenGenerator,
    Generator,
    write_placeholder,
)


def state_with_headers():
    state = ResolutionState()
    state.add_header("/usr/include/a.h")
    state.add_header("/opt/b/include/b.h")
    state.add_include_path("/opt/c/include")
    return state


class TestPlaceholder:
    def test_write_placeholder(self, tmp_path):
        path = write_placeholder(tmp_path / "out")
        assert path == tmp_path / "out" / "bindings.rs"
        assert path.read_text() == ""

    def test_generate_empty_state(self, tmp_path):
        generator = BindgenGenerator()

        with patch("subprocess.run") as mock_run:
            path = generator.generate(ResolutionState(), tmp_path)

        mock_run.assert_not_called()
        assert path.read_text() == ""


class TestBindgenGenerator:
    def test_is_generator(self):
        assert isinstance(BindgenGenerator(), Generator)
        assert BindgenGenerator().name == "bindgen"

    def test_wrapper_header(self, tmp_path):
        wrapper = BindgenGenerator().write_wrapper(state_with_headers(), tmp_path)

        assert wrapper.read_text() == (
            '#include "/usr/include/a.h"\n#include "/opt/b/include/b.h"\n'
        )

    def test_command(self, tmp_path):
        generator = BindgenGenerator("/opt/bindgen")
        wrapper = tmp_path / "cprobe_wrapper.h"
        output = tmp_path / "bindings.rs"

        cmd = generator.command(state_with_headers(), wrapper, output)

        assert cmd == [
            "/opt/bindgen",
            "--no-doc-comments",
            str(wrapper),
            "-o",
            str(output),
            "--",
            "-I/opt/c/include",
        ]

    def test_command_with_comments(self, tmp_path):
        generator = BindgenGenerator(generate_comments=True)
        cmd = generator.command(ResolutionState(), tmp_path / "w.h", tmp_path / "o.rs")
        assert "--no-doc-comments" not in cmd

    def test_generate(self, tmp_path):
        result = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        with patch("subprocess.run", return_value=result) as mock_run:
            path = BindgenGenerator().generate(state_with_headers(), tmp_path)

        assert path == tmp_path / "bindings.rs"
        assert mock_run.call_args[0][0][0] == "bindgen"
        assert (tmp_path / "cprobe_wrapper.h").exists()

    def test_generator_failure(self, tmp_path):
        result = subprocess.CompletedProcess([], 1, stdout="", stderr="fatal error")

        with patch("subprocess.run", return_value=result):
            with pytest.raises(GenerateError, match="fatal error"):
                BindgenGenerator().generate(state_with_headers(), tmp_path)

    def test_generator_missing(self, tmp_path):
        with patch("subprocess.run", side_effect=FileNotFoundError("bindgen")):
            with pytest.raises(GenerateError, match="failed to run"):
                BindgenGenerator().generate(state_with_headers(), tmp_path)
