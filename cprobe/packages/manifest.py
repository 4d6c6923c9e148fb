# SPDX-License-Identifier: MIT
"""Spec sources: manifests contributed by participating projects.

A manifest is a TOML file. In a ``pyproject.toml`` the data lives under
``[tool.cprobe]``; any other TOML file is read from its top level::

    [tool.cprobe]
    build = ["foo"]

    [tool.cprobe.spec.foo]
    headers = ["foo.h"]
    exe = ["foo-config"]
    libs = { core = ["libfoo.so", "libfoo.a"] }

A spec directory holds one record per file, named after the package:
``<dir>/foo.toml`` or ``<dir>/foo.json``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Try to import tomllib (Python 3.11+) or tomli as fallback
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from cprobe.core.errors import SpecError
from cprobe.core.store import SpecStore

logger = logging.getLogger(__name__)

TOOL_SECTION = "cprobe"
SPEC_SUFFIXES = (".toml", ".json")


@dataclass
class Contribution:
    """Specs and build requests from one participant.

    Attributes:
        source: Where the contribution came from (usually a file path).
        specs: Raw spec records keyed by package name.
        build: Package names this participant wants built.
    """

    source: str
    specs: dict[str, Any] = field(default_factory=dict)
    build: list[str] = field(default_factory=list)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SpecError(f"{path} should be valid toml: {e}") from e


def parse_contribution(source: str, data: Any) -> Contribution:
    """Build a Contribution from an already loaded table.

    Raises:
        SpecError: If ``spec`` is not a table or ``build`` is not a list
            of strings.
    """
    if not isinstance(data, dict):
        raise SpecError(f"{source}: cprobe section should be a table")

    specs = data.get("spec", {})
    if not isinstance(specs, dict):
        raise SpecError(f"{source}: `spec` should be a table of spec records")

    build = data.get("build", [])
    if not isinstance(build, list) or not all(isinstance(p, str) for p in build):
        raise SpecError(f"{source}: `build` should be list of strings")

    return Contribution(source=source, specs=dict(specs), build=list(build))


def load_manifest(path: Path | str) -> Contribution:
    """Load a manifest file.

    Args:
        path: Path to a pyproject.toml or a standalone TOML manifest.

    Returns:
        The Contribution it declares (empty if a pyproject.toml has no
        ``[tool.cprobe]`` section).
    """
    path = Path(path)
    data = _load_toml(path)
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get(TOOL_SECTION, {})
    logger.debug("Loaded manifest %s", path)
    return parse_contribution(str(path), data)


def load_spec_file(path: Path) -> Any:
    """Load a single spec record from a .toml or .json file."""
    if path.suffix == ".json":
        try:
            with open(path) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise SpecError(f"{path} should be valid json: {e}") from e
    return _load_toml(path)


def scan_spec_dir(directory: Path | str) -> Contribution:
    """Collect the spec records of a spec directory.

    Files other than .toml/.json are ignored. A missing directory
    contributes nothing.
    """
    directory = Path(directory)
    contribution = Contribution(source=str(directory))
    if not directory.is_dir():
        logger.debug("Spec directory %s does not exist", directory)
        return contribution

    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix in SPEC_SUFFIXES:
            if path.stem in contribution.specs:
                raise SpecError(f"{directory}: more than one spec file for {path.stem}")
            contribution.specs[path.stem] = load_spec_file(path)
    return contribution


def collect(
    manifests: Iterable[Path | str] = (),
    spec_dirs: Iterable[Path | str] = (),
) -> list[Contribution]:
    """Load every manifest and spec directory, in order."""
    contributions = [load_manifest(m) for m in manifests]
    contributions.extend(scan_spec_dir(d) for d in spec_dirs)
    return contributions


def merge(contributions: Iterable[Contribution], store: SpecStore) -> list[str]:
    """Register all contributed specs and gather the requested packages.

    Args:
        contributions: Contributions to merge.
        store: Store receiving the spec records.

    Returns:
        Requested package names, first occurrence order, without
        duplicates or empty names.

    Raises:
        SpecConflictError: If two contributions disagree about a package.
    """
    requested: dict[str, None] = {}
    for contribution in contributions:
        logger.debug(
            "Merging %d specs from %s", len(contribution.specs), contribution.source
        )
        store.register_all(contribution.specs)
        for name in contribution.build:
            if name:
                requested.setdefault(name)
    return list(requested)
