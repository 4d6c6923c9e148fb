# SPDX-License-Identifier: MIT
"""Top-level build invocation.

    config = ResolveConfig.from_environ()
    result = build(config, manifests=["pyproject.toml"])
    print(result.output)

A build merges every contributed spec, probes each requested package and
hands the collected headers and include paths to the binding generator.
With no requested package an empty placeholder is written without running
pkg-config at all; the same placeholder is written when no headers were
collected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from cprobe.configure.config import WATCHED_ENV_VARS, ResolveConfig, env_key
from cprobe.core.state import ResolutionState
from cprobe.core.store import SpecStore
from cprobe.core.walker import DependencyWalker
from cprobe.generators.bindings import BindgenGenerator, Generator, write_placeholder
from cprobe.packages.manifest import Contribution, collect, merge
from cprobe.probe.pkgconfig import PkgConfig
from cprobe.probe.prober import StrategyProber
from cprobe.signals import BuildSignals

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a build.

    Attributes:
        requested: Package names that were probed, in order.
        state: Everything the walk collected.
        output: The generated (or placeholder) bindings file, if written.
    """

    requested: list[str] = field(default_factory=list)
    state: ResolutionState = field(default_factory=ResolutionState)
    output: Path | None = None


def requested_packages(
    contributions: Iterable[Contribution],
    store: SpecStore,
    extra: Iterable[str] = (),
) -> list[str]:
    """Merge contributions into the store and list the packages to probe."""
    names = merge(contributions, store)
    for name in extra:
        if name and name not in names:
            names.append(name)
    return names


def resolve(
    config: ResolveConfig,
    names: Iterable[str],
    store: SpecStore,
    signals: BuildSignals,
    *,
    pkg_config: PkgConfig | None = None,
) -> ResolutionState:
    """Probe packages and return the aggregated state.

    Raises:
        CprobeError: On the first failure; no partial result is returned.
    """
    prober = StrategyProber(config, store, signals, pkg_config=pkg_config)
    walker = DependencyWalker(
        store, prober, config.target_platform, dedupe=config.dedupe
    )
    for name in names:
        logger.info("Resolving %s", name)
        walker.probe(name)
    return walker.state


def build(
    config: ResolveConfig | None = None,
    manifests: Iterable[Path | str] = (),
    *,
    cache_dir: Path | str | None = None,
    signals: BuildSignals | None = None,
    generator: Generator | None = None,
    pkg_config: PkgConfig | None = None,
    generate: bool = True,
) -> BuildResult:
    """Resolve every requested package and generate bindings.

    Args:
        config: Settings (default: read from the environment).
        manifests: Manifest files to read contributions from.
        cache_dir: Shared directory to persist spec records to.
        signals: Sink for build directives (default: stdout).
        generator: Binding generator (default: bindgen per config).
        pkg_config: pkg-config client override.
        generate: Write the bindings file; False only resolves.

    Returns:
        The BuildResult.
    """
    if config is None:
        config = ResolveConfig.from_environ()
    if signals is None:
        signals = BuildSignals()
    if generator is None:
        generator = BindgenGenerator(config.bindgen)

    for var in WATCHED_ENV_VARS:
        signals.rerun_if_env_changed(var)

    store = SpecStore(cache_dir)
    contributions = collect(manifests, config.spec_paths)
    names = requested_packages(contributions, store, config.extra_packages)

    result = BuildResult(requested=names)
    if not names:
        logger.info("No packages requested")
        if generate:
            result.output = write_placeholder(config.out_dir)
        return result

    result.state = resolve(config, names, store, signals, pkg_config=pkg_config)
    if generate:
        result.output = generator.generate(result.state, config.out_dir)
    return result


def probe_library(
    name: str,
    min_version: str | None = None,
    max_version: str | None = None,
    *,
    specs: Mapping[str, Any] | SpecStore | None = None,
    config: ResolveConfig | None = None,
    signals: BuildSignals | None = None,
    pkg_config: PkgConfig | None = None,
) -> ResolutionState:
    """Probe one package and return what it contributes.

    Args:
        name: Package name.
        min_version: Minimum version required from pkg-config.
        max_version: Exclusive upper version bound.
        specs: Spec records (raw mapping or store) for the package and its
            dependencies.
        config: Settings (default: read from the environment).
        signals: Sink for build directives (default: stdout).
        pkg_config: pkg-config client override.

    Returns:
        The ResolutionState for this package alone.
    """
    if config is None:
        config = ResolveConfig.from_environ()
    if min_version:
        versions = dict(config.min_versions)
        versions[env_key(name)] = min_version
        config = replace(config, min_versions=versions)
    if max_version:
        versions = dict(config.max_versions)
        versions[env_key(name)] = max_version
        config = replace(config, max_versions=versions)

    if isinstance(specs, SpecStore):
        store = specs
    else:
        store = SpecStore()
        store.register_all(specs or {})

    return resolve(
        config, [name], store, signals or BuildSignals(), pkg_config=pkg_config
    )
