# SPDX-License-Identifier: MIT
"""Command-line interface for cprobe."""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from cprobe.configure.config import ResolveConfig
from cprobe.configure.platform import Platform, normalize_os
from cprobe.core.errors import CprobeError
from cprobe.core.store import SpecStore
from cprobe.packages.manifest import collect

# Set up logging
logger = logging.getLogger("cprobe")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def find_manifest(name: str = "pyproject.toml", search_dir: Path | None = None) -> Path | None:
    """Find a manifest by name.

    Args:
        name: Manifest file name.
        search_dir: Directory to search in (default: current dir)

    Returns:
        Path to the manifest if found, None otherwise.
    """
    if search_dir is None:
        search_dir = Path.cwd()

    path = search_dir / name
    if path.exists() and path.is_file():
        return path

    return None


def manifests_from_args(args: argparse.Namespace) -> list[Path]:
    """Manifests named on the command line, or ./pyproject.toml if present."""
    manifests = [Path(m) for m in getattr(args, "manifests", None) or []]
    if not manifests:
        found = find_manifest()
        if found is not None:
            manifests.append(found)
    return manifests


def config_from_args(args: argparse.Namespace) -> ResolveConfig:
    """Environment settings, overridden by command-line options."""
    config = ResolveConfig.from_environ()
    overrides: dict[str, object] = {}

    if getattr(args, "out_dir", None):
        overrides["out_dir"] = Path(args.out_dir)
    if getattr(args, "pkg", None):
        overrides["extra_packages"] = (*config.extra_packages, *args.pkg)
    if getattr(args, "spec_dir", None):
        overrides["spec_paths"] = (*config.spec_paths, *map(Path, args.spec_dir))
    if getattr(args, "target_os", None):
        overrides["target"] = Platform(
            os=normalize_os(args.target_os), arch=config.host.arch
        )
    if getattr(args, "dedupe", False):
        overrides["dedupe"] = True

    if overrides:
        config = replace(config, **overrides)  # type: ignore[arg-type]
    return config


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve requested packages and generate bindings."""
    from cprobe.build import build

    setup_logging(args.verbose, args.debug)

    try:
        config = config_from_args(args)
        result = build(
            config,
            manifests_from_args(args),
            cache_dir=getattr(args, "cache_dir", None),
        )
    except CprobeError as e:
        logger.error("%s", e)
        return 1

    if result.output is not None:
        logger.info("Generated %s", result.output)
    return 0


def cmd_flags(args: argparse.Namespace) -> int:
    """Print compiler/linker inputs without generating bindings."""
    from cprobe.build import build
    from cprobe.signals import BuildSignals

    setup_logging(args.verbose, args.debug)

    signals = BuildSignals(stream=io.StringIO())
    try:
        config = config_from_args(args)
        result = build(
            config,
            manifests_from_args(args),
            cache_dir=getattr(args, "cache_dir", None),
            signals=signals,
            generate=False,
        )
    except CprobeError as e:
        logger.error("%s", e)
        return 1

    state = result.state
    if args.json:
        data = state.to_dict()
        data["requested"] = result.requested
        data["link_libs"] = signals.link_libs
        print(json.dumps(data, indent=2))
    else:
        libs = [f"-l{lib}" for lib in signals.link_libs if "=" not in lib]
        print(" ".join(state.compile_flags() + state.link_flags() + libs))
    return 0


def cmd_specs(args: argparse.Namespace) -> int:
    """Print the merged spec records."""
    from cprobe.build import requested_packages

    setup_logging(args.verbose, args.debug)

    try:
        config = config_from_args(args)
        store = SpecStore(getattr(args, "cache_dir", None))
        contributions = collect(manifests_from_args(args), config.spec_paths)
        requested = requested_packages(contributions, store, config.extra_packages)
        specs = {}
        for name in store.names():
            spec = store.lookup(name)
            if spec is not None:
                specs[name] = spec.to_dict()
    except CprobeError as e:
        logger.error("%s", e)
        return 1

    print(json.dumps({"build": requested, "spec": specs}, indent=2))
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "--spec-dir",
        action="append",
        metavar="DIR",
        help="Directory of <name>.toml/<name>.json spec files (repeatable)",
    )
    parser.add_argument(
        "--pkg",
        action="append",
        metavar="NAME",
        help="Extra package to build (repeatable)",
    )
    parser.add_argument(
        "--cache-dir",
        metavar="DIR",
        help="Shared directory that spec records are persisted to and checked against",
    )
    parser.add_argument(
        "manifests",
        nargs="*",
        help="Manifest files (default: ./pyproject.toml if present)",
    )


def add_resolve_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments for resolving commands."""
    parser.add_argument(
        "-o", "--out-dir", help="Output directory (default: $OUT_DIR or build)"
    )
    parser.add_argument("--target-os", metavar="OS", help="Target operating system")
    parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Probe each package at most once per mode",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the cprobe CLI."""
    parser = argparse.ArgumentParser(
        prog="cprobe",
        description="Locate native libraries and generate bindings for them.",
        epilog="Run 'cprobe <command> --help' for command-specific help.",
    )
    from cprobe import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # cprobe resolve
    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve packages and generate bindings"
    )
    add_common_args(resolve_parser)
    add_resolve_args(resolve_parser)
    resolve_parser.set_defaults(func=cmd_resolve)

    # cprobe flags
    flags_parser = subparsers.add_parser(
        "flags", help="Print compile and link flags of the requested packages"
    )
    add_common_args(flags_parser)
    add_resolve_args(flags_parser)
    flags_parser.add_argument("--json", action="store_true", help="JSON output")
    flags_parser.set_defaults(func=cmd_flags)

    # cprobe specs
    specs_parser = subparsers.add_parser("specs", help="Show merged spec records")
    add_common_args(specs_parser)
    specs_parser.set_defaults(func=cmd_specs)

    args = parser.parse_args(argv)

    # Default command: resolve with default settings
    if args.command is None:
        args = resolve_parser.parse_args([])
        args.func = cmd_resolve

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
