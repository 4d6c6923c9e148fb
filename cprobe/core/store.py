# SPDX-License-Identifier: MIT
"""Spec store: one record per package name, merged from many contributors.

Contributors are scanned once at startup. Registering the same name twice is
fine as long as both records are identical; a differing record is a fatal
conflict, so stale or inconsistent library metadata is never used silently.

With a cache directory the store also persists every record as
``<cache_dir>/<name>.json``. Separate build steps sharing that directory are
then checked against each other.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from cprobe.core.errors import SpecConflictError, SpecError
from cprobe.core.spec import Spec

logger = logging.getLogger(__name__)


@runtime_checkable
class SpecSource(Protocol):
    """Anything that can answer "given a name, return a Spec or None"."""

    def get(self, name: str) -> Spec | None: ...


class SpecStore:
    """Holds the merged spec records.

    Example:
        store = SpecStore()
        store.register("zlib", {"headers": ["zlib.h"]})
        spec = store.lookup("zlib")

    Attributes:
        cache_dir: Optional directory records are persisted to.
    """

    def __init__(self, cache_dir: Path | str | None = None) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._specs: dict[str, Spec] = {}

    def register(self, name: str, spec: Spec | Mapping[str, Any]) -> Spec:
        """Merge one record into the store.

        Args:
            name: Package name.
            spec: A parsed Spec or a raw record.

        Returns:
            The stored Spec.

        Raises:
            SpecConflictError: If a different record is already stored.
            SpecError: If the raw record is malformed.
        """
        if not name:
            raise SpecError("spec name should not be empty")
        incoming = spec if isinstance(spec, Spec) else Spec.from_dict(name, spec)

        stored = self.lookup(name)
        if stored is None:
            self._save(name, incoming)
            self._specs[name] = incoming
            logger.debug("Registered spec %s", name)
            return incoming

        if not stored.same_as(incoming):
            raise SpecConflictError(
                name, _dump(name, stored.to_dict()), _dump(name, incoming.to_dict())
            )
        return stored

    def register_all(self, specs: Mapping[str, Any]) -> None:
        """Register every record of a name -> record mapping."""
        for name, spec in specs.items():
            self.register(name, spec)

    def lookup(self, name: str) -> Spec | None:
        """Find the record for a package, or None."""
        spec = self._specs.get(name)
        if spec is None:
            spec = self._load(name)
            if spec is not None:
                self._specs[name] = spec
        return spec

    def get(self, name: str) -> Spec | None:
        return self.lookup(name)

    def names(self) -> list[str]:
        """Names of all known records, including those only in the cache."""
        names = set(self._specs)
        if self.cache_dir is not None and self.cache_dir.is_dir():
            names.update(p.stem for p in self.cache_dir.glob("*.json"))
        return sorted(names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self.names())

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def _path(self, name: str) -> Path | None:
        if self.cache_dir is None:
            return None
        return self.cache_dir / f"{name}.json"

    def _load(self, name: str) -> Spec | None:
        path = self._path(name)
        if path is None or not path.exists():
            return None
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SpecError(f"{path} should be valid json: {e}") from e
        return Spec.from_dict(name, data)

    def _save(self, name: str, spec: Spec) -> None:
        path = self._path(name)
        if path is None:
            return
        text = _dump(name, spec.to_dict(), indent=2)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n")

    def __repr__(self) -> str:
        return f"SpecStore({len(self._specs)} specs, cache_dir={self.cache_dir})"


def _dump(name: str, data: dict[str, Any], indent: int | None = None) -> str:
    try:
        return json.dumps(data, sort_keys=True, indent=indent)
    except (TypeError, ValueError) as e:
        raise SpecError(f"spec of {name} cannot be stored as json: {e}") from e
