"""
Fragment stores.

A fragment is the CSS produced by one compile invocation, identified by the
caller's invocation key. Writing a fragment replaces its previous content
wholesale. Stores also own the two bundling artifacts: the transient
aggregate document (`@import` lines) and the final bundle.

Filesystem layout (FileFragmentStore):

    {root}/css/{fragment_id}.css    one file per fragment
    {root}/css/_csm_defs.css        reserved variable-definitions fragment
    {root}/bundle.tmp.css           aggregate document (transient)
    {root}/bundle.css               final bundle
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .errors import (
    BundleWriteError,
    CannotCreateStoreError,
    FragmentReadError,
    FragmentWriteError,
    ImportResolutionError,
    InvalidFragmentIdError,
)

logger = logging.getLogger(__name__)

VARIABLES_FRAGMENT_ID = "_csm_defs"

_FRAGMENT_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class FragmentInfo:
    """A stored fragment as seen by the bundler."""

    fragment_id: str
    location: str  # import target written into the aggregate document
    modified_at: datetime


def validate_fragment_id(fragment_id: str) -> str:
    """Ensure a fragment id is a plain file-safe name."""
    if not _FRAGMENT_ID_RE.fullmatch(fragment_id):
        raise InvalidFragmentIdError(
            f"invalid fragment id {fragment_id!r}: expected letters, digits, `_` or `-`",
            fragment_id,
        )
    return fragment_id


class FragmentStore(ABC):
    """Persistent home of fragments, the aggregate document and the bundle."""

    def write(self, fragment_id: str, css: str) -> None:
        """Replace fragment `fragment_id` with `css`, creating the store if needed."""
        validate_fragment_id(fragment_id)
        if fragment_id == VARIABLES_FRAGMENT_ID:
            raise InvalidFragmentIdError(
                f"fragment id {fragment_id!r} is reserved for variable definitions",
                fragment_id,
            )
        self.ensure()
        self._write_fragment(fragment_id, css)
        logger.debug("Wrote fragment %s (%d bytes)", fragment_id, len(css))

    def write_variable_block(self, css: str) -> None:
        """Replace the reserved variable-definitions fragment."""
        self.ensure()
        self._write_fragment(VARIABLES_FRAGMENT_ID, css)
        logger.debug("Wrote variable block (%d bytes)", len(css))

    @abstractmethod
    def ensure(self) -> None:
        """Create the backing location if absent."""

    @abstractmethod
    def _write_fragment(self, fragment_id: str, css: str) -> None: ...

    @abstractmethod
    def read(self, fragment_id: str) -> str:
        """Return a fragment's CSS text."""

    @abstractmethod
    def list_fragments(self) -> list[FragmentInfo]:
        """All current fragments, in no particular order."""

    @abstractmethod
    def resolve_import(self, location: str) -> str:
        """Return the CSS text an aggregate `@import` points at."""

    @abstractmethod
    def write_aggregate(self, text: str) -> str:
        """Store the aggregate document and return its location."""

    @abstractmethod
    def read_aggregate(self, location: str) -> str: ...

    @abstractmethod
    def discard_aggregate(self, location: str) -> None: ...

    @abstractmethod
    def write_bundle(self, css: str) -> None:
        """Replace the bundle atomically."""

    @abstractmethod
    def read_bundle(self) -> str | None: ...


class FileFragmentStore(FragmentStore):
    """Fragment store backed by a directory on disk."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.css_dir = self.root / "css"
        self.aggregate_path = self.root / "bundle.tmp.css"
        self.bundle_path = self.root / "bundle.css"

    def fragment_path(self, fragment_id: str) -> Path:
        return self.css_dir / f"{fragment_id}.css"

    def ensure(self) -> None:
        try:
            self.css_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CannotCreateStoreError(f"failed to create {self.css_dir}: {e}") from e

    def _write_fragment(self, fragment_id: str, css: str) -> None:
        path = self.fragment_path(fragment_id)
        try:
            path.write_text(css, encoding="utf-8")
        except OSError as e:
            raise FragmentWriteError(f"failed to write {path}: {e}", fragment_id) from e

    def read(self, fragment_id: str) -> str:
        path = self.fragment_path(validate_fragment_id(fragment_id))
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FragmentReadError(f"failed to read {path}: {e}", fragment_id) from e

    def list_fragments(self) -> list[FragmentInfo]:
        if not self.css_dir.is_dir():
            return []

        fragments = []
        try:
            for path in self.css_dir.glob("*.css"):
                modified = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
                fragments.append(
                    FragmentInfo(
                        fragment_id=path.stem,
                        location=path.resolve().as_posix(),
                        modified_at=modified,
                    )
                )
        except OSError as e:
            raise FragmentReadError(f"failed to list fragments in {self.css_dir}: {e}") from e
        return fragments

    def resolve_import(self, location: str) -> str:
        path = Path(location)
        if not path.exists():
            raise ImportResolutionError(f"cannot resolve @import {location!r}: no such fragment")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FragmentReadError(f"failed to read {path}: {e}", path.stem) from e

    def write_aggregate(self, text: str) -> str:
        self.ensure()
        try:
            self.aggregate_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise BundleWriteError(f"failed to write {self.aggregate_path}: {e}") from e
        return self.aggregate_path.resolve().as_posix()

    def read_aggregate(self, location: str) -> str:
        try:
            return Path(location).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ImportResolutionError(f"failed to read aggregate {location}: {e}") from e

    def discard_aggregate(self, location: str) -> None:
        Path(location).unlink(missing_ok=True)

    def write_bundle(self, css: str) -> None:
        """Write to a temp file next to the bundle, then rename over it."""
        self.ensure()
        fd, temp_name = tempfile.mkstemp(dir=self.root, prefix=".bundle-", suffix=".css")
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(css)
            temp_path.replace(self.bundle_path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise BundleWriteError(f"failed to write {self.bundle_path}: {e}") from e

    def read_bundle(self) -> str | None:
        if not self.bundle_path.exists():
            return None
        return self.bundle_path.read_text(encoding="utf-8")


class MemoryFragmentStore(FragmentStore):
    """In-memory fragment store for tests and dry runs."""

    AGGREGATE_LOCATION = "memory:bundle.tmp.css"

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(UTC))
        self.fragments: dict[str, tuple[str, datetime]] = {}
        self.aggregate: str | None = None
        self.bundle: str | None = None
        self.bundle_writes = 0

    @staticmethod
    def location(fragment_id: str) -> str:
        return f"memory:{fragment_id}.css"

    def ensure(self) -> None:
        pass

    def _write_fragment(self, fragment_id: str, css: str) -> None:
        self.fragments[fragment_id] = (css, self.clock())

    def set_modified(self, fragment_id: str, modified_at: datetime) -> None:
        css, _ = self.fragments[fragment_id]
        self.fragments[fragment_id] = (css, modified_at)

    def read(self, fragment_id: str) -> str:
        try:
            return self.fragments[fragment_id][0]
        except KeyError as e:
            raise FragmentReadError(f"no fragment {fragment_id!r}", fragment_id) from e

    def list_fragments(self) -> list[FragmentInfo]:
        return [
            FragmentInfo(fragment_id=fid, location=self.location(fid), modified_at=modified)
            for fid, (_, modified) in self.fragments.items()
        ]

    def resolve_import(self, location: str) -> str:
        prefix, _, name = location.partition(":")
        fragment_id = name.removesuffix(".css")
        if prefix != "memory" or fragment_id not in self.fragments:
            raise ImportResolutionError(f"cannot resolve @import {location!r}: no such fragment")
        return self.fragments[fragment_id][0]

    def write_aggregate(self, text: str) -> str:
        self.aggregate = text
        return self.AGGREGATE_LOCATION

    def read_aggregate(self, location: str) -> str:
        if location != self.AGGREGATE_LOCATION or self.aggregate is None:
            raise ImportResolutionError(f"no aggregate document at {location!r}")
        return self.aggregate

    def discard_aggregate(self, location: str) -> None:
        self.aggregate = None

    def write_bundle(self, css: str) -> None:
        self.bundle = css
        self.bundle_writes += 1

    def read_bundle(self) -> str | None:
        return self.bundle
