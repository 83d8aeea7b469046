from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


def to_posix(path: str) -> str:
    return str(path).replace("\\", "/")


@dataclass(frozen=True)
class ValidationResult:
    level: str  # INFO | WARNING | ERROR
    code: str   # stable short identifier (e.g. DEST_MISSING)
    message: str
    relpath: Optional[str] = None


@dataclass(frozen=True)
class FileNode:
    """
    A file or directory picked for export.

    Children are listed lazily from disk unless supplied up front, so the
    same type serves real trees and in-memory ones.
    """
    path: str
    is_directory: bool = False
    content_type: Optional[str] = None
    supplied_children: Optional[Tuple["FileNode", ...]] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", to_posix(self.path))

    @property
    def name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def stem(self) -> str:
        base, _ = os.path.splitext(self.name)
        return base

    @property
    def file_type(self) -> str:
        if self.content_type:
            return self.content_type.lower()
        _, ext = os.path.splitext(self.name)
        return ext.lower().lstrip(".")

    def children(self) -> Tuple["FileNode", ...]:
        if not self.is_directory:
            return ()
        if self.supplied_children is not None:
            return self.supplied_children
        # imported here: fsnodes builds FileNode instances
        from patcher.core.fsnodes import list_children
        return list_children(self.path)


@dataclass(frozen=True)
class BuildUnit:
    name: str
    content_root: str
    source_roots: Tuple[str, ...] = ()
    compiled_output: Optional[str] = None  # unset until a compile has run
    test_source_roots: Tuple[str, ...] = ()
    descriptor_dir: Optional[str] = None  # folder holding the unit file; defaults to content_root

    def __post_init__(self) -> None:
        object.__setattr__(self, "content_root", to_posix(self.content_root).rstrip("/"))
        object.__setattr__(self, "source_roots", tuple(to_posix(s).rstrip("/") for s in self.source_roots))
        object.__setattr__(self, "test_source_roots", tuple(to_posix(s).rstrip("/") for s in self.test_source_roots))
        if self.compiled_output is not None:
            object.__setattr__(self, "compiled_output", to_posix(self.compiled_output).rstrip("/"))
        descriptor = self.descriptor_dir if self.descriptor_dir is not None else self.content_root
        object.__setattr__(self, "descriptor_dir", to_posix(descriptor).rstrip("/"))


@dataclass(frozen=True)
class ExportRequest:
    destination: str
    compile_mode: bool
    unit: BuildUnit
    selection: Tuple[FileNode, ...] = ()


@dataclass(frozen=True)
class PathPair:
    src: str
    dst: str


class PathResult:
    """
    Ordered multiset of (src, dst) pairs plus the names left out of the export.

    Append-only: one source may legitimately map to several destinations,
    and the same pair may appear twice when two passes emit it.
    """

    def __init__(self) -> None:
        self._pairs: List[PathPair] = []
        self._unsettled: List[str] = []
        self._frozen = False

    def put(self, src: str, dst: str) -> None:
        self._check_open()
        self._pairs.append(PathPair(src=to_posix(src), dst=to_posix(dst)))

    def add_unsettled(self, name: str) -> None:
        self._check_open()
        self._unsettled.append(name)

    def freeze(self) -> "PathResult":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def pairs(self) -> Tuple[PathPair, ...]:
        return tuple(self._pairs)

    @property
    def unsettled(self) -> Tuple[str, ...]:
        return tuple(self._unsettled)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[PathPair]:
        return iter(tuple(self._pairs))

    def __repr__(self) -> str:
        return f"PathResult(pairs={len(self._pairs)}, unsettled={self._unsettled!r})"

    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError("PathResult is read-only once returned")
