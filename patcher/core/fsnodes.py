from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Tuple

from patcher.models import FileNode, to_posix

log = logging.getLogger(__name__)


def node_for_path(path: str) -> FileNode:
    """
    Build a FileNode for an on-disk path. Paths that do not exist are
    treated as plain files; the copy step reports them, not us.
    """
    full = Path(os.path.abspath(path))
    return FileNode(path=to_posix(str(full)), is_directory=full.is_dir())


def nodes_for_paths(paths: Iterable[str]) -> List[FileNode]:
    return [node_for_path(p) for p in paths]


def list_children(path: str) -> Tuple[FileNode, ...]:
    """
    Children of a directory, sorted by name.
    Missing or unreadable directories yield no children.
    """
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        log.debug("Cannot list %s (%s); treating as empty", path, e)
        return ()

    children = []
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError:
            # broken entry; still expose it so the copy step can report it
            is_dir = False
        children.append(FileNode(path=to_posix(entry.path), is_directory=is_dir))
    return tuple(children)


def file_exists(path: str) -> bool:
    return os.path.isfile(path)
