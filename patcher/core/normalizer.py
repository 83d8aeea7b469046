from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Iterable, List

from patcher.models import FileNode

log = logging.getLogger(__name__)

ContainsFn = Callable[[str, str], bool]


def substring_contains(path: str, directory: str) -> bool:
    """
    Plain substring test. Note that "/a/build" is reported as containing
    "/a/build2/x" too; use segment_contains for a boundary-aware check.
    """
    return directory in path


def segment_contains(path: str, directory: str) -> bool:
    directory = directory.rstrip("/")
    return path == directory or path.startswith(directory + "/")


def collapse_directories(
    selection: Iterable[FileNode],
    contains: ContainsFn = substring_contains,
) -> List[FileNode]:
    """
    Drop every selected directory that also has a selected descendant.

    The descendant wins: the directory's other children are not exported.
    """
    selected = list(selection)
    directories: Dict[str, FileNode] = {}
    for node in selected:
        if node.is_directory:
            directories[node.path] = node

    dropped = set()
    for node in selected:
        for dir_path in directories:
            if node.path != dir_path and contains(node.path, dir_path):
                dropped.add(dir_path)

    if dropped:
        log.debug("Collapsed %d directory selection(s): %s", len(dropped), sorted(dropped))

    return [n for n in selected if not (n.is_directory and n.path in dropped)]


def _expand(node: FileNode, out: List[FileNode], seen: set, expanded: set) -> None:
    if node.is_directory:
        # a linked folder can point back at an ancestor; walk each real folder once
        real = os.path.realpath(node.path)
        if real in expanded:
            log.debug("Skipping %s, already expanded as %s", node.path, real)
            return
        expanded.add(real)
        children = node.children()
        for child in children:
            _expand(child, out, seen, expanded)
        if not children and node not in seen:
            # empty folder placeholder
            seen.add(node)
            out.append(node)
    elif node not in seen:
        seen.add(node)
        out.append(node)


def normalize_selection(
    selection: Iterable[FileNode],
    contains: ContainsFn = substring_contains,
) -> List[FileNode]:
    """
    Turn a raw selection (duplicates, nested picks) into an ordered,
    duplicate-free list of files plus empty-directory placeholders.
    """
    out: List[FileNode] = []
    seen: set = set()
    expanded: set = set()
    for node in collapse_directories(selection, contains=contains):
        _expand(node, out, seen, expanded)

    log.debug("Normalized selection to %d node(s)", len(out))
    return out
