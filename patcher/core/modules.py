from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Optional, Sequence

from patcher.core.rules import DEFAULT_MODULE_PATTERN
from patcher.models import BuildUnit, to_posix

log = logging.getLogger(__name__)


def _compile(pattern: Optional[str]) -> "re.Pattern[str]":
    return re.compile(pattern or DEFAULT_MODULE_PATTERN)


def is_not_same_module(selection_paths: Optional[Iterable[str]], pattern: Optional[str] = None) -> bool:
    """
    True when the selection touches two or more unit roots.
    Paths that are not under a src/ or WebRoot/ folder are ignored.
    """
    if not selection_paths:
        return False

    rx = _compile(pattern)
    unit_name = None
    for path in selection_paths:
        m = rx.search(to_posix(path))
        if not m:
            continue
        name = m.group(3)
        if unit_name is not None and name != unit_name:
            return True
        unit_name = name
    return False


def unit_root_for(selection_paths: Optional[Iterable[str]], pattern: Optional[str] = None) -> Optional[str]:
    if not selection_paths:
        return None
    rx = _compile(pattern)
    for path in selection_paths:
        m = rx.search(to_posix(path))
        if m:
            return m.group(1)
    return None


def find_unit(units: Iterable[BuildUnit], name: str) -> Optional[BuildUnit]:
    for unit in units:
        if unit.name == name:
            return unit
    return None


def resolve_module(
    units: Sequence[BuildUnit],
    selection_paths: Optional[Sequence[str]] = None,
    active_unit: Optional[BuildUnit] = None,
    pattern: Optional[str] = None,
) -> Optional[BuildUnit]:
    """
    Pick the build unit an export belongs to, or None when the user has to
    choose.

    Order: the only known unit, then the unit the caller marked active, then
    the unit whose descriptor folder matches the root shared by the selection.
    """
    if len(units) == 1:
        return units[0]
    if active_unit is not None:
        return active_unit
    if is_not_same_module(selection_paths, pattern):
        log.info("Selection spans several units; unit must be chosen explicitly")
        return None

    root = unit_root_for(selection_paths, pattern)
    if root is None:
        return None

    by_dir: Dict[str, BuildUnit] = {u.descriptor_dir: u for u in units}
    unit = by_dir.get(root)
    if unit is None:
        log.info("No unit registered for %s", root)
    return unit
