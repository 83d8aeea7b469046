from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from patcher.core.errors import WorkspaceError
from patcher.models import BuildUnit, to_posix


@dataclass(frozen=True)
class Workspace:
    units: Tuple[BuildUnit, ...]
    active_unit: Optional[str] = None  # name of the unit the caller has focused


def _str_list(values: Any) -> Tuple[str, ...]:
    return tuple(str(x).strip() for x in (values or []) if str(x).strip())


def _resolve(value: Optional[str], base_dir: Optional[str]) -> Optional[str]:
    # relative entries are taken from the folder holding the workspace file
    if not value or base_dir is None or os.path.isabs(value):
        return value
    return to_posix(os.path.normpath(os.path.join(base_dir, value)))


def unit_to_json_dict(unit: BuildUnit) -> Dict[str, Any]:
    return {
        "name": unit.name,
        "content_root": unit.content_root,
        "source_roots": list(unit.source_roots),
        "test_source_roots": list(unit.test_source_roots),
        "compiled_output": unit.compiled_output,
        "descriptor_dir": unit.descriptor_dir,
    }


def unit_from_json_dict(d: Dict[str, Any], base_dir: Optional[str] = None) -> BuildUnit:
    """
    Build a unit from its JSON form. With base_dir set, relative folder
    entries are resolved against it; absolute ones are kept.
    """
    name = str(d.get("name") or "").strip()
    content_root = str(d.get("content_root") or "").strip()
    if not name or not content_root:
        raise WorkspaceError("Each unit needs a name and a content_root.")

    compiled_output = str(d.get("compiled_output") or "").strip() or None
    descriptor_dir = str(d["descriptor_dir"]).strip() if d.get("descriptor_dir") else None
    return BuildUnit(
        name=name,
        content_root=_resolve(content_root, base_dir),
        source_roots=tuple(_resolve(s, base_dir) for s in _str_list(d.get("source_roots"))),
        compiled_output=_resolve(compiled_output, base_dir),
        test_source_roots=tuple(_resolve(s, base_dir) for s in _str_list(d.get("test_source_roots"))),
        descriptor_dir=_resolve(descriptor_dir, base_dir),
    )


def from_json_dict(d: Dict[str, Any], base_dir: Optional[str] = None) -> Workspace:
    units: List[BuildUnit] = [unit_from_json_dict(u, base_dir) for u in (d.get("units") or [])]
    names = [u.name for u in units]
    if len(set(names)) != len(names):
        raise WorkspaceError("Unit names must be unique.")

    active = d.get("active_unit") or None
    if active is not None and active not in names:
        raise WorkspaceError(f"Active unit is not defined: {active}")
    return Workspace(units=tuple(units), active_unit=active)


def to_json_dict(ws: Workspace) -> Dict[str, Any]:
    return {
        "active_unit": ws.active_unit,
        "units": [unit_to_json_dict(u) for u in ws.units],
    }


def load_workspace(path: str) -> Workspace:
    p = Path(path)
    try:
        d = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise WorkspaceError(f"Cannot read workspace file {p}: {e}") from e
    except ValueError as e:
        raise WorkspaceError(f"Workspace file is not valid JSON {p}: {e}") from e
    if not isinstance(d, dict):
        raise WorkspaceError(f"Workspace file must hold a JSON object: {p}")
    return from_json_dict(d, base_dir=os.path.dirname(os.path.abspath(p)))


def save_workspace(ws: Workspace, path: str) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(to_json_dict(ws), indent=2), encoding="utf-8")
    return p
