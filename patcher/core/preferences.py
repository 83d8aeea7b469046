from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

log = logging.getLogger(__name__)


def default_destination() -> str:
    return str(Path.home() / "Desktop")


def load_export_paths(store_path: str) -> Dict[str, str]:
    """Unit name -> last destination. A missing or broken store is empty."""
    path = Path(store_path).expanduser()
    if not path.exists():
        return {}
    try:
        d = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Ignoring unreadable preference store %s (%s)", path, e)
        return {}
    if not isinstance(d, dict):
        return {}
    return {str(k): str(v) for k, v in d.items() if str(v).strip()}


def save_export_paths(store_path: str, paths: Dict[str, str]) -> Path:
    path = Path(store_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dict(sorted(paths.items())), indent=2), encoding="utf-8")
    return path


def default_export_path(unit_name: str, paths: Dict[str, str]) -> str:
    return paths.get(unit_name) or default_destination()


def remember_export_path(store_path: str, unit_name: str, destination: str) -> Dict[str, str]:
    paths = load_export_paths(store_path)
    if destination and destination.strip():
        paths[unit_name] = destination.strip()
    else:
        paths.pop(unit_name, None)
    save_export_paths(store_path, paths)
    return paths
