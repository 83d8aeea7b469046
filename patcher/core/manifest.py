from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from patcher.models import BuildUnit, PathResult, ValidationResult


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _safe_stat(path: str) -> Dict[str, Any]:
    try:
        st = os.stat(path)
        return {
            "exists": True,
            "size_bytes": int(st.st_size),
            "mtime": datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).isoformat(timespec="seconds"),
        }
    except OSError:
        # artifact candidates may not exist; the copy step decides what to do
        return {"exists": False, "size_bytes": None, "mtime": None}


def build_manifest_dict(
    tool_name: str,
    tool_version: str,
    unit: BuildUnit,
    destination: str,
    compile_mode: bool,
    result: PathResult,
    validation_results: Optional[List[ValidationResult]] = None,
    include_file_stats: bool = True,
) -> Dict[str, Any]:
    files_out: List[Dict[str, Any]] = []
    for pair in result:
        entry: Dict[str, Any] = {"src": pair.src, "dst": pair.dst}
        if include_file_stats:
            entry.update(_safe_stat(pair.src))
        files_out.append(entry)

    results_out = [
        {
            "level": r.level,
            "code": r.code,
            "message": r.message,
            "relpath": r.relpath,
        }
        for r in (validation_results or [])
    ]

    return {
        "tool": tool_name,
        "version": tool_version,
        "timestamp_utc": _utc_now_iso(),
        "unit": unit.name,
        "content_root": unit.content_root,
        "destination": destination,
        "compile_mode": compile_mode,
        "results": results_out,
        "files": files_out,
        "unsettled": list(result.unsettled),
    }


def write_manifest_json(manifest: Dict[str, Any], manifest_path: str) -> str:
    path = Path(manifest_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)

    return str(path)
