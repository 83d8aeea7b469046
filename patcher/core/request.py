from __future__ import annotations

from typing import List, Optional, Sequence

from patcher.models import BuildUnit, FileNode, ValidationResult


def validate_export_request(
    destination: str,
    selection: Optional[Sequence[FileNode]],
    unit: Optional[BuildUnit],
) -> List[ValidationResult]:
    results: List[ValidationResult] = []

    if not (destination or "").strip():
        results.append(ValidationResult("ERROR", "DEST_MISSING", "Please select save path!", None))
    if not selection:
        results.append(ValidationResult("ERROR", "SELECTION_EMPTY", "Please select at least one file!", None))
    if unit is None:
        results.append(ValidationResult("ERROR", "UNIT_UNRESOLVED", "Please select module!", None))
    else:
        # the mapper skips these; say so before the plan comes back short
        root = unit.content_root
        for node in selection or ():
            if node.path != root and not node.path.startswith(root + "/"):
                results.append(ValidationResult(
                    "WARNING",
                    "OUTSIDE_CONTENT_ROOT",
                    f"Outside the content root of {unit.name}; it gets no export path.",
                    node.path,
                ))

    return results


def has_errors(results: Sequence[ValidationResult]) -> bool:
    return any(r.level.upper() == "ERROR" for r in results)


def export_prefix(destination: str, unit_name: str) -> str:
    """Exports land in <destination>/<unit name>/."""
    base = destination.strip().replace("\\", "/")
    if not base.endswith("/"):
        base += "/"
    return base + unit_name + "/"
