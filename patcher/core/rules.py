from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet

DEFAULT_EXCLUDED_NAMES = frozenset({
    "custom-actionModels.xml",
    "custom-actions.xml",
    "custom.xml",
    "mvc.xml",
})

# group(1): unit root directory, group(3): unit root name
DEFAULT_MODULE_PATTERN = r"((.+)/(.+))/(src|WebRoot)/.*"


@dataclass(frozen=True)
class ExportRules:
    excluded_names: FrozenSet[str] = DEFAULT_EXCLUDED_NAMES
    source_types: FrozenSet[str] = frozenset({"java"})
    descriptor_types: FrozenSet[str] = frozenset({"xml"})
    artifact_extension: str = ".class"
    synthetic_marker: str = "$"
    uncompilable_prefix: str = "_"
    codebase_dir: str = "codebase"
    module_pattern: str = DEFAULT_MODULE_PATTERN

    def with_excluded(self, *names: str) -> "ExportRules":
        return replace(self, excluded_names=frozenset(self.excluded_names | set(names)))


def default_rules() -> ExportRules:
    return ExportRules()


def to_json_dict(rules: ExportRules) -> Dict[str, Any]:
    d = asdict(rules)
    for key in ("excluded_names", "source_types", "descriptor_types"):
        d[key] = sorted(d[key])
    return d


def _name_set(values: Any, lower: bool = False) -> FrozenSet[str]:
    out = set()
    for x in values or []:
        s = str(x).strip()
        if not s:
            continue
        out.add(s.lower().lstrip(".") if lower else s)
    return frozenset(out)


def from_json_dict(d: Dict[str, Any]) -> ExportRules:
    base = default_rules()

    ext = str(d.get("artifact_extension") or base.artifact_extension).strip()
    if not ext.startswith("."):
        ext = "." + ext

    return ExportRules(
        excluded_names=_name_set(d["excluded_names"]) if "excluded_names" in d else base.excluded_names,
        source_types=_name_set(d.get("source_types"), lower=True) or base.source_types,
        descriptor_types=_name_set(d.get("descriptor_types"), lower=True) or base.descriptor_types,
        artifact_extension=ext,
        synthetic_marker=str(d.get("synthetic_marker", base.synthetic_marker)),
        uncompilable_prefix=str(d.get("uncompilable_prefix", base.uncompilable_prefix)),
        codebase_dir=str(d.get("codebase_dir") or base.codebase_dir).strip("/\\"),
        module_pattern=str(d.get("module_pattern") or base.module_pattern),
    )


def load_rules(path: str) -> ExportRules:
    d = json.loads(Path(path).read_text(encoding="utf-8"))
    return from_json_dict(d)


def save_rules(rules: ExportRules, path: str) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(to_json_dict(rules), indent=2), encoding="utf-8")
    return p
