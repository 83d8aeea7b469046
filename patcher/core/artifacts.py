from __future__ import annotations

import logging
import os
from typing import List, Optional

from patcher.core.rules import ExportRules, default_rules

log = logging.getLogger(__name__)


def _join(directory: str, name: str) -> str:
    return directory.rstrip("/") + "/" + name


def match_artifacts(output_dir: str, base_name: str, rules: Optional[ExportRules] = None) -> List[str]:
    """
    Candidate compiled artifacts for one source base name.

    Returns every "<base><marker>*<ext>" entry found in output_dir (sorted),
    followed by "<base><ext>". The exact entry is always returned, even if
    it does not exist: these are candidates, and callers that copy them must
    check existence themselves. Missing directories are not an error.
    """
    rules = rules or default_rules()
    ext = rules.artifact_extension
    prefix = base_name + rules.synthetic_marker
    found: List[str] = []
    try:
        names = sorted(os.listdir(output_dir))
    except OSError as e:
        log.debug("Artifact dir unreadable %s (%s)", output_dir, e)
        names = []

    for name in names:
        if name.startswith(prefix) and name.endswith(ext) and len(name) >= len(prefix) + len(ext):
            found.append(_join(output_dir, name))

    exact = _join(output_dir, base_name + ext)
    if exact not in found:
        found.append(exact)
    return found
