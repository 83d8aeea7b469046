from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from patcher.core.artifacts import match_artifacts
from patcher.core.errors import ConfigurationError
from patcher.core.fsnodes import file_exists
from patcher.core.normalizer import ContainsFn, normalize_selection, substring_contains
from patcher.core.rules import ExportRules, default_rules
from patcher.models import BuildUnit, ExportRequest, FileNode, PathResult

log = logging.getLogger(__name__)

OutputResolver = Callable[[BuildUnit], Optional[str]]
IsTestSourceFn = Callable[[str], bool]


def join_dest(prefix: str, *parts: str) -> str:
    """Concatenate path pieces with exactly one '/' between them."""
    out = prefix.replace("\\", "/").rstrip("/")
    for part in parts:
        part = part.strip("/")
        if part:
            out += "/" + part
    return out


def source_root_for(path: str, source_roots: Sequence[str]) -> Optional[str]:
    for root in source_roots:
        if path == root or path.startswith(root + "/"):
            return root
    return None


def relative_to(path: str, root: str) -> Optional[str]:
    """'/'-prefixed remainder of path below root, or None if not below it."""
    root = root.rstrip("/")
    if not path.startswith(root + "/"):
        return None
    return path[len(root):]


def package_dir(relative_path: str) -> str:
    # "/com/acme/Foo.java" -> "/com/acme/"
    return relative_path[: relative_path.rfind("/") + 1]


def default_output_resolver(unit: BuildUnit) -> Optional[str]:
    return unit.compiled_output


def make_test_source_checker(unit: BuildUnit) -> IsTestSourceFn:
    roots = unit.test_source_roots

    def _is_test(path: str) -> bool:
        return source_root_for(path, roots) is not None

    return _is_test


def _artifact_pass(
    node: FileNode,
    rel: str,
    output_root: str,
    destination: str,
    rules: ExportRules,
    result: PathResult,
) -> None:
    pkg = package_dir(rel)
    location = output_root + pkg
    base = node.stem

    if node.file_type in rules.source_types:
        if rules.uncompilable_prefix and base.startswith(rules.uncompilable_prefix):
            log.debug("Not independently compilable, source only: %s", node.path)
            return
        for artifact in match_artifacts(location, base, rules):
            name = artifact.rsplit("/", 1)[-1]
            result.put(artifact, join_dest(destination, rules.codebase_dir, pkg, name))
    elif node.file_type in rules.descriptor_types:
        if file_exists(location + base + rules.artifact_extension):
            result.put(node.path, join_dest(destination, rules.codebase_dir, rel))


def map_paths(
    nodes: Iterable[FileNode],
    unit: BuildUnit,
    destination: str,
    compile_mode: bool = False,
    resolve_output: Optional[OutputResolver] = None,
    rules: Optional[ExportRules] = None,
    is_test_source: Optional[IsTestSourceFn] = None,
) -> PathResult:
    """
    Compute the (src, dst) pairs for a normalized selection.

    Every node gets a structured pair that mirrors its place under the unit's
    content root. In compile mode, main-source files additionally fan out to
    their compiled artifacts under <destination>/codebase/<package>/, and
    descriptor files with a matching artifact are copied there as well.
    Excluded build-configuration files are reported in `unsettled` instead
    of receiving a structured pair.

    Raises ConfigurationError when compile mode needs an output directory
    the unit does not have; the error carries the pairs mapped so far.
    """
    rules = rules or default_rules()
    resolve_output = resolve_output or default_output_resolver
    is_test_source = is_test_source or make_test_source_checker(unit)
    result = PathResult()

    for node in nodes:
        path = node.path

        if compile_mode:
            root = source_root_for(path, unit.source_roots)
            if root is not None and not is_test_source(path):
                output_root = resolve_output(unit)
                if not output_root:
                    log.error("Unit %s has no output directory; export aborted", unit.name)
                    raise ConfigurationError(unit.name, partial=result.freeze())
                rel = relative_to(path, root)
                if rel is not None:
                    _artifact_pass(node, rel, output_root.rstrip("/"), destination, rules, result)

            if node.name in rules.excluded_names:
                log.debug("Excluded from export: %s", node.name)
                result.add_unsettled(node.name)
                continue

        rel = relative_to(path, unit.content_root)
        if rel is None:
            log.warning("Outside content root %s, skipped: %s", unit.content_root, path)
            continue
        result.put(path, join_dest(destination, rel))

    log.info("Mapped %d pair(s), %d unsettled", len(result), len(result.unsettled))
    return result.freeze()


def build_path_result(
    request: ExportRequest,
    resolve_output: Optional[OutputResolver] = None,
    rules: Optional[ExportRules] = None,
    is_test_source: Optional[IsTestSourceFn] = None,
    contains: ContainsFn = substring_contains,
) -> PathResult:
    """Normalize the request's selection and map it in one go."""
    nodes = normalize_selection(request.selection, contains=contains)
    return map_paths(
        nodes,
        unit=request.unit,
        destination=request.destination,
        compile_mode=request.compile_mode,
        resolve_output=resolve_output,
        rules=rules,
        is_test_source=is_test_source,
    )
