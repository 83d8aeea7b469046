from __future__ import annotations

from typing import Optional

from patcher.models import PathResult


class PatcherError(Exception):
    pass


class ConfigurationError(PatcherError):
    """
    Raised when a unit cannot be exported in compile mode because it has no
    compiled-output directory. Mapping stops at the first node that needs it.
    """

    def __init__(self, unit_name: str, partial: Optional[PathResult] = None):
        super().__init__(f"The unit ({unit_name}) has no output directory!")
        self.unit_name = unit_name
        self.partial = partial if partial is not None else PathResult().freeze()


class WorkspaceError(PatcherError):
    pass
