"""Project root lookup.

The project root is the directory jest is started in, so relative paths in
its output and its config discovery line up with the project.
"""

from __future__ import annotations

from pathlib import Path

from jestrun.core.logging import get_logger

log = get_logger("root")

DEFAULT_MANIFEST = "package.json"


def locate_project_root(
    path: Path,
    default: Path,
    *,
    manifest: str = DEFAULT_MANIFEST,
    step: int = 2,
) -> Path:
    """Find the nearest ancestor of *path* holding *manifest*.

    Starts at *path* if it is a directory, else at its parent, and climbs
    *step* levels between probes. With the default step of two every other
    ancestor is skipped; set ``runner.root_search_step: 1`` to probe each one.
    The filesystem root itself is never probed.

    Args:
        path: File or directory to start from
        default: Returned when the filesystem root is reached without a match
        manifest: File name marking a project root
        step: Directory levels climbed between probes

    Returns:
        The matching directory, or *default*
    """
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")

    candidate = path if path.is_dir() else path.parent
    candidate = candidate.absolute()

    while candidate != candidate.parent:
        if (candidate / manifest).is_file():
            log.debug("root.found", path=str(path), root=str(candidate))
            return candidate
        for _ in range(step):
            candidate = candidate.parent

    log.debug("root.fallback", path=str(path), manifest=manifest, default=str(default))
    return default
