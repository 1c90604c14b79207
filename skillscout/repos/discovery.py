"""
Repository discovery - finds version-controlled directories under a root.
"""

from pathlib import Path
import logging
import os

from skillscout.core.errors import DiscoveryError
from skillscout.core.models import DiscoveredRepo
from skillscout.core.taxonomy import VCS_MARKERS


logger = logging.getLogger(__name__)


def _is_repository(entry: os.DirEntry) -> bool:
    if entry.name.startswith("."):
        return False
    if not entry.is_dir():
        return False
    return any(os.path.exists(os.path.join(entry.path, marker)) for marker in VCS_MARKERS)


def discover_repositories(root_path: str) -> list[DiscoveredRepo]:
    """
    List the immediate subdirectories of ``root_path`` that are repositories.

    Only one level is inspected. Candidates that cannot be read are skipped.

    Raises:
        DiscoveryError: If ``root_path`` itself cannot be read
    """
    root = Path(root_path).expanduser()
    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError as e:
        raise DiscoveryError(str(root), e.strerror or str(e)) from e

    repos = []
    for entry in entries:
        try:
            if _is_repository(entry):
                repos.append(DiscoveredRepo(name=entry.name, path=os.path.abspath(entry.path)))
        except OSError as e:
            logger.debug(f"Skipping {entry.path}: {e}")

    repos.sort(key=lambda r: r.name)
    logger.info(f"Discovered {len(repos)} repositories under {root}")
    return repos
