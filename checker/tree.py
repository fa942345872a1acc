"""
Project tree scanning and comparison.

`scan` reads a directory into the same node model the required layout is
declared with, and `diff` reports every required node the scanned tree
lacks.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from .models import CheckError, DirNode, FileNode, mkdir, mkfile, structure_error

logger = logging.getLogger(__name__)


def scan(path: Path) -> DirNode:
    """
    Read a directory into a tree of nodes.

    Entries that are neither regular files nor directories (sockets,
    broken links) are skipped. Children are sorted by name.

    Args:
        path: Directory to scan.

    Returns:
        DirNode describing the directory.

    Raises:
        FileNotFoundError: If the path does not exist.
        NotADirectoryError: If the path is not a directory.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Project directory not found: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")

    children: list[FileNode | DirNode] = []
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            children.append(scan(entry))
        elif entry.is_file():
            children.append(mkfile(entry.name))
    return mkdir(path.name, children)


def find_match(node: FileNode | DirNode, candidates: Sequence[FileNode | DirNode]) -> FileNode | DirNode | None:
    """Return the first candidate with the same name and type as `node`."""
    for candidate in candidates:
        if candidate.name == node.name and candidate.type == node.type:
            return candidate
    return None


def diff(
    canonical: Sequence[FileNode | DirNode],
    actual: Sequence[FileNode | DirNode],
) -> list[CheckError]:
    """
    Compare required tree entries with the actual ones.

    A missing node yields a single `structure.<type>` error and its
    required children are not inspected. Matched directories are compared
    recursively. Errors follow the order of the required tree.

    Args:
        canonical: Children of the required directory.
        actual: Children of the scanned directory.

    Returns:
        List of structure errors, empty when everything is present.
    """
    errors: list[CheckError] = []
    for node in canonical:
        found = find_match(node, actual)
        if found is None:
            logger.debug("Missing %s %r", node.type, node.name)
            errors.append(structure_error(node))
        elif isinstance(node, DirNode):
            errors.extend(diff(node.children, found.children))
    return errors
