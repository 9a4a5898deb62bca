"""Input validation for store installation.

Pure functions over the input: the only disk access is read-only
(``stat`` and directory listing). Each check raises :class:`InputError`
on the first violation, in a fixed order, so that repeated calls on the
same input always report the same error.
"""

from __future__ import annotations

import re
from collections import Counter, defaultdict
from pathlib import Path

from pkgstore.domain.errors import InputError
from pkgstore.domain.graph import PACKAGE_NAME_PATTERN, Graph

# Bin names become file names inside the bin directory.
_ILLEGAL_BIN_CHARS = re.compile(r"[/\\\n]")
# Node keys become directory names inside the store.
_PATH_SEPARATORS = re.compile(r"[/\\]")


def validate_location(location: Path | str) -> None:
    """Require *location* to be an absolute path to an existing, empty directory."""
    path = Path(location)
    detail = {"location": str(location)}
    if not path.is_absolute():
        raise InputError(
            f'Location is not an absolute path: "{location}"',
            code="LOCATION_NOT_ABSOLUTE",
            detail=detail,
        )
    if not path.exists():
        raise InputError(
            f'Location does not exist: "{location}"',
            code="LOCATION_MISSING",
            detail=detail,
        )
    if not path.is_dir():
        raise InputError(
            f'Location is not a directory: "{location}"',
            code="LOCATION_NOT_DIRECTORY",
            detail=detail,
        )
    if any(path.iterdir()):
        raise InputError(
            f'Location is not an empty directory: "{location}"',
            code="LOCATION_NOT_EMPTY",
            detail=detail,
        )


def find_duplicate_key(graph: Graph) -> str | None:
    """Return the first node key (in declaration order) that occurs more than once."""
    counts = Counter(node.key for node in graph.nodes)
    for node in graph.nodes:
        if counts[node.key] > 1:
            return node.key
    return None


def validate_graph(graph: Graph) -> None:
    """Check structural invariants of *graph*, stopping at the first failure.

    Order: duplicate key, key unusable as a directory name, invalid
    name, relative location, location that is missing or not a
    directory, dangling link source, dangling link target, two
    dependencies of one source sharing a name.
    """
    dup_key = find_duplicate_key(graph)
    if dup_key is not None:
        raise InputError(
            f'Multiple nodes have the following key: "{dup_key}"',
            code="DUPLICATE_KEY",
            detail={"key": dup_key},
        )

    for node in graph.nodes:
        if node.key in ("", ".", "..") or _PATH_SEPARATORS.search(node.key):
            raise InputError(
                f'Node key is not a valid directory name: "{node.key}"',
                code="INVALID_KEY",
                detail={"key": node.key},
            )

    for node in graph.nodes:
        if not PACKAGE_NAME_PATTERN.match(node.name):
            raise InputError(
                f'Package name invalid: "{node.name}"',
                code="INVALID_NAME",
                detail={"key": node.key, "name": node.name},
            )

    for node in graph.nodes:
        if not node.location.is_absolute():
            raise InputError(
                f'Location of a node is not absolute: "{node.location}"',
                code="NODE_LOCATION_NOT_ABSOLUTE",
                detail={"key": node.key, "location": str(node.location)},
            )

    for node in graph.nodes:
        if not node.location.exists():
            raise InputError(
                f'Location of a node does not exist: "{node.location}"',
                code="NODE_LOCATION_MISSING",
                detail={"key": node.key, "location": str(node.location)},
            )
        if not node.location.is_dir():
            raise InputError(
                f'Location of a node is not a directory: "{node.location}"',
                code="NODE_LOCATION_NOT_DIRECTORY",
                detail={"key": node.key, "location": str(node.location)},
            )

    index = graph.node_index()
    for link in graph.links:
        if link.source not in index:
            raise InputError(
                f'Invalid link source: "{link.source}"',
                code="INVALID_LINK_SOURCE",
                detail={"source": link.source, "target": link.target},
            )
    for link in graph.links:
        if link.target not in index:
            raise InputError(
                f'Invalid link target: "{link.target}"',
                code="INVALID_LINK_TARGET",
                detail={"source": link.source, "target": link.target},
            )

    seen: dict[str, set[str]] = defaultdict(set)
    for link in graph.links:
        target_name = index[link.target].name
        if target_name in seen[link.source]:
            raise InputError(
                f'Package "{link.source}" depends on multiple packages called "{target_name}"',
                code="AMBIGUOUS_DEPENDENCY",
                detail={"source": link.source, "name": target_name},
            )
        seen[link.source].add(target_name)


def validate_bins(graph: Graph) -> None:
    """Reject illegal bin names, then bin-name collisions at any link source.

    Collisions are found by replaying the links in declaration order and
    recording which ``(target, script)`` each source would receive under
    every bin name. Two different scripts under one name is an error.
    """
    for node in graph.nodes:
        for bin_name in node.bins:
            if _ILLEGAL_BIN_CHARS.search(bin_name):
                raise InputError(
                    f'Package "{node.key}" exposes a bin script with an invalid name: "{bin_name}"',
                    code="INVALID_BIN_NAME",
                    detail={"key": node.key, "bin": bin_name},
                )

    bins_by_key = {node.key: node.bins for node in graph.nodes}
    installed: dict[str, dict[str, tuple[str, str]]] = defaultdict(dict)
    for link in graph.links:
        for bin_name, script in bins_by_key.get(link.target, {}).items():
            origin = (link.target, script)
            existing = installed[link.source].get(bin_name)
            if existing is not None and existing != origin:
                raise InputError(
                    f'Several different scripts called "{bin_name}" need to be installed '
                    f"at the same location ({link.source}).",
                    code="BIN_COLLISION",
                    detail={"source": link.source, "bin": bin_name},
                )
            installed[link.source][bin_name] = origin


def validate_input(graph: Graph, location: Path | str) -> None:
    """Run every check that must pass before the store is touched."""
    validate_location(location)
    validate_graph(graph)
    validate_bins(graph)
