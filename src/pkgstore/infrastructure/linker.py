"""Namespace directory construction.

Every link ``(source, target)`` becomes a directory symlink
``<install(source)>/node_modules/<name(target)>`` pointing at
``<install(target)>``. The entries of one source are computed together
and its namespace directory is rebuilt exactly once, so sources can be
processed concurrently without two tasks touching the same directory.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pkgstore.domain.errors import LinkError
from pkgstore.domain.graph import Graph

logger = logging.getLogger(__name__)

NAMESPACE_DIR = "node_modules"


def plan_namespaces(graph: Graph, location_map: Mapping[str, Path]) -> dict[str, dict[str, Path]]:
    """Compute the complete namespace contents of every linked source.

    Returns ``{source_key: {entry_name: target_install_path}}``.
    """
    index = graph.node_index()
    namespaces: dict[str, dict[str, Path]] = {}
    for source, links in graph.links_by_source().items():
        namespaces[source] = {
            index[link.target].name: location_map[link.target] for link in links
        }
    return namespaces


def rebuild_namespace(
    install_path: Path,
    entries: Mapping[str, Path],
    *,
    namespace_dir: str = NAMESPACE_DIR,
) -> None:
    """Replace ``install_path/namespace_dir`` with symlinks for *entries*.

    Scoped names (``@scope/name``) get their scope directory created.
    """
    namespace = install_path / namespace_dir
    try:
        if namespace.is_symlink() or namespace.is_file():
            namespace.unlink()
        elif namespace.exists():
            shutil.rmtree(namespace)
        namespace.mkdir()
        for name, target in entries.items():
            entry = namespace / name
            entry.parent.mkdir(parents=True, exist_ok=True)
            # Directory links behave as junctions on Windows.
            os.symlink(target, entry, target_is_directory=True)
    except OSError as exc:
        raise LinkError(
            f'Could not link dependencies of "{install_path}": {exc}',
            detail={"install_path": str(install_path), "path": exc.filename},
        ) from exc


def link_nodes(
    graph: Graph,
    location_map: Mapping[str, Path],
    *,
    namespace_dir: str = NAMESPACE_DIR,
    max_workers: int = 8,
) -> int:
    """Build the namespace directory of every source in *graph*.

    Returns the number of entries created.

    Raises:
        LinkError: If any namespace could not be rebuilt.
    """
    namespaces = plan_namespaces(graph, location_map)
    if not namespaces:
        return 0

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pkgstore-link") as pool:
        futures = [
            pool.submit(
                rebuild_namespace,
                location_map[source],
                entries,
                namespace_dir=namespace_dir,
            )
            for source, entries in namespaces.items()
        ]
        for future in futures:
            future.result()

    count = sum(len(entries) for entries in namespaces.values())
    logger.debug("Linked %d entries across %d namespaces", count, len(namespaces))
    return count
