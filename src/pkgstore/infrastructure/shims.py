"""Bin shim generation.

For every link whose target declares bins, the source receives one shim
per bin in ``<install(source)>/node_modules/.bin``. Bins whose script is
missing on disk are skipped silently. Name collisions are rejected
earlier by :func:`pkgstore.domain.validation.validate_bins`.

The shim itself is written by a :data:`ShimWriter` supplied by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pkgstore.domain.errors import ShimError
from pkgstore.domain.graph import Graph
from pkgstore.infrastructure.linker import NAMESPACE_DIR

logger = logging.getLogger(__name__)

BIN_DIR = ".bin"

# (script, shim_path) -> None; raises OSError or ShimError on failure.
ShimWriter = Callable[[Path, Path], None]


def plan_bins(graph: Graph, location_map: Mapping[str, Path]) -> dict[str, list[tuple[str, Path]]]:
    """List ``(bin_name, absolute_script)`` pairs per source, in link order."""
    index = graph.node_index()
    plan: dict[str, list[tuple[str, Path]]] = {}
    for source, links in graph.links_by_source().items():
        shims = [
            (bin_name, location_map[link.target] / script)
            for link in links
            for bin_name, script in index[link.target].bins.items()
        ]
        if shims:
            plan[source] = shims
    return plan


def write_source_bins(bin_path: Path, shims: list[tuple[str, Path]], writer: ShimWriter) -> int:
    """Write the shims of one source into *bin_path*. Returns how many were written."""
    written = 0
    try:
        bin_path.mkdir(parents=True, exist_ok=True)
        for bin_name, script in shims:
            if not script.exists():
                logger.debug("Skipping bin %s: %s does not exist", bin_name, script)
                continue
            writer(script, bin_path / bin_name)
            written += 1
    except OSError as exc:
        raise ShimError(
            f'Could not create bins in "{bin_path}": {exc}',
            detail={"bin_path": str(bin_path), "path": exc.filename},
        ) from exc
    return written


def create_bins(
    graph: Graph,
    location_map: Mapping[str, Path],
    writer: ShimWriter,
    *,
    namespace_dir: str = NAMESPACE_DIR,
    bin_dir: str = BIN_DIR,
    max_workers: int = 8,
) -> int:
    """Write bin shims for every source of *graph*. Returns the shim count.

    Each source is handled by a single task, so shims sharing a bin
    directory are written in link order.

    Raises:
        ShimError: If a bin directory or shim could not be written.
    """
    plan = plan_bins(graph, location_map)
    if not plan:
        return 0

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pkgstore-bin") as pool:
        futures = [
            pool.submit(
                write_source_bins,
                location_map[source] / namespace_dir / bin_dir,
                shims,
                writer,
            )
            for source, shims in plan.items()
        ]
        count = sum(future.result() for future in futures)

    logger.debug("Wrote %d bin shims for %d packages", count, len(plan))
    return count
