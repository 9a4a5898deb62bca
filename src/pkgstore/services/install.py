"""InstallService — materialize a dependency graph as a local store.

Pipeline: VALIDATE → MATERIALIZE → SELF-LINK → LINK → SHIM → RESPOND

Validation runs before anything touches the disk. Later stages fail fast
and leave whatever they already wrote in place: a failed install needs a
fresh, empty location.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from pkgstore.domain.actions import CopyAction
from pkgstore.domain.errors import CopyError, StoreError
from pkgstore.domain.graph import Graph, add_self_links
from pkgstore.domain.validation import (
    validate_bins,
    validate_graph,
    validate_input,
    validate_location,
)
from pkgstore.infrastructure.copy_engine import CopyPool, pool_size_for
from pkgstore.infrastructure.filesystem import plan_tree_copy
from pkgstore.infrastructure.linker import link_nodes
from pkgstore.infrastructure.shims import create_bins
from pkgstore.services.base import BaseService
from pkgstore.services.result import ServiceResult

if TYPE_CHECKING:
    from pkgstore.config.settings import StoreSettings

log = structlog.get_logger(__name__)


class InstallService(BaseService):
    """Installs resolved dependency graphs into store directories."""

    def install(self, graph: Graph | Mapping[str, Any], location: Path | str) -> ServiceResult:
        """Install *graph* into the empty directory *location*.

        On success ``data`` holds counts of nodes, copied files, namespace
        entries, and bin shims.
        """
        op = "install"
        started = time.perf_counter()
        try:
            graph = self._coerce_graph(graph)

            # ── VALIDATE ──────────────────────────────────────────
            validate_input(graph, location)
            store = Path(location)

            # ── MATERIALIZE ───────────────────────────────────────
            location_map, files, workers = self._materialize(graph, store)

            # ── SELF-LINK ─────────────────────────────────────────
            augmented = add_self_links(graph)

            # ── LINK ──────────────────────────────────────────────
            layout = self._settings.layout
            links = link_nodes(
                augmented,
                location_map,
                namespace_dir=layout.namespace_dir,
                max_workers=self._settings.pool.task_workers,
            )

            # ── SHIM ──────────────────────────────────────────────
            bins = create_bins(
                augmented,
                location_map,
                self.plugins.write_shim,
                namespace_dir=layout.namespace_dir,
                bin_dir=layout.bin_dir,
                max_workers=self._settings.pool.task_workers,
            )
        except StoreError as exc:
            return self._failure(op, exc, duration_ms=_elapsed_ms(started))

        in_place = sum(1 for node in graph.nodes if node.keep_in_place)
        data = {
            "location": str(store),
            "nodes": len(graph.nodes),
            "copied": len(graph.nodes) - in_place,
            "in_place": in_place,
            "files": files,
            "links": links,
            "bins": bins,
        }
        log.info("store installed", **data)
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            meta={"duration_ms": _elapsed_ms(started), "workers": workers},
        )

    def validate(
        self,
        graph: Graph | Mapping[str, Any],
        location: Path | str | None = None,
    ) -> ServiceResult:
        """Run the pre-install checks without touching the disk.

        *location* is checked only when given.
        """
        op = "validate"
        try:
            graph = self._coerce_graph(graph)
            if location is not None:
                validate_location(location)
            validate_graph(graph)
            validate_bins(graph)
        except StoreError as exc:
            return self._failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "nodes": len(graph.nodes),
                "links": len(graph.links),
                "bins": sum(len(node.bins) for node in graph.nodes),
            },
        )

    # ------------------------------------------------------------------
    # Pipeline stages (private)
    # ------------------------------------------------------------------

    def _coerce_graph(self, graph: Graph | Mapping[str, Any]) -> Graph:
        if isinstance(graph, Graph):
            return graph
        try:
            return Graph.model_validate(graph)
        except ValidationError as exc:
            raise self._input_error(exc, code="INVALID_GRAPH", what="graph") from exc

    def _materialize(self, graph: Graph, store: Path) -> tuple[Mapping[str, Path], int, int]:
        """Create every node's install directory and copy payloads in one bulk call.

        Returns the read-only location map, the number of files copied,
        and the number of copy workers used.
        """
        location_map: dict[str, Path] = {}
        actions: list[CopyAction] = []
        excluded = self._settings.layout.excluded_files
        for node in graph.nodes:
            if node.keep_in_place:
                location_map[node.key] = node.location
                continue
            destination = store / node.key
            try:
                destination.mkdir()
            except OSError as exc:
                raise CopyError(
                    f'Could not create "{destination}": {exc}',
                    detail={"key": node.key, "destination": str(destination)},
                ) from exc
            actions.extend(plan_tree_copy(node.location, destination, excluded_files=excluded))
            location_map[node.key] = destination

        pool = CopyPool(pool_size_for(self._settings.effective_workers_limit))
        pool.run(actions)
        log.debug("payloads copied", files=len(actions), workers=len(pool.workers))
        return MappingProxyType(location_map), len(actions), len(pool.workers)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def install_local_store(
    graph: Graph | Mapping[str, Any],
    location: Path | str,
    *,
    settings: StoreSettings | None = None,
) -> ServiceResult:
    """Install *graph* into the empty absolute directory *location*."""
    return InstallService(settings).install(graph, location)
