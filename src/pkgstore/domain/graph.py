"""Dependency graph value types.

A :class:`Graph` is validated into immutable models exactly once, at the
system boundary. Structural rules (unique keys, name grammar, dangling
links) are checked separately by :mod:`pkgstore.domain.validation` so
that errors are reported in a fixed order with stable messages.
"""

from __future__ import annotations

import re
from collections import defaultdict
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# (@scope/)?name, the grammar npm applies to package names.
PACKAGE_NAME_PATTERN = re.compile(
    r"^(@[a-z0-9\-~][a-z0-9\-._~]*/)?"
    r"[a-zA-Z0-9\-~][a-zA-Z0-9\-._~]*$"
)


def unscoped_name(name: str) -> str:
    """Strip the ``@scope/`` prefix from a package name.

    Examples:
        >>> unscoped_name("@types/node")
        'node'
        >>> unscoped_name("left-pad")
        'left-pad'
    """
    return name.rsplit("/", 1)[-1]


class Node(BaseModel):
    """A graph vertex: one package payload on disk.

    Attributes:
        key: Unique identifier within the graph.
        name: Declared package name; the entry name used in namespaces.
        location: Absolute directory holding the package payload.
        bins: Bin name -> script path relative to the install root.
        keep_in_place: Never copy; the install path is ``location`` itself.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    name: str
    location: Path
    bins: dict[str, str] = Field(default_factory=dict)
    keep_in_place: bool = Field(default=False, alias="keepInPlace")

    @model_validator(mode="before")
    @classmethod
    def _normalize_bins(cls, data: Any) -> Any:
        """Accept ``bins: "cli.js"`` as shorthand for ``{<unscoped name>: "cli.js"}``."""
        if not isinstance(data, dict):
            return data
        bins = data.get("bins")
        if bins is None:
            data = {k: v for k, v in data.items() if k != "bins"}
        elif isinstance(bins, str):
            data = {**data, "bins": {unscoped_name(str(data.get("name", ""))): bins}}
        return data


class Link(BaseModel):
    """A directed edge: *source* can resolve *target* by the target's name."""

    model_config = {"frozen": True}

    source: str
    target: str


class Graph(BaseModel):
    """Resolved dependency graph. Never mutated by the installer."""

    model_config = {"frozen": True}

    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()

    def node_index(self) -> dict[str, Node]:
        """Map node keys to nodes. Later duplicates win; validate first."""
        return {node.key: node for node in self.nodes}

    def links_by_source(self) -> dict[str, list[Link]]:
        """Group links by source key, preserving declaration order."""
        grouped: dict[str, list[Link]] = defaultdict(list)
        for link in self.links:
            grouped[link.source].append(link)
        return dict(grouped)


def add_self_links(graph: Graph) -> Graph:
    """Return a derived graph where every node links to itself exactly once.

    Explicit self-links are dropped first so the synthesized one is the
    only self-link per node. The input graph is left untouched.
    """
    links = [link for link in graph.links if link.source != link.target]
    links.extend(Link(source=node.key, target=node.key) for node in graph.nodes)
    return graph.model_copy(update={"links": tuple(links)})
