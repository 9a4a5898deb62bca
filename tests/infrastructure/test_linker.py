"""Tests for namespace directory construction."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgstore.domain.errors import LinkError
from pkgstore.domain.graph import Graph, Link, Node, add_self_links
from pkgstore.infrastructure.linker import link_nodes, plan_namespaces, rebuild_namespace
from tests.conftest import resolves_to


def _installed(store: Path, *keys: str) -> dict[str, Path]:
    location_map = {}
    for key in keys:
        path = store / key
        path.mkdir()
        location_map[key] = path
    return location_map


def _graph(names: dict[str, str], links: list[tuple[str, str]]) -> Graph:
    return Graph(
        nodes=tuple(Node(key=k, name=n, location=Path("/unused") / k) for k, n in names.items()),
        links=tuple(Link(source=s, target=t) for s, t in links),
    )


class TestPlanNamespaces:
    def test_groups_entries_per_source(self, store: Path) -> None:
        location_map = _installed(store, "a", "b", "c")
        graph = _graph(
            {"a": "foo", "b": "bar", "c": "@s/baz"},
            [("a", "b"), ("a", "c"), ("b", "a")],
        )
        plan = plan_namespaces(graph, location_map)
        assert plan == {
            "a": {"bar": store / "b", "@s/baz": store / "c"},
            "b": {"foo": store / "a"},
        }


class TestLinkNodes:
    def test_every_link_resolves(self, store: Path) -> None:
        location_map = _installed(store, "a", "b", "c")
        graph = add_self_links(
            _graph(
                {"a": "foo", "b": "bar", "c": "baz"},
                [("a", "b"), ("a", "c"), ("b", "c"), ("c", "a")],
            )
        )
        count = link_nodes(graph, location_map)
        assert count == len(graph.links)
        for lk in graph.links:
            name = graph.node_index()[lk.target].name
            entry = location_map[lk.source] / "node_modules" / name
            assert entry.is_symlink()
            assert resolves_to(entry, location_map[lk.target])

    def test_many_links_from_one_source_all_survive(self, store: Path) -> None:
        keys = [f"k{i}" for i in range(30)]
        location_map = _installed(store, "root", *keys)
        names = {"root": "root", **{k: f"dep-{k}" for k in keys}}
        graph = _graph(names, [("root", k) for k in keys])
        link_nodes(graph, location_map, max_workers=8)
        entries = sorted(p.name for p in (store / "root" / "node_modules").iterdir())
        assert entries == sorted(f"dep-{k}" for k in keys)

    def test_scoped_name(self, store: Path) -> None:
        location_map = _installed(store, "a", "b")
        link_nodes(_graph({"a": "foo", "b": "@scope/bar"}, [("a", "b")]), location_map)
        assert resolves_to(store / "a" / "node_modules" / "@scope" / "bar", store / "b")

    def test_existing_namespace_replaced(self, store: Path) -> None:
        location_map = _installed(store, "a", "b")
        stale = store / "a" / "node_modules" / "stale"
        stale.mkdir(parents=True)
        link_nodes(_graph({"a": "foo", "b": "bar"}, [("a", "b")]), location_map)
        assert not stale.exists()
        assert resolves_to(store / "a" / "node_modules" / "bar", store / "b")

    def test_custom_namespace_dir(self, store: Path) -> None:
        location_map = _installed(store, "a", "b")
        link_nodes(
            _graph({"a": "foo", "b": "bar"}, [("a", "b")]),
            location_map,
            namespace_dir="deps",
        )
        assert resolves_to(store / "a" / "deps" / "bar", store / "b")

    def test_no_links(self, store: Path) -> None:
        location_map = _installed(store, "a")
        assert link_nodes(_graph({"a": "foo"}, []), location_map) == 0
        assert not (store / "a" / "node_modules").exists()

    def test_target_is_not_deleted_through_symlink(self, store: Path) -> None:
        location_map = _installed(store, "a", "b")
        (store / "b" / "keep.txt").write_text("x")
        graph = _graph({"a": "foo", "b": "bar"}, [("a", "b")])
        link_nodes(graph, location_map)
        link_nodes(graph, location_map)
        assert (store / "b" / "keep.txt").exists()


class TestRebuildNamespace:
    def test_failure_raises_link_error(self, tmp_path: Path) -> None:
        with pytest.raises(LinkError) as exc_info:
            rebuild_namespace(tmp_path / "missing", {"foo": tmp_path})
        assert exc_info.value.code == "LINK_FAILED"

    def test_namespace_file_replaced(self, store: Path) -> None:
        (store / "node_modules").write_text("not a directory")
        rebuild_namespace(store, {"foo": store})
        assert (store / "node_modules").is_dir()
