"""Tests for the validate command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from pkgstore.cli import cli
from tests.conftest import link, node


def _write(tmp_path: Path, graph: dict) -> Path:
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(graph))
    return path


class TestValidateCommand:
    def test_valid_graph(
        self, cli_runner: CliRunner, tmp_path: Path, make_package: Callable[..., Path]
    ) -> None:
        foo = make_package("foo")
        path = _write(tmp_path, {"nodes": [node("a", "foo", foo)], "links": [link("a", "a")]})
        result = cli_runner.invoke(cli, ["--json", "validate", str(path)])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["op"] == "validate"
        assert payload["data"] == {"nodes": 1, "links": 1, "bins": 0}

    def test_writes_nothing(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        store: Path,
        make_package: Callable[..., Path],
    ) -> None:
        foo = make_package("foo")
        path = _write(tmp_path, {"nodes": [node("a", "foo", foo)]})
        result = cli_runner.invoke(cli, ["validate", str(path), str(store)])
        assert result.exit_code == 0
        assert list(store.iterdir()) == []

    def test_dangling_link(
        self, cli_runner: CliRunner, tmp_path: Path, make_package: Callable[..., Path]
    ) -> None:
        foo = make_package("foo")
        path = _write(tmp_path, {"nodes": [node("a", "foo", foo)], "links": [link("a", "zzz")]})
        result = cli_runner.invoke(cli, ["--json", "validate", str(path)])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "INVALID_LINK_TARGET"
        assert payload["error"]["detail"] == {"source": "a", "target": "zzz"}
