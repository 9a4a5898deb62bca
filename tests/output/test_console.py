"""Tests for the Rich console factory."""

from pkgstore.output.console import STORE_THEME, create_console, get_output, render_lines


class TestCreateConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("[store.ok]OK[/]")
        assert get_output(console) == "OK\n"

    def test_theme_styles(self) -> None:
        for name in ("store.ok", "store.error", "store.op", "store.code"):
            assert name in STORE_THEME.styles

    def test_width_override(self) -> None:
        assert create_console(width=40).width == 40


class TestRenderLines:
    def test_joins_lines(self) -> None:
        assert render_lines(["[store.op]a[/]", "b"], no_color=True) == "a\nb"

    def test_long_lines_not_wrapped(self) -> None:
        line = "x" * 300
        assert render_lines([line], no_color=True) == line
