"""Tests for the Rich console factory."""

from cglctl.output.console import CGL_THEME, create_console, get_output, style_for_status


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_default_width(self) -> None:
        assert create_console().width == 120

    def test_status_styles_defined(self) -> None:
        for status in ("draft", "review", "published", "archived"):
            style = style_for_status(status)
            assert style in CGL_THEME.styles

    def test_unknown_status(self) -> None:
        assert style_for_status("lost") == ""
