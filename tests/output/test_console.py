"""Tests for Rich Console factory and theme."""

from io import StringIO

from todoctl.output.console import TODO_THEME, create_console, get_output, style_for_status


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80

    def test_default_width(self) -> None:
        assert create_console().width == 120


class TestStyleForStatus:
    def test_known_statuses(self) -> None:
        for status in ("active", "completed", "canceled", "pending", "sent", "dismissed"):
            assert style_for_status(status) == f"todo.status.{status}"
            assert style_for_status(status) in TODO_THEME.styles

    def test_unknown_status(self) -> None:
        assert style_for_status("archived") == ""
