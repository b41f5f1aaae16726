"""Tests for console.py module."""

from unittest.mock import patch

import pytest
from rich.panel import Panel

from kube_cert_init import console


class TestConsoleOutput:
    """Tests for console output functions."""

    @pytest.mark.parametrize(
        "func,symbol",
        [
            (console.info, "ℹ"),
            (console.success, "✓"),
            (console.warning, "⚠"),
            (console.error, "✗"),
            (console.action, "→"),
            (console.step, "•"),
        ],
    )
    def test_message_format(self, func, symbol):
        """Test each level logs its symbol followed by the message."""
        with patch.object(console.console, "log") as mock_log:
            func("Test message")
            mock_log.assert_called_once()
            call_arg = mock_log.call_args[0][0]
            assert symbol in call_arg
            assert call_arg.endswith("Test message")

    def test_highlight_returns_markup(self):
        """Test highlight returns Rich markup."""
        result = console.highlight("important")
        assert result == "[highlight]important[/highlight]"

    def test_output_goes_to_stderr(self):
        """Test progress output does not mix with stdout."""
        assert console.console.stderr


class TestConsoleSummaryPanel:
    """Tests for summary panel."""

    def test_summary_panel(self):
        """Test summary panel renders."""
        with patch.object(console.console, "print") as mock_print:
            console.summary_panel("Test Summary", {"Key1": "Value1", "Key2": "Value2"})
            mock_print.assert_called_once()
            assert isinstance(mock_print.call_args[0][0], Panel)


class TestConsoleMarkup:
    """Tests for text that looks like Rich markup."""

    def test_highlight_escapes_markup(self):
        """Test bracketed text is shown literally inside a highlight."""
        assert console.highlight("[/x]") == "[highlight]\\[/x][/highlight]"

    def test_summary_panel_escapes_values(self):
        """Test values with closing tags render without errors."""
        with console.console.capture() as capture:
            console.summary_panel("Summary", {"Output": "[/x]"})
        assert "[/x]" in capture.get()
