"""Tests for the diagnostic notifier."""

import io
import logging

import pytest
from rich.console import Console

from apod_client.notifier import Notifier


@pytest.fixture
def output() -> io.StringIO:
    """Return a buffer standing in for the terminal."""
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """Return a console writing to the buffer."""
    return Console(file=output, width=120)


class TestNotifier:
    """Test notifier channels."""

    def test_both_channels(
        self, console: Console, output: io.StringIO, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a message reaches the console and the log."""
        notifier = Notifier(console)

        with caplog.at_level(logging.DEBUG, logger="apod_client.notifier"):
            notifier.notify("Loaded Nebula")

        assert "Loaded Nebula" in output.getvalue()
        assert "Loaded Nebula" in caplog.text

    def test_channels_disabled(
        self, console: Console, output: io.StringIO, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that disabled channels stay silent."""
        notifier = Notifier(console, log_enabled=False, toast_enabled=False)

        with caplog.at_level(logging.DEBUG, logger="apod_client.notifier"):
            notifier.notify("hidden")

        assert output.getvalue() == ""
        assert "hidden" not in caplog.text

    def test_per_call_override(
        self, console: Console, output: io.StringIO, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that per-call flags override the defaults."""
        notifier = Notifier(console, toast_enabled=False)

        with caplog.at_level(logging.DEBUG, logger="apod_client.notifier"):
            notifier.notify("shown", toast=True, log=False)

        assert "shown" in output.getvalue()
        assert "shown" not in caplog.text

    def test_markup_is_not_interpreted(self, console: Console, output: io.StringIO) -> None:
        """Test that brackets in a message are printed as-is."""
        Notifier(console, log_enabled=False).notify("[bold]literal[/bold]")

        assert "[bold]literal[/bold]" in output.getvalue()

    def test_non_string_message(self, console: Console, output: io.StringIO) -> None:
        """Test that any object is converted to text."""
        Notifier(console, log_enabled=False).notify(None)

        assert "None" in output.getvalue()
