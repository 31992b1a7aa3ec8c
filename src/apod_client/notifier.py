"""Diagnostic sink writing to the log and to the terminal."""

import logging

from rich.console import Console


class Notifier:
    """Sends diagnostic messages to a logger and/or a rich console.

    The console plays the part of a toast: a short message shown to the
    user. Each channel can be switched off by default or per call.
    """

    def __init__(
        self,
        console: Console,
        logger: logging.Logger | None = None,
        log_enabled: bool = True,
        toast_enabled: bool = True,
    ) -> None:
        """Initialize notifier.

        Args:
            console: Console the toast channel prints to
            logger: Logger for the log channel (defaults to this module's)
            log_enabled: Default state of the log channel
            toast_enabled: Default state of the toast channel
        """
        self.console = console
        self.logger = logger or logging.getLogger(__name__)
        self.log_enabled = log_enabled
        self.toast_enabled = toast_enabled

    def notify(
        self,
        message: object,
        *,
        log: bool | None = None,
        toast: bool | None = None,
    ) -> None:
        """Emit a message on the enabled channels.

        Args:
            message: Anything; converted with ``str()``
            log: Override the log channel for this call
            toast: Override the toast channel for this call
        """
        text = str(message)

        if self.log_enabled if log is None else log:
            self.logger.debug(text)

        if self.toast_enabled if toast is None else toast:
            self.console.print(text, style="dim", markup=False, highlight=False)
