"""Notification dispatchers for reminders."""
import logging
import shutil
import subprocess

from rich.console import Console
from rich.panel import Panel

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Shows reminders in the terminal. Always permitted."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def request_permission(self) -> bool:
        return True

    def fire(self, title: str, body: str) -> None:
        self.console.bell()
        self.console.print(Panel(body, title=title, border_style="magenta"))


class DesktopNotifier:
    """Desktop notifications through notify-send, when it is installed."""

    def __init__(self, command: str = "notify-send"):
        self.command = command

    def request_permission(self) -> bool:
        return shutil.which(self.command) is not None

    def fire(self, title: str, body: str) -> None:
        if not self.request_permission():
            logger.debug("%s not available, reminder skipped", self.command)
            return
        try:
            subprocess.run([self.command, title, body], check=True, timeout=10)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Could not show desktop notification: %s", e)


def default_notifier(console: Console = None):
    desktop = DesktopNotifier()
    if desktop.request_permission():
        return desktop
    return ConsoleNotifier(console)
