# Standard library
from datetime import UTC, datetime
from typing import Any

# Third-party
from rich.console import Console
from rich.pretty import Pretty

# Local imports
from vertexdb.core.models import LogSink
from vertexdb.core.utils import serialize

# -----------------------------
# Operation Logger
# -----------------------------


class OperationLogger:
    """Emits one event per store operation.

    A callable sink receives ``"[<timestamp>] <operation>: <json details>"``.
    ``True`` prints the event to a Rich console on stderr. ``False`` is silent.
    """

    def __init__(self, setting: bool | LogSink = False) -> None:
        self.setting: bool | LogSink = setting
        self.console = Console(stderr=True)

    @property
    def enabled(self) -> bool:
        return callable(self.setting) or bool(self.setting)

    def log(self, operation: str, details: dict[str, Any]) -> None:
        if not self.enabled:
            return

        timestamp: str = datetime.now(UTC).isoformat()
        if callable(self.setting):
            self.setting(f"[{timestamp}] {operation}: {serialize(details, indent=None)}")
            return

        self.console.print(
            f"[dim]\\[{timestamp}][/] [bold cyan]{operation}[/]:",
            Pretty(details),
        )
