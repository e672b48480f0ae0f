"""Rich Console that degrades report glyphs on non-UTF-8 terminals."""
from rich.console import Console
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console wrapper that sanitizes Unicode output for Windows compatibility.

    Inherits from Rich's Console and overrides print() to replace report
    glyphs with ASCII equivalents when the terminal is not UTF-8 capable.
    """

    def __init__(self, *args, **kwargs):
        self._needs_sanitization = not is_utf8_capable()

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj, utf8=False) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)
