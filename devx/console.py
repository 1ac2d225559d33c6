from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape


def _force_terminal(color: str) -> Optional[bool]:
    if color == "always":
        return True
    if color == "never":
        return False
    return None


class Output:
    """Terminal output for devx commands.

    Headings are bold, detail lines carry a ``- `` prefix and secondary values
    (commit ids, echoed commands) are dimmed. Errors go to stderr.
    """

    def __init__(self, color: str = "auto", verbose: bool = False, file=None, err_file=None):
        self.verbose = verbose
        no_color = color == "never" or (color == "auto" and bool(os.environ.get("NO_COLOR")))
        force = _force_terminal(color)
        system = "standard" if color == "always" else "auto"
        self.console = Console(file=file, force_terminal=force, color_system=system, no_color=no_color, highlight=False, soft_wrap=True)
        self.err_console = Console(
            file=err_file if err_file is not None else (file if file is not None else sys.stderr),
            force_terminal=force,
            color_system=system,
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
        )

    def heading(self, text: str) -> None:
        self.console.print(f"[bold]{escape(text)}[/bold]")

    def line(self, text: str) -> None:
        self.console.print(escape(text))

    def item(self, text: str, detail: Optional[str] = None) -> None:
        if detail is None:
            self.console.print(f"- {escape(text)}")
            return
        self.console.print(f"- {escape(text)}: [dim]{escape(detail)}[/dim]")

    def labelled(self, label: str, value: str) -> None:
        self.console.print(f"[bold]{escape(label)}[/bold]: {escape(value)}")

    def command(self, argv) -> None:
        if not self.verbose:
            return
        self.console.print(f"[dim]$ {escape(' '.join(str(a) for a in argv))}[/dim]")

    def error(self, text: str) -> None:
        self.err_console.print(f"[bold red]error:[/bold red] {escape(text)}")


_default: Optional[Output] = None


def get_output() -> Output:
    global _default
    if _default is None:
        _default = Output()
    return _default


def set_output(out: Output) -> None:
    global _default
    _default = out
