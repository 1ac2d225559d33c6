from __future__ import annotations

from typing import Optional, Protocol, Sequence

from rich.markup import escape
from rich.prompt import Confirm, Prompt

from .console import Output, get_output
from .errors import PromptAbortedError, ValidationError


class Prompter(Protocol):
    def select(self, message: str, choices: Sequence[str]) -> str:
        raise NotImplementedError

    def confirm(self, message: str, default: bool = False) -> bool:
        raise NotImplementedError


class RichPrompter:
    """Interactive prompts on the terminal.

    ``select`` prints a numbered menu; the answer may be the number or the
    choice itself.
    """

    def __init__(self, out: Optional[Output] = None):
        self.out = out if out is not None else get_output()

    def select(self, message: str, choices: Sequence[str]) -> str:
        options = list(choices)
        if not options:
            raise ValidationError("no choices to select from")

        console = self.out.console
        for i, choice in enumerate(options, start=1):
            console.print(f"  [bold]{i})[/bold] {escape(choice)}")

        accepted = [str(i) for i in range(1, len(options) + 1)] + options
        try:
            answer = Prompt.ask(message, console=console, choices=accepted, show_choices=False)
        except (EOFError, KeyboardInterrupt) as e:
            raise PromptAbortedError("selection cancelled") from e

        if answer.isdigit() and answer not in options:
            return options[int(answer) - 1]
        return answer

    def confirm(self, message: str, default: bool = False) -> bool:
        try:
            return bool(Confirm.ask(message, console=self.out.console, default=default))
        except (EOFError, KeyboardInterrupt) as e:
            raise PromptAbortedError("confirmation cancelled") from e
