"""
Prompt adapter — how the installer asks the operator things.

Services depend on the ``InputProvider`` protocol only. The CLI wires
in ``TerminalInput``; tests (and anything embedding the installer)
pass a ``ScriptedInput`` with the answers up front.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

import click


class InputProvider(Protocol):
    """Anything that can answer a question."""

    def ask(self, prompt: str, *, secret: bool = False) -> str:
        """Return the operator's answer to *prompt* (may be empty)."""
        ...


class TerminalInput:
    """Ask on the controlling terminal via click."""

    def ask(self, prompt: str, *, secret: bool = False) -> str:
        return click.prompt(
            click.style(prompt, bold=True),
            default="",
            show_default=False,
            hide_input=secret,
            prompt_suffix=" ",
        )


class ScriptedInput:
    """Replay canned answers in order.

    ``asked`` records every prompt, so callers can check what was asked.

    Raises:
        RuntimeError: When more questions are asked than answers given.
    """

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers = list(answers)
        self.asked: list[str] = []

    def ask(self, prompt: str, *, secret: bool = False) -> str:
        self.asked.append(prompt)
        if not self._answers:
            raise RuntimeError(f"No scripted answer left for prompt: {prompt!r}")
        return self._answers.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._answers)


_YES = ("y", "yes")
_NO = ("n", "no")


def confirm(provider: InputProvider, prompt: str, *, default: bool) -> bool:
    """Ask a yes/no question until the answer is recognisable.

    An empty answer takes *default*.
    """
    suffix = "[Y/n]:" if default else "[y/N]:"
    while True:
        answer = provider.ask(f"{prompt} {suffix}").strip().lower()
        if not answer:
            return default
        if answer in _YES:
            return True
        if answer in _NO:
            return False
        click.echo("Please answer yes (y) or no (n).")
