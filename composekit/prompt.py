"""Interactive questions asked on the terminal."""

from __future__ import annotations

import getpass
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TextIO, runtime_checkable

_YES = frozenset({"y", "yes"})
_NO = frozenset({"n", "no"})
_INVALID_REPLY = "Sorry, your reply was invalid."


@runtime_checkable
class UI(Protocol):
    """Ways of asking the user for input."""

    def select(self, message: str, options: Sequence[str]) -> int: ...

    def input(self, message: str, default_value: str) -> str: ...

    def confirm(self, message: str, default_value: bool) -> bool: ...

    def password(self, message: str) -> str: ...


@dataclass
class User:
    """Ask questions on the terminal.

    ``reader`` reads one answer after showing a prompt, like :func:`input`;
    ``password_reader`` does the same without echoing.
    """

    reader: Callable[[str], str] = input
    password_reader: Callable[[str], str] = getpass.getpass
    stream: TextIO | None = field(default=None, repr=False)

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def select(self, message: str, options: Sequence[str]) -> int:
        """Show ``options`` and return the index of the chosen one."""
        if not options:
            raise ValueError("please provide options to select from")
        out = self._out()
        print(f"? {message}", file=out)
        for number, option in enumerate(options, start=1):
            print(f"  {number}) {option}", file=out)
        while True:
            answer = self.reader(f"Choose 1-{len(options)} [1]: ").strip()
            if not answer:
                return 0
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return int(answer) - 1
            if answer in options:
                return list(options).index(answer)
            print(_INVALID_REPLY, file=out)

    def input(self, message: str, default_value: str) -> str:
        """Read free text; an empty answer gives ``default_value``."""
        suffix = f" ({default_value})" if default_value else ""
        answer = self.reader(f"? {message}{suffix} ")
        return answer if answer else default_value

    def confirm(self, message: str, default_value: bool) -> bool:
        """Ask a yes or no question; an empty answer gives ``default_value``."""
        hint = "(Y/n)" if default_value else "(y/N)"
        while True:
            answer = self.reader(f"? {message} {hint} ").strip().lower()
            if not answer:
                return default_value
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            print(_INVALID_REPLY, file=self._out())

    def password(self, message: str) -> str:
        """Read text without echoing it."""
        return self.password_reader(f"? {message} ")