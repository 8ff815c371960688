"""Progress writers that render events on a terminal or as plain lines."""

from __future__ import annotations

import abc
import contextlib
import contextvars
import dataclasses
import shutil
import sys
import threading
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TextIO

from composekit.events import Event, EventStatus
from composekit.spinner import Spinner

MODE_AUTO = "auto"
MODE_TTY = "tty"
MODE_PLAIN = "plain"

# Rendering mode used by new_writer() when no mode is given.
default_mode = MODE_AUTO

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_RESET = "\x1b[0m"
_WHITE = "\x1b[37m"
_BLUE = "\x1b[34m"
_RED = "\x1b[31m"
_UP_ONE = "\x1b[1A"
_DOWN_ONE = "\x1b[1B"
_COLUMN_ZERO = "\x1b[0G"

_TICK = 0.1


def _apply(text: str, color: str) -> str:
    return color + text + _RESET


def _format(msg: str, args: tuple) -> str:
    return msg % args if args else msg


class Writer(abc.ABC):
    """Something that shows progress events."""

    @abc.abstractmethod
    def start(self) -> None:
        """Render until stop() is called."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Ask a running start() to finish."""

    @abc.abstractmethod
    def event(self, event: Event) -> None:
        """Record one event."""

    @abc.abstractmethod
    def events(self, events: Iterable[Event]) -> None:
        """Record several events in order."""

    @abc.abstractmethod
    def tail_msgf(self, msg: str, *args: object) -> None:
        """Record a message to show at the end."""


@dataclasses.dataclass
class NoopWriter(Writer):
    """A writer that discards everything."""

    def start(self) -> None:
        return None

    def stop(self) -> None:
        return None

    def event(self, event: Event) -> None:
        return None

    def events(self, events: Iterable[Event]) -> None:
        return None

    def tail_msgf(self, msg: str, *args: object) -> None:
        return None


class PlainWriter(Writer):
    """Write each event as a line of text."""

    def __init__(self, out: TextIO) -> None:
        self._out = out
        self._done = threading.Event()

    def start(self) -> None:
        self._done.wait()

    def stop(self) -> None:
        self._done.set()

    def event(self, event: Event) -> None:
        print(event.id, event.text, event.status_text, file=self._out)

    def events(self, events: Iterable[Event]) -> None:
        for event in events:
            self.event(event)

    def tail_msgf(self, msg: str, *args: object) -> None:
        print(msg, *args, file=self._out)


class TTYWriter(Writer):
    """Redraw a block of progress lines on a terminal."""

    def __init__(self, out: TextIO) -> None:
        self._out = out
        self._events: dict[str, Event] = {}
        self._event_ids: list[str] = []
        self._repeated = False
        self._num_lines = 0
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._tail_events: list[str] = []

    def __getitem__(self, event_id: str) -> Event:
        with self._lock:
            return self._events[event_id]

    def __contains__(self, event_id: object) -> bool:
        with self._lock:
            return event_id in self._events

    def start(self) -> None:
        while not self._done.wait(_TICK):
            self._print()
        self._print()
        self._print_tail_events()

    def stop(self) -> None:
        self._done.set()

    def event(self, event: Event) -> None:
        with self._lock:
            if event.id not in self._event_ids:
                self._event_ids.append(event.id)
            last = self._events.get(event.id)
            if last is not None:
                if event.status in (EventStatus.DONE, EventStatus.ERROR) and last.status != event.status:
                    last.stop()
                last.status = event.status
                last.text = event.text
                last.status_text = event.status_text
                # Setting or clearing the parent is fine; swapping it would flicker.
                if not last.parent_id or not event.parent_id:
                    last.parent_id = event.parent_id
            else:
                stored = dataclasses.replace(
                    event, start_time=time.monotonic(), end_time=None, spinner=Spinner()
                )
                if stored.status in (EventStatus.DONE, EventStatus.ERROR):
                    stored.stop()
                self._events[event.id] = stored

    def events(self, events: Iterable[Event]) -> None:
        for event in events:
            self.event(event)

    def tail_msgf(self, msg: str, *args: object) -> None:
        with self._lock:
            self._tail_events.append(_format(msg, args))

    def _print_tail_events(self) -> None:
        with self._lock:
            for msg in self._tail_events:
                print(msg, file=self._out)
            self._out.flush()

    def _print(self) -> None:
        with self._lock:
            if not self._event_ids:
                return
            terminal_width = shutil.get_terminal_size().columns
            moves = _UP_ONE * (self._num_lines + 1)
            if not self._repeated:
                moves += _DOWN_ONE
            self._repeated = True
            out = self._out
            out.write(moves + _COLUMN_ZERO)
            out.write(_HIDE_CURSOR)
            try:
                done = num_done(self._events)
                first_line = f"[+] Running {done}/{self._num_lines}"
                if self._num_lines != 0 and done == self._num_lines:
                    first_line = _apply(first_line, _BLUE)
                out.write(first_line + "\n")

                status_padding = 0
                for event_id in self._event_ids:
                    event = self._events[event_id]
                    length = len(f"{event.id} {event.text}")
                    status_padding = max(status_padding, length)
                    if event.parent_id:
                        status_padding -= 2

                color = sys.platform != "win32"
                count = 0
                for event_id in self._event_ids:
                    event = self._events[event_id]
                    if event.parent_id:
                        continue
                    out.write(line_text(event, "", terminal_width, status_padding, color))
                    count += 1
                    for child_id in self._event_ids:
                        child = self._events[child_id]
                        if child.parent_id == event.id:
                            out.write(line_text(child, "  ", terminal_width, status_padding, color))
                            count += 1
                self._num_lines = count
            finally:
                out.write(_SHOW_CURSOR)
                out.flush()


def line_text(
    event: Event, pad: str, terminal_width: int, status_padding: int, color: bool
) -> str:
    """Render one progress line, ending with the elapsed time and a newline."""
    now = time.monotonic()
    end = now
    if event.status != EventStatus.WORKING:
        end = event.start_time if event.start_time is not None else now
        if event.end_time is not None:
            end = event.end_time
    start = event.start_time if event.start_time is not None else end
    elapsed = end - start

    text_len = len(f"{event.id} {event.text}")
    padding = max(status_padding - text_len, 0)
    # Long statuses (errors) would break the layout, so cut them short.
    max_status_len = terminal_width - text_len - status_padding - 15
    status = event.status_text
    if max_status_len > 0 and len(status) > max_status_len:
        status = status[:max_status_len] + "..."
    spinner = str(event.spinner) if event.spinner is not None else ""
    text = f"{pad} {spinner} {event.id} {event.text}{' ' * padding} {status}"
    timer = f"{elapsed:.1f}s\n"
    line = align(text, timer, terminal_width)

    if not color:
        return line
    if event.status == EventStatus.DONE:
        return _apply(line, _BLUE)
    if event.status == EventStatus.ERROR:
        return _apply(line, _RED)
    return _apply(line, _WHITE)


def num_done(events: Mapping[str, Event] | Iterable[Event]) -> int:
    """Count the events that are done."""
    values = events.values() if isinstance(events, Mapping) else events
    return sum(1 for event in values if event.status == EventStatus.DONE)


def align(left: str, right: str, width: int) -> str:
    """Left-justify ``left`` so that ``right`` ends at column ``width``."""
    field = abs(width - len(right) - 1)
    return f"{left:<{field}} {right}"


_current_writer: contextvars.ContextVar[Writer] = contextvars.ContextVar("progress_writer")


@contextlib.contextmanager
def with_context_writer(writer: Writer) -> Iterator[Writer]:
    """Make ``writer`` the current writer for the duration of the block."""
    token = _current_writer.set(writer)
    try:
        yield writer
    finally:
        _current_writer.reset(token)


def context_writer() -> Writer:
    """Return the current writer, or one that discards everything."""
    try:
        return _current_writer.get()
    except LookupError:
        return NoopWriter()


def _is_terminal(out: TextIO) -> bool:
    isatty = getattr(out, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def new_writer(out: TextIO, mode: str | None = None) -> Writer:
    """Pick a writer for ``out`` according to ``mode``.

    Raises ValueError when a terminal writer is forced on something that is
    not a terminal.
    """
    chosen = default_mode if mode is None else mode
    is_terminal = _is_terminal(out)
    if chosen == MODE_AUTO and is_terminal:
        return TTYWriter(out)
    if chosen == MODE_TTY:
        if not is_terminal:
            raise ValueError("provided file is not a console")
        return TTYWriter(out)
    return PlainWriter(out)


def run(func: Callable[[], object]) -> None:
    """Run ``func`` while a writer renders its progress on standard error."""

    def _without_status() -> str:
        func()
        return ""

    run_with_status(_without_status)


def run_with_status(func: Callable[[], str]) -> str:
    """Run ``func`` while a writer renders its progress; return its status."""
    writer = new_writer(sys.stderr)
    failures: list[BaseException] = []

    def _render() -> None:
        try:
            writer.start()
        except BaseException as exc:  # reported after func finishes
            failures.append(exc)

    thread = threading.Thread(target=_render, name="progress-writer", daemon=True)
    thread.start()
    try:
        with with_context_writer(writer):
            result = func()
    finally:
        writer.stop()
        thread.join()
    if failures:
        raise failures[0]
    return result