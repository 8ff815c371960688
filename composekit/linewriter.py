"""A writable sink that hands complete lines to a callback."""

from __future__ import annotations

from collections.abc import Callable


class SplitWriter:
    """Collect written data and pass each newline-terminated line to a consumer.

    Whatever is left without a trailing newline is passed on when the writer
    is closed.
    """

    def __init__(self, consumer: Callable[[str], None]) -> None:
        self._consumer = consumer
        self._pending = bytearray()

    def write(self, data: bytes | bytearray | str) -> int:
        """Append ``data`` and emit every complete line; return the bytes taken."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._pending += data
        *complete, rest = self._pending.split(b"\n")
        self._pending = bytearray(rest)
        for line in complete:
            self._consumer(line.decode("utf-8", errors="replace"))
        return len(data)

    def close(self) -> None:
        """Emit any unterminated remainder."""
        if self._pending:
            remainder = bytes(self._pending)
            self._pending.clear()
            self._consumer(remainder.decode("utf-8", errors="replace"))

    def __enter__(self) -> SplitWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def get_writer(consumer: Callable[[str], None]) -> SplitWriter:
    """Return a writer that splits its input into lines for ``consumer``."""
    return SplitWriter(consumer)