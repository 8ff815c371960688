"""Small string helpers."""

from __future__ import annotations

from collections.abc import Iterable

_TRUE_WORDS = frozenset({"1", "t", "true"})


def string_contains(array: Iterable[str], needle: str) -> bool:
    """Return True when ``needle`` is one of the items of ``array``."""
    return needle in array


def string_to_bool(s: str) -> bool:
    """Read a boolean from text, treating anything unrecognised as False.

    Accepted true values are ``1``, ``t`` and ``true`` in any case, with
    surrounding whitespace ignored.
    """
    return s.strip().lower() in _TRUE_WORDS