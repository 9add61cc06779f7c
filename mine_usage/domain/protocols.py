"""
Protocol definitions for dependency injection and testability.

The registry only ever talks to storage through UsageStore, so the
whole-file backend can be replaced without touching Site or Registry.
"""

from typing import List, Protocol, Sequence


class UsageStore(Protocol):
    """
    Persistence backend for serialized usage lines.
    Implementation: UsageFileStore
    """

    def read_lines(self) -> List[str]:
        """Return every stored line without line terminators ([] if nothing is stored yet)."""
        ...

    def write_lines(self, lines: Sequence[str]) -> None:
        """Replace the stored contents with `lines`. Raises OSError on failure."""
        ...
