"""
Forward-only read head shared by the lexer (over characters) and the parser (over tokens).

Classes:
    Cursor: Generic cursor over a sequence with one item of lookahead and no backtracking.
"""

from collections.abc import Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


class Cursor(Generic[T]):
    """A single-direction read head over an ordered sequence.

    Attributes:
        items (Sequence[T]): The underlying sequence. Never modified.
        position (int): Index of the current item.
    """

    def __init__(self, items: Sequence[T]) -> None:
        self.items = items
        self.position = 0

    @property
    def current(self) -> T:
        """Returns the current item without consuming it.

        Raises:
            IndexError: If the cursor is exhausted. Check `is_open()` first.
        """
        if self.position >= len(self.items):
            raise IndexError(
                f"CursorError: Attempted to read past end of sequence at position=<{self.position}>"
            )
        return self.items[self.position]

    def peek(self) -> T | None:
        """Returns the current item, or None once exhausted."""
        return self.items[self.position] if self.is_open() else None

    def consume(self) -> T:
        """Returns the current item and advances past it."""
        item = self.current
        self.position += 1
        return item

    def is_open(self) -> bool:
        return self.position < len(self.items)


__all__ = ["Cursor"]
