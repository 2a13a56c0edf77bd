from __future__ import annotations

from typing import List, Tuple

DEFAULT_SEGMENT_SIZE = 1024


class Tape:
    """Tape of zero-filled segments that grows lazily in both directions.

    Segments live in two lists: ``_right`` holds indices 0, 1, 2, ... and
    ``_left`` holds -1, -2, ... in that order. Visited segments always form a
    contiguous index range, so stepping past either end of the range means
    appending exactly one new segment to the matching list.
    """

    def __init__(self, segment_size: int = DEFAULT_SEGMENT_SIZE) -> None:
        if segment_size < 2:
            raise ValueError("segment_size must be at least 2")
        self.segment_size = segment_size
        self._right: List[bytearray] = [bytearray(segment_size)]
        self._left: List[bytearray] = []
        self._index = 0
        self._segment = self._right[0]
        self.offset = segment_size // 2

    @property
    def segment_index(self) -> int:
        return self._index

    @property
    def segment_count(self) -> int:
        return len(self._right) + len(self._left)

    @property
    def position(self) -> int:
        """Head position relative to the starting cell."""
        return self._index * self.segment_size + self.offset - self.segment_size // 2

    def shift_right(self, distance: int) -> None:
        offset = self.offset + distance
        size = self.segment_size
        while offset >= size:
            self._index += 1
            if self._index >= 0:
                if self._index == len(self._right):
                    self._right.append(bytearray(size))
                self._segment = self._right[self._index]
            else:
                self._segment = self._left[-self._index - 1]
            offset -= size
        self.offset = offset

    def shift_left(self, distance: int) -> None:
        offset = self.offset - distance
        size = self.segment_size
        while offset < 0:
            self._index -= 1
            if self._index < 0:
                slot = -self._index - 1
                if slot == len(self._left):
                    self._left.append(bytearray(size))
                self._segment = self._left[slot]
            else:
                self._segment = self._right[self._index]
            offset += size
        self.offset = offset

    def read(self) -> int:
        return self._segment[self.offset]

    def write(self, value: int) -> None:
        self._segment[self.offset] = value & 0xFF

    def add(self, delta: int) -> None:
        self._segment[self.offset] = (self._segment[self.offset] + delta) & 0xFF

    def cell(self, position: int) -> int:
        """Value at an absolute position; unvisited cells read as 0."""
        absolute = position + self.segment_size // 2
        index, offset = divmod(absolute, self.segment_size)
        if index >= 0:
            if index >= len(self._right):
                return 0
            return self._right[index][offset]
        slot = -index - 1
        if slot >= len(self._left):
            return 0
        return self._left[slot][offset]

    def window(self, radius: int) -> Tuple[int, List[int]]:
        start = self.position - radius
        return start, [self.cell(start + i) for i in range(2 * radius + 1)]


__all__ = ["DEFAULT_SEGMENT_SIZE", "Tape"]
