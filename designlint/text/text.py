from bisect import bisect_right
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """
    Half-open range [start, end) in text, using python string offsets.

    Invariant:
    - 0 <= start <= end
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError("TextRange positions cannot be negative")
        if self.start > self.end:
            raise ValueError("TextRange invariant violated: start > end")

    def __repr__(self) -> str:
        return f"TextRange({self.start}, {self.end})"


@dataclass(frozen=True, slots=True)
class LineIndex:
    """Maps string offsets to 1-based (line, column) positions.

    Lines are split on `\\n`; a `\\r\\n` pair counts as one break because the
    `\\r` stays at the end of the previous line.
    """

    text: str
    _line_starts: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self):
        starts = [0]
        index = self.text.find("\n")
        while index >= 0:
            starts.append(index + 1)
            index = self.text.find("\n", index + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    def line_col(self, offset: int) -> tuple[int, int]:
        """Return the 1-based line and column of an offset."""
        if offset < 0:
            raise ValueError("Offset cannot be negative")
        clamped = min(offset, len(self.text))
        line = bisect_right(self._line_starts, clamped) - 1
        return line + 1, clamped - self._line_starts[line] + 1
