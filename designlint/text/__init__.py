"""Text ranges and line/column mapping."""

from designlint.text.text import LineIndex, TextRange

__all__ = ["LineIndex", "TextRange"]
