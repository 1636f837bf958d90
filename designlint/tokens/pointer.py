"""JSON pointer fragments addressing nodes of a token tree."""

from __future__ import annotations

from collections.abc import Sequence


def escape_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def segments_to_pointer(segments: Sequence[str]) -> str:
    """Build a `#/a/b` fragment; the root is `#`."""
    if not segments:
        return "#"
    return "#/" + "/".join(escape_segment(segment) for segment in segments)


def pointer_to_segments(pointer: str) -> tuple[str, ...]:
    """Parse a local pointer fragment.

    Accepts `#/a/b`, `/a/b` and `#`. Pointers into other documents are rejected.
    """
    if not pointer.startswith(("#", "/")):
        raise ValueError(f"`{pointer}` is not a local JSON pointer fragment")
    body = pointer[1:] if pointer.startswith("#") else pointer
    if body in ("", "/"):
        return ()
    if not body.startswith("/"):
        raise ValueError(f"`{pointer}` is not a local JSON pointer fragment")
    return tuple(unescape_segment(segment) for segment in body[1:].split("/"))


def pointer_to_path(pointer: str) -> str:
    return ".".join(pointer_to_segments(pointer))


def path_to_pointer(path: str) -> str:
    return segments_to_pointer(path.split(".") if path else [])
