"""Line-oriented XML emission.

The report is produced as a sequence of text lines so that it can be handed
to a Writer in one piece. XmlEmitter tracks open elements, indents by depth,
and refuses to close an element that is not the innermost open one.
"""

from collections.abc import Iterable
from typing import Any
from xml.sax.saxutils import escape

from jacocogen.core.errors import InternalError

INDENT = "\t"

_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


def quote(value: Any) -> str:
    """Render ``value`` as a double-quoted, escaped attribute value."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return '"' + escape(str(value), _ATTR_ENTITIES) + '"'


def attr(name: str, value: Any) -> str:
    return f" {name}={quote(value)}"


def attrs(pairs: Iterable[tuple[str, Any]]) -> str:
    return "".join(attr(name, value) for name, value in pairs)


class XmlEmitter:
    """Accumulates indented XML lines with balanced open/close tracking."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._open: list[str] = []

    @property
    def lines(self) -> list[str]:
        return self._lines

    @property
    def depth(self) -> int:
        return len(self._open)

    def println(self, text: str) -> None:
        """Write a raw line at column zero."""
        self._lines.append(text)

    def open(self, tag: str, *pairs: tuple[str, Any]) -> None:
        self._lines.append(f"{INDENT * self.depth}<{tag}{attrs(pairs)}>")
        self._open.append(tag)

    def empty(self, tag: str, *pairs: tuple[str, Any]) -> None:
        self._lines.append(f"{INDENT * self.depth}<{tag}{attrs(pairs)}/>")

    def close(self, tag: str) -> None:
        if not self._open or self._open[-1] != tag:
            current = self._open[-1] if self._open else None
            raise InternalError.unexpected(
                f"closing <{tag}> while <{current}> is open", tag=tag, open=current
            )
        self._open.pop()
        self._lines.append(f"{INDENT * self.depth}</{tag}>")

    def finish(self) -> list[str]:
        """Return the lines, checking that every element was closed."""
        if self._open:
            raise InternalError.unexpected(
                "unclosed elements at end of document", open=list(self._open)
            )
        return self._lines
