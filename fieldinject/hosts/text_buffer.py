"""In-memory document text with live positions.

Positions handed out by a ``TextBuffer`` follow later edits: inserting text
shifts every point after the insertion offset. Points sitting exactly at the
insertion offset stay where they are, except the edit point that performed
the insertion, which moves past the inserted text. Repeated inserts through
one edit point therefore keep their order.
"""

import re
import weakref
from typing import List, Optional, Tuple

from fieldinject.core.exclusive_access import DocumentWriterLock

DEFAULT_INDENT = "    "

_LEADING_WHITESPACE = re.compile(r"[ \t]*")


def detect_newline(text: str) -> str:
    """Return the line terminator used by the text, ``\\n`` by default."""
    return "\r\n" if "\r\n" in text else "\n"


def detect_indent_unit(text: str, default: str = DEFAULT_INDENT) -> str:
    """Guess one indentation level from the indented lines of the text.

    Args:
        text: Document text
        default: Unit returned when no line is indented

    Returns:
        A tab, or the smallest run of leading spaces found
    """
    smallest: Optional[int] = None
    for line in text.splitlines():
        if not line.strip():
            continue
        if line.startswith("\t"):
            return "\t"
        width = len(line) - len(line.lstrip(" "))
        if width and (smallest is None or width < smallest):
            smallest = width
    return " " * smallest if smallest else default


class TextBuffer:
    """Mutable document text shared by all points created from it.

    Example:
        buffer = TextBuffer("class A\\n{\\n}\\n")
        point = buffer.point_at(buffer.offset_of(3, 1))
        with buffer.writer_lock.hold():
            point.create_edit_point().insert("int _a;\\n")
    """

    def __init__(self, text: str) -> None:
        """Initialize the buffer.

        Args:
            text: Initial document text
        """
        self.text = text
        self.newline = detect_newline(text)
        self.writer_lock = DocumentWriterLock()
        self._points: "weakref.WeakSet[BufferPoint]" = weakref.WeakSet()

    def _track(self, point: "BufferPoint") -> None:
        self._points.add(point)

    def point_at(self, offset: int, indent: str = "") -> "BufferPoint":
        """Create a live point at a character offset."""
        return BufferPoint(self, offset, indent)

    def line_point(self, offset: int, indent: str = "", blank_line_after: bool = False) -> "LinePoint":
        """Create a live point whose edit points insert whole indented lines.

        Args:
            offset: Start of the line the text is inserted before
            indent: Indentation prefixed to every inserted line
            blank_line_after: Separate the inserted block from the line that
                follows it with an empty line
        """
        return LinePoint(self, offset, indent, blank_line_after)

    def insert(self, offset: int, text: str, mover: Optional["BufferPoint"] = None) -> None:
        """Insert text and shift the points that follow it.

        Args:
            offset: Insertion offset
            text: Text inserted literally
            mover: Point at ``offset`` that moves past the inserted text
        """
        if not 0 <= offset <= len(self.text):
            raise IndexError(f"Offset {offset} is outside the document")
        self.writer_lock.throw_if_not_held()
        self.text = self.text[:offset] + text + self.text[offset:]
        for point in list(self._points):
            if point.offset > offset or point is mover:
                point.offset += len(text)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace a range of text, moving points after it by the size change."""
        if not 0 <= start <= end <= len(self.text):
            raise IndexError(f"Range {start}-{end} is outside the document")
        self.writer_lock.throw_if_not_held()
        self.text = self.text[:start] + text + self.text[end:]
        delta = len(text) - (end - start)
        for point in list(self._points):
            if point.offset >= end:
                point.offset += delta
            elif point.offset > start:
                point.offset = min(point.offset, start + len(text))

    def line_starts(self) -> List[int]:
        """Return the offset at which each line begins."""
        starts = [0]
        for match in re.finditer("\n", self.text):
            starts.append(match.end())
        return starts

    def offset_of(self, line: int, column: int = 1) -> int:
        """Convert a 1-based line and column to an offset.

        Columns past the end of the line map to its line break, so the
        offset never leaves the requested line.

        Raises:
            ValueError: If the line does not exist
        """
        starts = self.line_starts()
        if not 1 <= line <= len(starts):
            raise ValueError(f"Line {line} is outside the document (1-{len(starts)})")
        line_start = starts[line - 1]
        line_end = starts[line] - 1 if line < len(starts) else len(self.text)
        return min(line_start + max(column, 1) - 1, line_end)

    def position_of(self, offset: int) -> Tuple[int, int]:
        """Convert an offset to a 1-based (line, column) pair."""
        line = self.text.count("\n", 0, offset) + 1
        line_start = self.text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    def line_start_of(self, offset: int) -> int:
        """Return the offset of the start of the line containing offset."""
        return self.text.rfind("\n", 0, offset) + 1

    def indentation_at(self, offset: int) -> str:
        """Return the leading whitespace of the line containing offset."""
        start = self.line_start_of(offset)
        match = _LEADING_WHITESPACE.match(self.text, start)
        return match.group() if match else ""


class BufferPoint:
    """A live position in a ``TextBuffer``."""

    def __init__(self, buffer: TextBuffer, offset: int, indent: str = "") -> None:
        self.buffer = buffer
        self.offset = offset
        self.indent = indent
        buffer._track(self)

    def __repr__(self) -> str:
        line, column = self.buffer.position_of(self.offset)
        return f"{type(self).__name__}(line={line}, column={column})"

    def create_edit_point(self) -> "BufferEditPoint":
        return BufferEditPoint(self.buffer, self.offset, self.indent)


class BufferEditPoint(BufferPoint):
    """Edit point inserting text literally."""

    def insert(self, text: str) -> None:
        self.buffer.insert(self.offset, text, mover=self)

    def char_left(self, count: int = 1) -> None:
        self.offset = max(0, self.offset - count)

    def char_right(self, count: int = 1) -> None:
        self.offset = min(len(self.buffer.text), self.offset + count)


class LinePoint(BufferPoint):
    """Structural anchor whose edit points insert complete lines."""

    def __init__(self, buffer: TextBuffer, offset: int, indent: str = "", blank_line_after: bool = False) -> None:
        super().__init__(buffer, offset, indent)
        self.blank_line_after = blank_line_after

    def create_edit_point(self) -> "LineEditPoint":
        return LineEditPoint(self.buffer, self.offset, self.indent, self.blank_line_after)


class LineEditPoint(BufferEditPoint):
    """Inserts text as whole lines at the anchor's indentation.

    Each non-blank line of the text is prefixed with the anchor's indent. When
    the point is not at the start of a line, a line break is inserted first so
    that the text starts on a line of its own. With ``blank_line_after`` the
    first insertion also adds an empty line below itself, and later
    insertions go above that empty line.
    """

    def __init__(self, buffer: TextBuffer, offset: int, indent: str = "", blank_line_after: bool = False) -> None:
        super().__init__(buffer, offset, indent)
        self.blank_line_after = blank_line_after

    def insert(self, text: str) -> None:
        lines = text.splitlines(keepends=True)
        text = "".join(self.indent + line if line.strip() else line for line in lines)
        if self.offset > 0 and self.buffer.text[self.offset - 1] != "\n":
            text = self.buffer.newline + text
        separator = self.buffer.newline if self.blank_line_after else ""
        super().insert(text + separator)
        if separator:
            self.char_left(len(separator))
            self.blank_line_after = False
