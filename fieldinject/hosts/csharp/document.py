"""C# host document: structural models and edit points over source text."""

import logging
from typing import List, Optional

from fieldinject.core.field_synthesizer import CSharpDialect
from fieldinject.core.models import (
    ClassModel,
    ConstructorModel,
    FieldModel,
    Member,
    MemberKind,
    MethodModel,
    TextPoint,
)
from fieldinject.core.options import InjectionOptions
from fieldinject.hosts.csharp.formatter import format_range
from fieldinject.hosts.csharp.scanner import ScannedClass, ScannedMember, scan_classes
from fieldinject.hosts.text_buffer import BufferPoint, TextBuffer, detect_indent_unit

logger = logging.getLogger(__name__)


class CSharpDocument:
    """Exposes C# source as class models the injection core can edit.

    Example:
        document = CSharpDocument(source)
        TransformDriver(document, document.dialect).run(line=5)
        updated = document.text
    """

    dialect = CSharpDialect()

    def __init__(self, text: str, options: Optional[InjectionOptions] = None) -> None:
        """Initialize the document.

        Args:
            text: C# source code
            options: Run settings; ``indent_size`` overrides indent detection
        """
        self.buffer = TextBuffer(text)
        self.writer_lock = self.buffer.writer_lock
        self.newline = self.buffer.newline
        options = options or InjectionOptions()
        if options.indent_size:
            self.indent_unit = " " * options.indent_size
        else:
            self.indent_unit = detect_indent_unit(text)

    @property
    def text(self) -> str:
        return self.buffer.text

    def class_at(self, line: int, column: int) -> Optional[ClassModel]:
        """Return the innermost class enclosing a caret position.

        Args:
            line: 1-based line
            column: 1-based column

        Returns:
            The class model, or None if the caret is outside every class

        Raises:
            CSharpSyntaxError: If the source does not parse
        """
        if line < 1 or line > len(self.buffer.line_starts()):
            return None
        offset = self.buffer.offset_of(line, column)
        # Any column of the declaration's first line selects the class
        containing = [
            c
            for c in scan_classes(self.buffer.text)
            if self.buffer.line_start_of(c.start) <= offset < c.end
        ]
        if not containing:
            logger.debug("No class encloses line %d, column %d", line, column)
            return None
        return self._class_model(max(containing, key=lambda c: c.start))

    def reformat(self, start: TextPoint, end: TextPoint) -> None:
        """Re-indent the lines between two points of this document.

        Raises:
            TypeError: If either point does not belong to a text buffer
        """
        if not isinstance(start, BufferPoint) or not isinstance(end, BufferPoint):
            raise TypeError(
                f"Expected buffer points, got {type(start).__name__} and {type(end).__name__}"
            )
        format_range(self.buffer, start.offset, end.offset, self.indent_unit)

    def _after_open_brace(self, brace: int) -> int:
        """Offset where lines inserted after an opening brace begin."""
        text = self.buffer.text
        newline = text.find("\n", brace)
        if newline != -1 and not text[brace + 1 : newline].strip():
            return newline + 1
        return brace + 1

    def _before_close_brace(self, brace: int) -> int:
        """Offset where lines inserted before a closing brace begin."""
        line_start = self.buffer.line_start_of(brace)
        if not self.buffer.text[line_start:brace].strip():
            return line_start
        return brace

    def _inner_indent(self, brace: int) -> str:
        return self.buffer.indentation_at(brace) + self.indent_unit

    def _class_model(self, scanned: ScannedClass) -> ClassModel:
        buffer = self.buffer
        body_start = buffer.line_point(
            self._after_open_brace(scanned.body_open), self._inner_indent(scanned.body_open)
        )
        members: List[Member] = [self._member(m, body_start) for m in scanned.members]
        return ClassModel(
            name=scanned.name,
            start=buffer.point_at(scanned.start),
            body_start=body_start,
            end=buffer.point_at(scanned.end),
            members=tuple(members),
        )

    def _member(self, scanned: ScannedMember, class_body_start: TextPoint) -> Member:
        if scanned.kind is MemberKind.FIELD:
            return FieldModel(scanned.name, scanned.type_text, scanned.access)
        if scanned.kind is not MemberKind.CONSTRUCTOR:
            return MethodModel(scanned.name, scanned.access, tuple(scanned.parameters), scanned.kind)

        body_start = body_end = None
        if scanned.body_open is not None and scanned.body_close is not None:
            body_start = self.buffer.line_point(
                self._after_open_brace(scanned.body_open), self._inner_indent(scanned.body_open)
            )
            body_end = self.buffer.line_point(
                self._before_close_brace(scanned.body_close), self._inner_indent(scanned.body_close)
            )
        return ConstructorModel(
            name=scanned.name,
            access=scanned.access,
            parameters=tuple(scanned.parameters),
            start=self.buffer.point_at(scanned.start),
            end=self.buffer.point_at(scanned.end),
            body_start=body_start,
            body_end=body_end,
            class_body_start=class_body_start,
        )
