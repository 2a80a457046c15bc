"""Python host document backed by libcst.

``__init__`` plays the constructor: it is reported under the class name with
public access, and its parameters exclude ``self``. Fields are class-level
assignments (annotated or not) plus ``self.<name>`` assignments made directly
in ``__init__``. New declarations go after the class docstring; assignments
are appended after the last statement of ``__init__``.
"""

import logging
from typing import List, Mapping, Optional, Sequence

import libcst as cst
from libcst.metadata import CodeRange, MetadataWrapper, PositionProvider

from fieldinject.core.field_synthesizer import PythonDialect
from fieldinject.core.models import (
    Access,
    ClassModel,
    ConstructorModel,
    FieldModel,
    Member,
    MemberKind,
    MethodModel,
    Parameter,
    TextPoint,
)
from fieldinject.core.options import InjectionOptions
from fieldinject.hosts.text_buffer import BufferPoint, TextBuffer

logger = logging.getLogger(__name__)

INIT_METHOD_NAME = "__init__"


def python_access(name: str) -> Access:
    """Private for ``_name`` and ``__name``, public otherwise (dunders included)."""
    if name.startswith("__") and name.endswith("__"):
        return Access.PUBLIC
    return Access.PRIVATE if name.startswith("_") else Access.PUBLIC


def is_docstring(stmt: cst.BaseStatement) -> bool:
    """Check whether a statement is a bare string expression."""
    if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
        return False
    expr = stmt.body[0]
    return isinstance(expr, cst.Expr) and isinstance(
        expr.value, (cst.SimpleString, cst.ConcatenatedString)
    )


class _ClassCollector(cst.CSTVisitor):
    """Collects every class definition, nested ones included."""

    def __init__(self) -> None:
        self.classes: List[cst.ClassDef] = []

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:  # noqa: N802
        self.classes.append(node)
        return True


class _SelfAssignmentCollector(cst.CSTVisitor):
    """Collects ``self.<name>`` assignment targets, skipping nested scopes."""

    def __init__(self, module: cst.Module) -> None:
        self.module = module
        self.fields: List[FieldModel] = []

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:  # noqa: N802
        return False

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:  # noqa: N802
        return False

    def _add(self, target: cst.BaseExpression, type_text: str = "") -> None:
        if (
            isinstance(target, cst.Attribute)
            and isinstance(target.value, cst.Name)
            and target.value.value == "self"
        ):
            name = target.attr.value
            self.fields.append(FieldModel(name, type_text, python_access(name)))

    def visit_Assign(self, node: cst.Assign) -> None:  # noqa: N802
        for target in node.targets:
            self._add(target.target)

    def visit_AnnAssign(self, node: cst.AnnAssign) -> None:  # noqa: N802
        self._add(node.target, self.module.code_for_node(node.annotation.annotation))


class PythonDocument:
    """Exposes Python source as class models the injection core can edit.

    Example:
        document = PythonDocument(source)
        TransformDriver(document, document.dialect).run(line=3)
    """

    dialect = PythonDialect()

    def __init__(self, text: str, options: Optional[InjectionOptions] = None) -> None:
        """Initialize the document.

        Args:
            text: Python source code
            options: Run settings (indentation always follows the code)
        """
        self.buffer = TextBuffer(text)
        self.writer_lock = self.buffer.writer_lock
        self.newline = self.buffer.newline
        self.options = options or InjectionOptions()

    @property
    def text(self) -> str:
        return self.buffer.text

    def class_at(self, line: int, column: int) -> Optional[ClassModel]:
        """Return the innermost class enclosing a caret position.

        Raises:
            libcst.ParserSyntaxError: If the source does not parse
        """
        wrapper = MetadataWrapper(cst.parse_module(self.buffer.text))
        positions = wrapper.resolve(PositionProvider)
        collector = _ClassCollector()
        wrapper.module.visit(collector)

        caret = (line, column - 1)
        containing = [
            node
            for node in collector.classes
            if (positions[node].start.line, positions[node].start.column)
            <= caret
            <= (positions[node].end.line, positions[node].end.column)
        ]
        if not containing:
            logger.debug("No class encloses line %d, column %d", line, column)
            return None
        innermost = max(containing, key=lambda n: (positions[n].start.line, positions[n].start.column))
        return _ClassModelBuilder(self.buffer, wrapper.module, positions).build(innermost)

    def reformat(self, start: TextPoint, end: TextPoint) -> None:
        """Strip trailing whitespace from the lines between two points.

        Raises:
            TypeError: If the points do not belong to a text buffer
        """
        if not isinstance(start, BufferPoint) or not isinstance(end, BufferPoint):
            raise TypeError(f"Expected buffer points, got {type(start).__name__} and {type(end).__name__}")
        text = self.buffer.text
        first = self.buffer.line_start_of(start.offset)
        last = text.find("\n", end.offset)
        last = len(text) if last == -1 else last
        lines = text[first:last].split("\n")
        stripped = "\n".join(
            line.rstrip() + ("\r" if line.endswith("\r") else "") for line in lines
        )
        if stripped != text[first:last]:
            self.buffer.replace(first, last, stripped)


class _ClassModelBuilder:
    def __init__(
        self,
        buffer: TextBuffer,
        module: cst.Module,
        positions: Mapping[cst.CSTNode, CodeRange],
    ) -> None:
        self.buffer = buffer
        self.module = module
        self.positions = positions

    def _line_offset(self, line: int) -> int:
        starts = self.buffer.line_starts()
        return starts[line - 1] if line <= len(starts) else len(self.buffer.text)

    def _start_offset(self, node: cst.CSTNode) -> int:
        start = self.positions[node].start
        return self.buffer.offset_of(start.line, start.column + 1)

    def _end_offset(self, node: cst.CSTNode) -> int:
        end = self.positions[node].end
        return self.buffer.offset_of(end.line, end.column + 1)

    def _block_start(self, statements: Sequence[cst.BaseStatement]) -> int:
        """Offset of the first line after a leading docstring."""
        if statements and is_docstring(statements[0]):
            if len(statements) == 1:
                return self._line_offset(self.positions[statements[0]].end.line + 1)
            statements = statements[1:]
        first = statements[0]
        decorators = getattr(first, "decorators", ())
        anchor = decorators[0] if decorators else first
        line = self.positions[anchor].start.line - len(getattr(first, "leading_lines", ()))
        return self._line_offset(line)

    def _needs_blank_line(self, statements: Sequence[cst.BaseStatement]) -> bool:
        """True when lines inserted at the block start would touch a def or class."""
        if statements and is_docstring(statements[0]):
            statements = statements[1:]
        if not statements or not isinstance(statements[0], (cst.FunctionDef, cst.ClassDef)):
            return False
        leading = statements[0].leading_lines
        return not leading or leading[0].comment is not None

    def _block_indent(self, statements: Sequence[cst.BaseStatement]) -> str:
        return self.buffer.indentation_at(self._start_offset(statements[0]))

    def build(self, node: cst.ClassDef) -> ClassModel:
        start = self.buffer.point_at(self._start_offset(node))
        end = self.buffer.point_at(self._end_offset(node))
        if not isinstance(node.body, cst.IndentedBlock):
            return ClassModel(node.name.value, start, end, end, ())

        statements = node.body.body
        body_start = self.buffer.line_point(
            self._block_start(statements),
            self._block_indent(statements),
            blank_line_after=self._needs_blank_line(statements),
        )
        members: List[Member] = []
        for stmt in statements:
            members.extend(self._members(node.name.value, stmt, body_start))
        return ClassModel(node.name.value, start, body_start, end, tuple(members))

    def _members(self, class_name: str, stmt: cst.BaseStatement, body_start: TextPoint) -> List[Member]:
        if isinstance(stmt, cst.SimpleStatementLine):
            return list(self._class_fields(stmt))
        if isinstance(stmt, cst.FunctionDef):
            name = stmt.name.value
            if name == INIT_METHOD_NAME:
                constructor = self._constructor(class_name, stmt, body_start)
                collector = _SelfAssignmentCollector(self.module)
                stmt.body.visit(collector)
                return [constructor, *collector.fields]
            kind = MemberKind.METHOD
            if any(_decorator_name(d) == "property" for d in stmt.decorators):
                kind = MemberKind.PROPERTY
            return [MethodModel(name, python_access(name), _parameters(self.module, stmt)[1:], kind)]
        if isinstance(stmt, cst.ClassDef):
            name = stmt.name.value
            return [MethodModel(name, python_access(name), (), MemberKind.OTHER)]
        return []

    def _class_fields(self, stmt: cst.SimpleStatementLine) -> List[FieldModel]:
        fields = []
        for small in stmt.body:
            if isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
                name = small.target.value
                type_text = self.module.code_for_node(small.annotation.annotation)
                fields.append(FieldModel(name, type_text, python_access(name)))
            elif isinstance(small, cst.Assign):
                for target in small.targets:
                    if isinstance(target.target, cst.Name):
                        name = target.target.value
                        fields.append(FieldModel(name, "", python_access(name)))
        return fields

    def _constructor(self, class_name: str, node: cst.FunctionDef, class_body_start: TextPoint) -> ConstructorModel:
        body_start: Optional[BufferPoint] = None
        body_end: Optional[BufferPoint] = None
        if isinstance(node.body, cst.IndentedBlock):
            statements = node.body.body
            indent = self._block_indent(statements)
            body_start = self.buffer.line_point(self._block_start(statements), indent)
            last_line = self.positions[statements[-1]].end.line
            body_end = self.buffer.line_point(self._line_offset(last_line + 1), indent)

        return ConstructorModel(
            name=class_name,
            access=Access.PUBLIC,
            parameters=_parameters(self.module, node)[1:],
            start=self.buffer.point_at(self._start_offset(node)),
            end=self.buffer.point_at(self._end_offset(node)),
            body_start=body_start,
            body_end=body_end,
            class_body_start=class_body_start,
        )


def _decorator_name(decorator: cst.Decorator) -> str:
    expr = decorator.decorator
    if isinstance(expr, cst.Name):
        return expr.value
    if isinstance(expr, cst.Attribute):
        return expr.attr.value
    return ""


def _parameters(module: cst.Module, node: cst.FunctionDef) -> tuple[Parameter, ...]:
    """Return positional and keyword-only parameters, ``self`` included."""
    params = node.params
    result = []
    for param in (*params.posonly_params, *params.params, *params.kwonly_params):
        annotation = module.code_for_node(param.annotation.annotation) if param.annotation else ""
        result.append(Parameter(param.name.value, annotation))
    return tuple(result)
