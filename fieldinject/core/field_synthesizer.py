"""Turn unresolved constructor parameters into text edit operations.

For every parameter two operations are produced, always as a pair: a field
declaration anchored at the start of the class body and an assignment
anchored at the end of the constructor body. Both follow parameter order:
the driver applies each anchor's operations through a single edit point that
advances past every insertion, so the first parameter's declaration and
assignment come first.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Sequence

from fieldinject.core.models import Anchor, Parameter
from fieldinject.core.name_normalizer import normalize_type_name
from fieldinject.core.naming import derive_field_name

logger = logging.getLogger(__name__)

DECLARATION_ANCHOR = Anchor.CLASS_BODY_START
ASSIGNMENT_ANCHOR = Anchor.CONSTRUCTOR_BODY_END


@dataclass(frozen=True)
class EditOperation:
    """Text to insert at a structural anchor."""

    anchor: Anchor
    text: str
    parameter: Parameter


class Dialect(ABC):
    """Statement templates of the target language.

    Attributes:
        name: Language name used in logs
        normalizes_types: Whether declared field types drop namespace
            qualifiers; when False the parameter's type text is kept verbatim
    """

    name: str
    normalizes_types = True

    @abstractmethod
    def field_declaration(self, type_text: str, field_name: str) -> str:
        """Return a field declaration statement without line terminator."""

    @abstractmethod
    def assignment(self, field_name: str, parameter_name: str) -> str:
        """Return the statement storing a parameter in its field."""


class CSharpDialect(Dialect):
    name = "csharp"

    def field_declaration(self, type_text: str, field_name: str) -> str:
        return f"{type_text} {field_name};"

    def assignment(self, field_name: str, parameter_name: str) -> str:
        return f"this.{field_name} = {parameter_name};"


class PythonDialect(Dialect):
    """Class-level annotations and ``self`` assignments.

    Class-level annotations are evaluated when the class body runs, so the
    declaration repeats the parameter's annotation exactly as written.
    Unannotated parameters get a ``None`` class attribute instead.
    """

    name = "python"
    normalizes_types = False

    def field_declaration(self, type_text: str, field_name: str) -> str:
        if not type_text:
            return f"{field_name} = None"
        return f"{field_name}: {type_text}"

    def assignment(self, field_name: str, parameter_name: str) -> str:
        return f"self.{field_name} = {parameter_name}"


class FieldSynthesizer:
    """Produces the declaration and assignment edits for unresolved parameters.

    Example:
        synthesizer = FieldSynthesizer(CSharpDialect())
        operations = synthesizer.synthesize(unresolved, newline="\\n")
    """

    def __init__(
        self,
        dialect: Dialect,
        normalizer: Callable[[str], str] = normalize_type_name,
    ) -> None:
        """Initialize the synthesizer.

        Args:
            dialect: Statement templates for the document's language
            normalizer: Reduces raw type text to the declared type name for
                dialects that normalize types
        """
        self.dialect = dialect
        self.normalizer = normalizer

    def synthesize(self, parameters: Sequence[Parameter], newline: str = "\n") -> List[EditOperation]:
        """Build the edit operations for the given parameters.

        Parameters whose derived field name collides (ignoring case) with an
        earlier parameter's are skipped.

        Args:
            parameters: Unresolved parameters in declaration order
            newline: Line terminator appended to every statement

        Returns:
            Declaration/assignment pairs in parameter order
        """
        operations: List[EditOperation] = []
        seen: set[str] = set()
        for parameter in parameters:
            field_name = derive_field_name(parameter.name)
            if field_name.casefold() in seen:
                logger.warning(
                    "Skipping parameter '%s': field '%s' is already being added",
                    parameter.name,
                    field_name,
                )
                continue
            seen.add(field_name.casefold())

            type_text = parameter.type_text
            if type_text and self.dialect.normalizes_types:
                type_text = self.normalizer(type_text)
            declaration = self.dialect.field_declaration(type_text, field_name)
            assignment = self.dialect.assignment(field_name, parameter.name)
            operations.append(EditOperation(DECLARATION_ANCHOR, declaration + newline, parameter))
            operations.append(EditOperation(ASSIGNMENT_ANCHOR, assignment + newline, parameter))
        return operations
