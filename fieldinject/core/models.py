"""Structural models of a class as seen by the field injection core.

Host adapters build these fresh for every invocation from the current
document text. The core only reads them; edits are expressed as text
inserted through edit points obtained from the models' text points.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Protocol, Union

from fieldinject.core.exclusive_access import DocumentWriterLock


class Access(Enum):
    """Declared accessibility of a member."""

    PUBLIC = "public"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"
    PRIVATE = "private"


class MemberKind(Enum):
    """Kind of a class member."""

    FIELD = "field"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"
    OTHER = "other"


class Anchor(Enum):
    """Structural locations edits can be anchored at."""

    CLASS_BODY_START = "class-body-start"
    CONSTRUCTOR_BODY_START = "constructor-body-start"
    CONSTRUCTOR_BODY_END = "constructor-body-end"


class EditPoint(Protocol):
    """Cursor-like handle supporting text insertion at a document location."""

    def insert(self, text: str) -> None:
        """Insert text literally and move past it."""
        ...

    def char_left(self, count: int = 1) -> None:
        """Move the point left by count characters."""
        ...

    def char_right(self, count: int = 1) -> None:
        """Move the point right by count characters."""
        ...


class TextPoint(Protocol):
    """Opaque host position that tracks edits made elsewhere in the document."""

    def create_edit_point(self) -> EditPoint:
        """Create an independent edit point at this position."""
        ...


@dataclass(frozen=True)
class Parameter:
    """A constructor parameter.

    Attributes:
        name: Parameter identifier as written in source
        type_text: Raw type reference, possibly namespace-qualified
    """

    name: str
    type_text: str


@dataclass(frozen=True)
class FieldModel:
    """Read-only view of an existing field."""

    name: str
    type_text: str
    access: Access = Access.PRIVATE
    kind: MemberKind = MemberKind.FIELD


@dataclass(frozen=True)
class MethodModel:
    """A method-like member that is not a constructor."""

    name: str
    access: Access
    parameters: tuple[Parameter, ...] = ()
    kind: MemberKind = MemberKind.METHOD


@dataclass(frozen=True)
class ConstructorModel:
    """A constructor together with the positions edits are anchored at.

    ``body_start`` and ``body_end`` are None when the constructor has no
    block body (for example an expression-bodied constructor).
    """

    name: str
    access: Access
    parameters: tuple[Parameter, ...]
    start: TextPoint
    end: TextPoint
    body_start: Optional[TextPoint]
    body_end: Optional[TextPoint]
    class_body_start: TextPoint
    kind: MemberKind = MemberKind.CONSTRUCTOR

    def anchor_point(self, anchor: Anchor) -> TextPoint:
        """Return the text point for a structural anchor.

        Raises:
            ValueError: If the constructor has no block body to anchor in
        """
        if anchor is Anchor.CLASS_BODY_START:
            return self.class_body_start
        point = self.body_start if anchor is Anchor.CONSTRUCTOR_BODY_START else self.body_end
        if point is None:
            raise ValueError(f"Constructor '{self.name}' has no block body to insert into")
        return point


Member = Union[FieldModel, MethodModel, ConstructorModel]


@dataclass(frozen=True)
class ClassModel:
    """A class and its members in declaration order."""

    name: str
    start: TextPoint
    body_start: TextPoint
    end: TextPoint
    members: tuple[Member, ...] = field(default_factory=tuple)

    def fields(self) -> Iterator[FieldModel]:
        """Iterate over field members in declaration order."""
        for member in self.members:
            if isinstance(member, FieldModel):
                yield member


class HostDocument(Protocol):
    """The document capabilities the core consumes."""

    writer_lock: DocumentWriterLock
    newline: str

    def class_at(self, line: int, column: int) -> Optional[ClassModel]:
        """Return the innermost class enclosing a 1-based caret position."""
        ...

    def reformat(self, start: TextPoint, end: TextPoint) -> None:
        """Normalize layout between two points after programmatic edits."""
        ...
