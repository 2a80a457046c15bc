"""Errors raised while injecting constructor fields.

The command layer maps each of these to a different user-facing outcome:
a warning for ``CaretNotInClass``, nothing for ``NoEligibleConstructor``
and an error message for ``TransformationFailure``.
"""


class CaretNotInClass(ValueError):
    """The caret does not resolve to an enclosing class."""

    def __init__(self, line: int, column: int) -> None:
        super().__init__(f"Caret at line {line}, column {column} is not inside a class")
        self.line = line
        self.column = column


class NoEligibleConstructor(ValueError):
    """The class has no public constructor with at least one parameter."""

    def __init__(self, class_name: str) -> None:
        super().__init__(f"Class '{class_name}' has no public constructor with parameters")
        self.class_name = class_name


class TransformationFailure(RuntimeError):
    """Any other failure while selecting, resolving, synthesizing or editing."""


class ExclusiveAccessError(RuntimeError):
    """A document was mutated without holding its writer lock."""
