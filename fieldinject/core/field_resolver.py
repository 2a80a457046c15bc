"""Decide which constructor parameters already have a backing field."""

import logging
from typing import Iterable, List

from fieldinject.core.models import ClassModel, FieldModel, Parameter
from fieldinject.core.naming import derive_field_name
from fieldinject.core.options import MatchPolicy

logger = logging.getLogger(__name__)


class FieldResolver:
    """Matches constructor parameters against the fields of a class.

    With ``MatchPolicy.NAME_ONLY`` a field matches a parameter when its name
    equals the derived field name, ignoring case. ``MatchPolicy.NAME_AND_TYPE``
    additionally requires the raw type text to be identical. Synthesized
    declarations use the normalized type name, so under the stricter policy a
    parameter with a qualified type is never matched by the field an earlier
    run added for it.

    Example:
        resolver = FieldResolver(class_model)
        todo = resolver.unresolved(constructor.parameters)
    """

    def __init__(self, class_model: ClassModel, policy: MatchPolicy = MatchPolicy.NAME_ONLY) -> None:
        """Initialize the resolver.

        Args:
            class_model: The class whose fields are searched
            policy: The matching policy to apply to every parameter
        """
        self.class_model = class_model
        self.policy = policy

    def _matches(self, field: FieldModel, parameter: Parameter) -> bool:
        if field.name.casefold() != derive_field_name(parameter.name).casefold():
            return False
        if self.policy is MatchPolicy.NAME_AND_TYPE:
            return field.type_text == parameter.type_text
        return True

    def is_satisfied(self, parameter: Parameter) -> bool:
        """Check whether a backing field for the parameter already exists.

        Args:
            parameter: The constructor parameter

        Returns:
            True if a matching field exists, False if one must be synthesized
        """
        return any(self._matches(field, parameter) for field in self.class_model.fields())

    def unresolved(self, parameters: Iterable[Parameter]) -> List[Parameter]:
        """Return the parameters that still need a backing field, in order."""
        pending = []
        for parameter in parameters:
            if self.is_satisfied(parameter):
                logger.debug("Parameter '%s' already has a backing field", parameter.name)
            else:
                pending.append(parameter)
        return pending
