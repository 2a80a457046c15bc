"""Run one constructor field injection against a host document."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fieldinject.core.constructor_selector import select_constructor
from fieldinject.core.errors import CaretNotInClass, NoEligibleConstructor, TransformationFailure
from fieldinject.core.field_resolver import FieldResolver
from fieldinject.core.field_synthesizer import Dialect, EditOperation, FieldSynthesizer
from fieldinject.core.models import Anchor, EditPoint, HostDocument
from fieldinject.core.options import InjectionOptions

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """What a run changed.

    Attributes:
        class_name: The class the caret resolved to
        constructor_name: The selected constructor
        applied: Edit operations inserted into the document, in order
    """

    class_name: str
    constructor_name: str
    applied: List[EditOperation] = field(default_factory=list)

    @property
    def fields_added(self) -> List[str]:
        """Names of the parameters that received a backing field."""
        return [op.parameter.name for op in self.applied if op.anchor is Anchor.CLASS_BODY_START]


class TransformDriver:
    """Orchestrates selection, resolution, synthesis and edit application.

    Edits are applied one by one. When an insertion fails the run stops and
    the edits already made stay in the document.

    Example:
        driver = TransformDriver(document, CSharpDialect())
        result = driver.run(line=12, column=9)
    """

    def __init__(
        self, document: HostDocument, dialect: Dialect, options: Optional[InjectionOptions] = None
    ) -> None:
        """Initialize the driver.

        Args:
            document: Host document to transform
            dialect: Statement templates for the document's language
            options: Run settings, defaults when omitted
        """
        self.document = document
        self.dialect = dialect
        self.options = options or InjectionOptions()

    def run(self, line: int, column: int = 1) -> TransformResult:
        """Inject backing fields for the constructor of the class at the caret.

        Args:
            line: 1-based caret line
            column: 1-based caret column

        Returns:
            The applied edits

        Raises:
            CaretNotInClass: If the caret is not inside a class
            NoEligibleConstructor: If the class has no public parameterized constructor
            TransformationFailure: On any other error
        """
        with self.document.writer_lock.hold():
            try:
                return self._run(line, column)
            except (CaretNotInClass, NoEligibleConstructor, TransformationFailure):
                raise
            except Exception as e:
                raise TransformationFailure(str(e)) from e

    def _run(self, line: int, column: int) -> TransformResult:
        class_model = self.document.class_at(line, column)
        if class_model is None:
            raise CaretNotInClass(line, column)

        constructor = select_constructor(class_model)
        result = TransformResult(class_model.name, constructor.name)
        logger.debug(
            "Selected constructor %s(%s)",
            constructor.name,
            ", ".join(p.name for p in constructor.parameters),
        )

        unresolved = FieldResolver(class_model, self.options.match_policy).unresolved(
            constructor.parameters
        )
        if not unresolved:
            logger.info("All parameters of %s already have backing fields", class_model.name)
            return result

        operations = FieldSynthesizer(self.dialect).synthesize(unresolved, self.document.newline)

        # Resolve every anchor before the first insertion
        points: Dict[Anchor, EditPoint] = {}
        for operation in operations:
            if operation.anchor not in points:
                points[operation.anchor] = constructor.anchor_point(operation.anchor).create_edit_point()

        for operation in operations:
            points[operation.anchor].insert(operation.text)
            result.applied.append(operation)

        self.document.reformat(class_model.start, constructor.end)
        logger.info("Added %d backing field(s) to %s", len(result.fields_added), class_model.name)
        return result
