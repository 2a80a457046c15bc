"""Inject Constructor Fields command."""

import logging
from enum import Enum
from typing import Optional
from uuid import UUID

from fieldinject.commands.base import BaseCommand
from fieldinject.commands.registry import register_command
from fieldinject.core.errors import CaretNotInClass, NoEligibleConstructor, TransformationFailure
from fieldinject.core.options import InjectionOptions
from fieldinject.core.transform_driver import TransformDriver, TransformResult
from fieldinject.hosts import open_document
from fieldinject.hosts.messages import ClickMessageSink, MessageLevel, MessageSink

logger = logging.getLogger(__name__)

MESSAGE_TITLE = "Inject Constructor Fields"


class Outcome(Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    NO_CONSTRUCTOR = "no-constructor"
    CARET_NOT_IN_CLASS = "caret-not-in-class"
    FAILED = "failed"


class InjectConstructorFieldsCommand(BaseCommand):
    """Create a backing field for every constructor parameter that lacks one.

    The caret picks the class. Its first public constructor taking parameters
    gets, for each parameter without a matching ``_name`` field, a private
    field declared at the top of the class body and an assignment appended
    to the constructor body.

    **Example:**
    Before:
        public class Foo
        {
            public Foo(string name, int age)
            {
            }
        }

    After:
        public class Foo
        {
            string _name;
            int _age;
            public Foo(string name, int age)
            {
                this._name = name;
                this._age = age;
            }
        }

    Parameters:
        line: 1-based caret line (required)
        column: 1-based caret column, defaults to 1
        match_policy: "name" (default) or "name-and-type"
        indent_size: spaces per indent level, detected when omitted
        dry_run: compute the new text without writing the file
    """

    name = "inject-constructor-fields"
    command_set = UUID("3680491b-cf18-4e34-92b5-266895e0a1e7")
    command_id = 0x0100

    def __init__(self, file_path, messages: Optional[MessageSink] = None, **params):
        super().__init__(file_path, **params)
        self.messages = messages or ClickMessageSink()
        self.outcome: Optional[Outcome] = None
        self.result: Optional[TransformResult] = None
        self.original_text = ""
        self.updated_text = ""

    def validate(self) -> None:
        """Validate the caret position and options.

        Raises:
            ValueError: If required parameters are missing or invalid
        """
        self.validate_required_params("line")
        for key in ("line", "column"):
            value = self.params.get(key, 1)
            try:
                position = int(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid {key} '{value}': must be an integer") from e
            if position < 1:
                raise ValueError(f"Invalid {key} {position}: must be 1 or greater")
        InjectionOptions.from_params(**self.params)

    @property
    def changed(self) -> bool:
        return self.updated_text != self.original_text

    def execute(self) -> None:
        """Run the injection and write the file when its text changed.

        Domain errors are reported through the message sink instead of being
        raised. A failed run still writes the edits made before the failure.
        """
        options = InjectionOptions.from_params(**self.params)
        line = int(self.params["line"])
        column = int(self.params.get("column", 1))

        document = open_document(self.file_path, options)
        self.original_text = document.text
        try:
            self.result = TransformDriver(document, document.dialect, options).run(line, column)
            self.outcome = Outcome.APPLIED if self.result.applied else Outcome.UNCHANGED
        except CaretNotInClass as e:
            self.outcome = Outcome.CARET_NOT_IN_CLASS
            self.messages.show(MESSAGE_TITLE, str(e), MessageLevel.WARNING)
        except NoEligibleConstructor as e:
            self.outcome = Outcome.NO_CONSTRUCTOR
            logger.debug("Nothing to do: %s", e)
        except TransformationFailure as e:
            self.outcome = Outcome.FAILED
            logger.debug("Injection failed in %s", self.file_path, exc_info=True)
            self.messages.show(MESSAGE_TITLE, str(e), MessageLevel.ERROR)

        self.updated_text = document.text
        if self.changed and not self.params.get("dry_run", False):
            self.write_source(self.updated_text)


# Register the command
register_command(InjectConstructorFieldsCommand)
