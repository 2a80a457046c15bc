"""Base class for all refactoring commands."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Optional
from uuid import UUID


class BaseCommand(ABC):
    """Base class for all refactoring commands."""

    name: str  # e.g., "inject-constructor-fields"

    # Host menu binding: command set (group) GUID and numeric command id
    command_set: ClassVar[Optional[UUID]] = None
    command_id: ClassVar[Optional[int]] = None

    def __init__(self, file_path: Path, **params: Any):
        """Initialize the command.

        Args:
            file_path: Path to the file to refactor
            **params: Additional parameters for the refactoring
        """
        self.file_path = Path(file_path)
        self.params = params

    @abstractmethod
    def execute(self) -> None:
        """Execute the refactoring and modify the file in place.

        Raises:
            ValueError: If refactoring cannot be applied
        """
        pass

    def validate_required_params(self, *param_names: str) -> None:
        """Validate that required parameters are present.

        Args:
            *param_names: Names of required parameters

        Raises:
            ValueError: If any required parameters are missing
        """
        missing = [p for p in param_names if p not in self.params]
        if missing:
            raise ValueError(f"Missing required parameters for {self.name}: {', '.join(missing)}")

    @abstractmethod
    def validate(self) -> None:
        """Validate parameters before execution.

        Raises:
            ValueError: If parameters are invalid
        """
        pass

    def write_source(self, source_code: str) -> None:
        """Write source back to the file, keeping its line endings as given.

        Args:
            source_code: The new file contents
        """
        with self.file_path.open("w", encoding="utf-8", newline="") as target:
            target.write(source_code)
