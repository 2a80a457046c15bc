"""Command registry for dynamic dispatch of refactorings."""

import importlib
import pkgutil
from pathlib import Path
from typing import Any, Dict, List, Tuple, Type
from uuid import UUID

from fieldinject.commands.base import BaseCommand

_registry: Dict[str, Type[BaseCommand]] = {}
_bindings: Dict[Tuple[UUID, int], Type[BaseCommand]] = {}


def register_command(command_class: Type[BaseCommand]) -> None:
    """Register a command class.

    Commands declaring a ``command_set`` and ``command_id`` are also
    registered under that menu binding.

    Args:
        command_class: The command class to register

    Raises:
        ValueError: If command_class doesn't have a name attribute, or its
            binding is already taken by another command
    """
    if not hasattr(command_class, "name"):
        raise ValueError(f"Command class {command_class.__name__} must have a 'name' attribute")
    _registry[command_class.name] = command_class

    if command_class.command_set is not None and command_class.command_id is not None:
        binding = (command_class.command_set, command_class.command_id)
        existing = _bindings.get(binding)
        if existing is not None and existing is not command_class:
            raise ValueError(
                f"Command binding {binding[0]}:{binding[1]:#06x} is already used by '{existing.name}'"
            )
        _bindings[binding] = command_class


def get_command(name: str) -> Type[BaseCommand]:
    """Get a command class by name.

    Args:
        name: The name of the command

    Returns:
        The command class

    Raises:
        ValueError: If command is not registered
    """
    if name not in _registry:
        raise ValueError(f"Unknown refactoring: {name}")
    return _registry[name]


def get_command_by_binding(command_set: UUID, command_id: int) -> Type[BaseCommand]:
    """Get a command class by its menu binding.

    Args:
        command_set: The command group GUID
        command_id: The numeric command id within the group

    Returns:
        The command class

    Raises:
        ValueError: If no command is bound to that pair
    """
    binding = (command_set, command_id)
    if binding not in _bindings:
        raise ValueError(f"No command bound to {command_set}:{command_id:#06x}")
    return _bindings[binding]


def registered_commands() -> List[Type[BaseCommand]]:
    """Return the registered command classes sorted by name."""
    return [_registry[name] for name in sorted(_registry)]


def discover_and_register_commands() -> None:
    """Dynamically discover and import all command modules.

    This function walks through the commands directory structure and imports
    all command modules. Each module's register_command() call at import time
    automatically registers the command in the global registry.
    """
    commands_dir = Path(__file__).parent

    # Walk through all subdirectories and import .py files
    for category_dir in commands_dir.iterdir():
        if category_dir.is_dir() and not category_dir.name.startswith("_"):
            package_name = f"fieldinject.commands.{category_dir.name}"
            for module_info in pkgutil.iter_modules([str(category_dir)]):
                if not module_info.name.startswith("_"):
                    module_name = f"{package_name}.{module_info.name}"
                    importlib.import_module(module_name)


def apply_refactoring(refactoring: str, file_path: Path, **params: Any) -> BaseCommand:
    """Apply a refactoring using the registry.

    Args:
        refactoring: Name of the refactoring to apply
        file_path: Path to the file to refactor
        **params: Additional parameters for the refactoring

    Returns:
        The executed command

    Raises:
        ValueError: If refactoring is unknown or parameters are invalid
    """
    command_class = get_command(refactoring)
    command = command_class(file_path, **params)
    command.validate()
    command.execute()
    return command
