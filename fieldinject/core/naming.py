"""Backing field naming convention."""

FIELD_PREFIX = "_"
VERBATIM_PREFIX = "@"


def derive_field_name(parameter_name: str) -> str:
    """Derive the backing field name for a constructor parameter.

    The first character is lower-cased and the rest kept as is, then the
    result is prefixed with an underscore. A C# verbatim prefix (``@class``)
    is not carried into the field name.

    Args:
        parameter_name: The parameter identifier

    Returns:
        The field name, e.g. ``Name`` -> ``_name``

    Raises:
        ValueError: If the parameter name is empty
    """
    name = parameter_name.removeprefix(VERBATIM_PREFIX)
    if not name:
        raise ValueError(f"Cannot derive a field name from parameter '{parameter_name}'")
    return FIELD_PREFIX + name[0].lower() + name[1:]
