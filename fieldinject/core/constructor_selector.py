"""Select the constructor targeted by field injection."""

from fieldinject.core.errors import NoEligibleConstructor
from fieldinject.core.models import Access, ClassModel, ConstructorModel, MemberKind


def is_eligible_constructor(member: object, class_name: str) -> bool:
    """Check whether a member is a public constructor taking parameters.

    Args:
        member: A class member
        class_name: Name of the enclosing class

    Returns:
        True if the member can be the injection target
    """
    return (
        isinstance(member, ConstructorModel)
        and member.name == class_name
        and member.access is Access.PUBLIC
        and len(member.parameters) > 0
        and member.kind is MemberKind.CONSTRUCTOR
    )


def select_constructor(class_model: ClassModel) -> ConstructorModel:
    """Return the first public constructor with at least one parameter.

    Args:
        class_model: The class to search, members in declaration order

    Returns:
        The selected constructor

    Raises:
        NoEligibleConstructor: If the class has no such constructor
    """
    for member in class_model.members:
        if is_eligible_constructor(member, class_model.name):
            assert isinstance(member, ConstructorModel)
            return member
    raise NoEligibleConstructor(class_model.name)
