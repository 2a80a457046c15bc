"""Options controlling a constructor field injection run."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class MatchPolicy(Enum):
    """How an existing field is matched against a constructor parameter."""

    NAME_ONLY = "name"  # _name == "_" + param, case-insensitive
    NAME_AND_TYPE = "name-and-type"  # same, plus identical raw type text


@dataclass(frozen=True)
class InjectionOptions:
    """Settings for one invocation.

    Attributes:
        match_policy: Field matching policy used by the resolver
        indent_size: Spaces per indentation level used when reformatting;
            None detects it from the document
    """

    match_policy: MatchPolicy = MatchPolicy.NAME_ONLY
    indent_size: Optional[int] = None

    @classmethod
    def from_params(cls, **params: Any) -> "InjectionOptions":
        """Build options from command parameters, ignoring unrelated keys.

        Raises:
            ValueError: If a parameter value is invalid
        """
        policy = params.get("match_policy", MatchPolicy.NAME_ONLY)
        if not isinstance(policy, MatchPolicy):
            try:
                policy = MatchPolicy(str(policy))
            except ValueError as e:
                choices = ", ".join(p.value for p in MatchPolicy)
                raise ValueError(f"Invalid match policy '{policy}'. Expected one of: {choices}") from e

        indent_size = params.get("indent_size")
        if indent_size is not None:
            indent_size = int(indent_size)
            if indent_size < 1:
                raise ValueError(f"Invalid indent size {indent_size}: must be positive")

        return cls(match_policy=policy, indent_size=indent_size)
