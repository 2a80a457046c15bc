"""Tests for InjectionOptions."""

import pytest

from fieldinject.core.options import InjectionOptions, MatchPolicy


class TestFromParams:
    def test_defaults(self) -> None:
        options = InjectionOptions.from_params()

        assert options.match_policy is MatchPolicy.NAME_ONLY
        assert options.indent_size is None

    def test_unrelated_params_ignored(self) -> None:
        options = InjectionOptions.from_params(line=3, dry_run=True, match_policy="name-and-type")

        assert options.match_policy is MatchPolicy.NAME_AND_TYPE

    def test_accepts_enum_member(self) -> None:
        options = InjectionOptions.from_params(match_policy=MatchPolicy.NAME_AND_TYPE)

        assert options.match_policy is MatchPolicy.NAME_AND_TYPE

    def test_invalid_policy(self) -> None:
        with pytest.raises(ValueError, match="Expected one of: name, name-and-type"):
            InjectionOptions.from_params(match_policy="type")

    def test_indent_size(self) -> None:
        assert InjectionOptions.from_params(indent_size="2").indent_size == 2

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_indent_size(self, size: int) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            InjectionOptions.from_params(indent_size=size)
