"""Tests for FieldResolver."""

from fieldinject.core.field_resolver import FieldResolver
from fieldinject.core.models import Access, ClassModel, FieldModel, MemberKind, MethodModel, Parameter
from fieldinject.core.options import MatchPolicy


class _Point:
    def create_edit_point(self):
        raise AssertionError("resolver never edits")


def make_class(*members) -> ClassModel:
    point = _Point()
    return ClassModel("Foo", point, point, point, tuple(members))


class TestFieldResolver:
    def test_unmatched_parameters_in_order(self) -> None:
        resolver = FieldResolver(make_class())
        parameters = [Parameter("name", "string"), Parameter("age", "int")]

        assert resolver.unresolved(parameters) == parameters

    def test_name_match_is_case_insensitive(self) -> None:
        resolver = FieldResolver(make_class(FieldModel("_Name", "string")))

        assert resolver.is_satisfied(Parameter("name", "string"))
        assert resolver.is_satisfied(Parameter("NAME", "string"))

    def test_field_without_prefix_does_not_match(self) -> None:
        resolver = FieldResolver(make_class(FieldModel("name", "string")))

        assert not resolver.is_satisfied(Parameter("name", "string"))

    def test_name_only_ignores_type(self) -> None:
        resolver = FieldResolver(make_class(FieldModel("_count", "long")))

        assert resolver.is_satisfied(Parameter("count", "int"))

    def test_name_and_type_requires_identical_type_text(self) -> None:
        class_model = make_class(FieldModel("_count", "long"), FieldModel("_name", "string"))
        resolver = FieldResolver(class_model, MatchPolicy.NAME_AND_TYPE)

        unresolved = resolver.unresolved([Parameter("count", "int"), Parameter("name", "string")])

        assert unresolved == [Parameter("count", "int")]

    def test_name_and_type_compares_raw_text(self) -> None:
        resolver = FieldResolver(make_class(FieldModel("_s", "String")), MatchPolicy.NAME_AND_TYPE)

        assert not resolver.is_satisfied(Parameter("s", "System.String"))

    def test_non_field_members_ignored(self) -> None:
        class_model = make_class(
            MethodModel("_name", Access.PRIVATE),
            MethodModel("_age", Access.PUBLIC, kind=MemberKind.PROPERTY),
        )

        assert FieldResolver(class_model).unresolved([Parameter("name", ""), Parameter("age", "")]) == [
            Parameter("name", ""),
            Parameter("age", ""),
        ]

    def test_verbatim_parameter_matches_plain_field(self) -> None:
        resolver = FieldResolver(make_class(FieldModel("_class", "int")))

        assert resolver.is_satisfied(Parameter("@class", "int"))
