"""Tests for the backing field naming convention."""

import pytest

from fieldinject.core.naming import derive_field_name


class TestDeriveFieldName:
    @pytest.mark.parametrize(
        "parameter, field",
        [
            ("Name", "_name"),
            ("id", "_id"),
            ("X", "_x"),
            ("firstName", "_firstName"),
            ("URL", "_uRL"),
            ("@class", "_class"),
            ("_private", "__private"),
        ],
    )
    def test_derives(self, parameter: str, field: str) -> None:
        assert derive_field_name(parameter) == field

    @pytest.mark.parametrize("parameter", ["", "@"])
    def test_empty_name_rejected(self, parameter: str) -> None:
        with pytest.raises(ValueError, match="Cannot derive a field name"):
            derive_field_name(parameter)
