"""Pytest configuration and shared fixtures for fieldinject tests."""

import ast
import difflib
import shutil
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

import pytest

from fieldinject.hosts.messages import MessageLevel

SOURCE_SUFFIXES = (".cs", ".py")


class RecordingMessageSink:
    """Message sink that keeps messages instead of showing them."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str, MessageLevel]] = []

    def show(self, title: str, message: str, level: MessageLevel) -> None:
        self.messages.append((title, message, level))

    @property
    def levels(self) -> List[MessageLevel]:
        return [level for _, _, level in self.messages]


def read_exact(path: Path) -> str:
    """Read a file without translating its line endings."""
    with path.open(encoding="utf-8", newline="") as source:
        return source.read()


class RefactoringTestBase:
    """Base class for refactoring tests with automatic fixture management.

    Usage:
        class TestInjectConstructorFields(RefactoringTestBase):
            fixture_category = "constructor_injection/inject_constructor_fields"

            def test_allman_two_params(self):
                self.refactor("inject-constructor-fields", line=5)

    Convention:
        - Test method name (minus 'test_' prefix) maps to fixture directory name
        - Fixture directory contains input.cs + expected.cs or input.py + expected.py
        - Example: test_allman_two_params() ->
          fixtures/constructor_injection/inject_constructor_fields/allman_two_params/
    """

    fixture_category: Optional[str] = None  # Must be set in subclass

    @pytest.fixture(autouse=True)
    def _setup_fixture(self, tmp_path: Path, request: pytest.FixtureRequest) -> Iterator[None]:
        """Automatically set up fixture files before each test.

        Creates:
            self.tmp_path: Temporary directory for this test
            self.test_file: Path to the input file (copied to tmp_path)
            self.expected_file: Path to the expected file (in fixtures)
            self.messages: Sink recording the messages shown by the command
        """
        self.tmp_path = tmp_path
        self.messages = RecordingMessageSink()
        self.test_file: Optional[Path] = None
        self.expected_file: Optional[Path] = None

        # test_simple_case -> simple_case
        test_name = request.function.__name__
        fixture_name = test_name[5:] if test_name.startswith("test_") else test_name

        if self.fixture_category is None:
            raise ValueError(f"{self.__class__.__name__} must set fixture_category class attribute")

        fixture_dir = Path(__file__).parent / "fixtures" / self.fixture_category / fixture_name

        # Tests without a fixture directory set up their own files
        if fixture_dir.exists():
            for suffix in SOURCE_SUFFIXES:
                input_file = fixture_dir / f"input{suffix}"
                expected_file = fixture_dir / f"expected{suffix}"
                if input_file.exists() and expected_file.exists():
                    self.test_file = tmp_path / input_file.name
                    self.expected_file = expected_file
                    shutil.copy(input_file, self.test_file)
                    break
            else:
                raise FileNotFoundError(
                    f"Fixture directory {fixture_dir} must contain input.cs + expected.cs "
                    "or input.py + expected.py"
                )

        yield

    def refactor(self, refactoring_name: str, **params: Any) -> Any:
        """Run refactoring and assert result matches expected output.

        Args:
            refactoring_name: Name of refactoring (e.g., "inject-constructor-fields")
            **params: Parameters to pass to the refactoring

        Returns:
            The executed command

        Raises:
            AssertionError: If refactored output doesn't match expected
        """
        command = self.run_refactoring(refactoring_name, **params)
        self.assert_matches_expected()
        return command

    def run_refactoring(self, refactoring_name: str, **params: Any) -> Any:
        """Run refactoring on the fixture input without checking the result."""
        # Import here to avoid circular dependencies during test collection
        from fieldinject.cli import refactor_file

        if self.test_file is None:
            raise RuntimeError("No fixture loaded. Ensure fixture directory exists for this test.")
        return refactor_file(refactoring_name, self.test_file, messages=self.messages, **params)

    def assert_matches_expected(self, normalize: Optional[bool] = None) -> None:
        """Assert that the test file matches the expected file.

        Args:
            normalize: If True, use AST comparison (ignores formatting).
                      If False, use exact string comparison, line endings
                      included. Defaults to AST comparison for Python only.
        """
        if self.test_file is None or self.expected_file is None:
            raise RuntimeError("No fixture loaded")

        actual = read_exact(self.test_file)
        expected = read_exact(self.expected_file)
        if normalize is None:
            normalize = self.test_file.suffix == ".py"

        if normalize:
            self._assert_ast_equal(actual, expected)
        else:
            assert actual == expected, self._format_diff(actual, expected)

    def assert_unchanged(self) -> None:
        """Assert that the test file still holds the fixture input."""
        assert self.test_file is not None and self.expected_file is not None
        original = read_exact(self.expected_file.with_name(f"input{self.test_file.suffix}"))
        assert read_exact(self.test_file) == original

    def _assert_ast_equal(self, actual: str, expected: str) -> None:
        """Compare two code strings by AST structure.

        This ignores formatting differences but catches semantic changes.
        """
        try:
            actual_ast = ast.parse(actual)
            expected_ast = ast.parse(expected)
        except SyntaxError as e:
            pytest.fail(f"Syntax error in code: {e}")

        if ast.dump(actual_ast) != ast.dump(expected_ast):
            pytest.fail(
                f"AST mismatch:\n\n"
                f"Expected code:\n{expected}\n\n"
                f"Actual code:\n{actual}\n\n"
                f"{self._format_diff(actual, expected)}"
            )

    def _format_diff(self, actual: str, expected: str) -> str:
        """Format a readable diff between actual and expected."""
        suffix = self.test_file.suffix if self.test_file is not None else ""
        diff = difflib.unified_diff(
            expected.splitlines(keepends=True),
            actual.splitlines(keepends=True),
            fromfile=f"expected{suffix}",
            tofile=f"actual{suffix}",
            lineterm="",
        )
        return "".join(diff)
