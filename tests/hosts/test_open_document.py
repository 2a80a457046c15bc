"""Tests for host document selection and the message sink."""

from pathlib import Path

import pytest

from fieldinject.core.options import InjectionOptions
from fieldinject.hosts import document_type_for, open_document
from fieldinject.hosts.csharp import CSharpDocument
from fieldinject.hosts.messages import ClickMessageSink, MessageLevel
from fieldinject.hosts.python_host import PythonDocument


class TestOpenDocument:
    @pytest.mark.parametrize(
        "name, document_type",
        [("Foo.cs", CSharpDocument), ("FOO.CS", CSharpDocument), ("foo.py", PythonDocument)],
    )
    def test_document_type_by_extension(self, name: str, document_type: type) -> None:
        assert document_type_for(Path(name)) is document_type

    def test_unsupported_extension(self) -> None:
        with pytest.raises(ValueError, match="Supported: .cs, .py"):
            document_type_for(Path("Foo.vb"))

    def test_crlf_preserved_on_read(self, tmp_path: Path) -> None:
        path = tmp_path / "Foo.cs"
        path.write_bytes(b"class Foo\r\n{\r\n}\r\n")

        document = open_document(path, InjectionOptions(indent_size=2))

        assert document.text == "class Foo\r\n{\r\n}\r\n"
        assert document.newline == "\r\n"
        assert document.indent_unit == "  "


class TestClickMessageSink:
    def test_messages_go_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        sink = ClickMessageSink()

        sink.show("Title", "careful", MessageLevel.WARNING)
        sink.show("Title", "broken", MessageLevel.ERROR)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == ["Title: careful", "Title: broken"]
