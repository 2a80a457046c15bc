"""Tests for C# range formatting."""

from fieldinject.hosts.csharp.formatter import format_range
from fieldinject.hosts.text_buffer import TextBuffer


def format_all(text: str, indent_unit: str = "    ") -> str:
    buffer = TextBuffer(text)
    with buffer.writer_lock.hold():
        format_range(buffer, 0, len(text), indent_unit)
    return buffer.text


class TestFormatRange:
    def test_reindents_by_brace_depth(self) -> None:
        source = "class A\n{\nint a;\n      void M()\n  {\n x();\n   }\n}\n"

        assert format_all(source) == (
            "class A\n{\n    int a;\n    void M()\n    {\n        x();\n    }\n}\n"
        )

    def test_continuation_keeps_relative_indent(self) -> None:
        source = (
            "class A\n"
            "{\n"
            "  public A(int a,\n"
            "           int b)\n"
            "      : base(a)\n"
            "  {\n"
            "  }\n"
            "}\n"
        )

        assert format_all(source) == (
            "class A\n"
            "{\n"
            "    public A(int a,\n"
            "             int b)\n"
            "        : base(a)\n"
            "    {\n"
            "    }\n"
            "}\n"
        )

    def test_multiline_literals_and_directives_untouched(self) -> None:
        source = (
            "class A\n"
            "{\n"
            "string s = @\"first\n"
            "  second\";\n"
            "#if DEBUG\n"
            "/* note\n"
            "      kept */\n"
            "#endif\n"
            "}\n"
        )

        assert format_all(source) == (
            "class A\n"
            "{\n"
            "    string s = @\"first\n"
            "  second\";\n"
            "#if DEBUG\n"
            "    /* note\n"
            "      kept */\n"
            "#endif\n"
            "}\n"
        )

    def test_trailing_whitespace_and_crlf(self) -> None:
        source = "class A {  \r\n int a;   \r\n\t\r\n}\r\n"

        assert format_all(source) == "class A {\r\n    int a;\r\n\r\n}\r\n"

    def test_only_range_lines_change(self) -> None:
        text = "class A\n{\nint a;\nint b;\n}\n"
        buffer = TextBuffer(text)
        with buffer.writer_lock.hold():
            format_range(buffer, text.index("int b"), text.index("int b"), "  ")

        assert buffer.text == "class A\n{\nint a;\n  int b;\n}\n"

    def test_tab_unit(self) -> None:
        assert format_all("class A\n{\n    int a;\n}\n", "\t") == "class A\n{\n\tint a;\n}\n"
