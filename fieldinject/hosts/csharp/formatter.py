"""Re-indent a range of C# source after programmatic edits.

Statement lines are indented by brace depth, counted over the leaves of the
tree-sitter parse. Lines continuing a statement (inside parentheses, or
following a line that did not end a statement) keep their offset relative to
the statement's first line. Lines starting inside a multi-line comment or
string, and preprocessor lines, are left untouched.
Trailing whitespace is removed from every line in the range.
"""

import logging
from typing import List, Optional, Tuple

from fieldinject.hosts.csharp.syntax import DIRECTIVE, PUNCT, TRIVIA, CSharpSyntax, Token
from fieldinject.hosts.text_buffer import TextBuffer

logger = logging.getLogger(__name__)

STATEMENT_BOUNDARIES = frozenset({";", "{", "}", "]"})


class _LineState:
    """Lexical state at the start of one line."""

    def __init__(self) -> None:
        self.brace_depth = 0
        self.paren_depth = 0
        self.inside_token = False
        self.first: Optional[Token] = None
        self.previous: Optional[Token] = None


def _line_states(tokens: List[Token], line_starts: List[int], text_length: int) -> List[_LineState]:
    states = []
    brace_depth = 0
    paren_depth = 0
    previous: Optional[Token] = None
    last_seen: Optional[Token] = None
    index = 0
    for number, line_start in enumerate(line_starts):
        line_end = line_starts[number + 1] if number + 1 < len(line_starts) else text_length
        state = _LineState()
        while index < len(tokens) and tokens[index].start < line_start:
            token = tokens[index]
            last_seen = token
            if token.kind == PUNCT:
                if token.value == "{":
                    brace_depth += 1
                elif token.value == "}":
                    brace_depth -= 1
                elif token.value in ("(", "["):
                    paren_depth += 1
                elif token.value in (")", "]"):
                    paren_depth -= 1
            if token.kind not in TRIVIA:
                previous = token
            index += 1
        state.brace_depth = brace_depth
        state.paren_depth = paren_depth
        state.previous = previous
        state.inside_token = last_seen is not None and last_seen.end > line_start
        if index < len(tokens) and tokens[index].start < line_end:
            state.first = tokens[index]
        states.append(state)
    return states


def format_range(buffer: TextBuffer, start: int, end: int, indent_unit: str) -> None:
    """Re-indent every line between two offsets.

    Args:
        buffer: Document to edit; its writer lock must be held
        start: Offset inside the first line to format
        end: Offset inside the last line to format
        indent_unit: Text of one indentation level
    """
    text = buffer.text
    first_line = buffer.line_start_of(start)
    last_line_end = text.find("\n", end)
    if last_line_end == -1:
        last_line_end = len(text)

    lines = text[first_line:last_line_end].split("\n")
    line_starts = []
    offset = first_line
    for line in lines:
        line_starts.append(offset)
        offset += len(line) + 1

    tokens = CSharpSyntax(text).tokens()
    states = _line_states(tokens, line_starts, last_line_end)

    formatted = []
    statement: Optional[Tuple[str, str]] = None
    for line, state in zip(lines, states):
        carriage_return = "\r" if line.endswith("\r") else ""
        content = line[: len(line) - len(carriage_return)]
        body = content.strip()
        if not body:
            formatted.append(carriage_return)
            continue
        if state.inside_token or (state.first is not None and state.first.kind == DIRECTIVE):
            formatted.append(line)
            continue

        old_indent = content[: len(content) - len(content.lstrip())]
        first = state.first.value if state.first is not None else ""
        continuation = first not in ("{", "}") and (
            state.paren_depth > 0
            or (state.previous is not None and state.previous.value not in STATEMENT_BOUNDARIES)
        )

        if continuation:
            new_indent = old_indent
            if statement is not None and old_indent.startswith(statement[0]):
                new_indent = statement[1] + old_indent[len(statement[0]) :]
        else:
            depth = state.brace_depth - (1 if first == "}" else 0)
            new_indent = indent_unit * max(depth, 0)
            statement = (old_indent, new_indent)

        formatted.append(new_indent + body + carriage_return)

    replacement = "\n".join(formatted)
    if replacement != text[first_line:last_line_end]:
        logger.debug("Reformatting %d line(s)", len(lines))
        buffer.replace(first_line, last_line_end, replacement)
