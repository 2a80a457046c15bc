"""tree-sitter parse of C# source, reported in character offsets.

tree-sitter works on UTF-8 bytes; every position leaving this module is a
``str`` offset so it can be used directly against the document text.
"""

from typing import List, NamedTuple, Optional

import tree_sitter_c_sharp as ts_csharp
from tree_sitter import Language, Node, Parser

CSHARP = Language(ts_csharp.language())

IDENT = "ident"
LITERAL = "literal"
PUNCT = "punct"
COMMENT = "comment"
DIRECTIVE = "directive"

TRIVIA = frozenset({COMMENT, DIRECTIVE})

# Preprocessor blocks that may wrap member declarations
PREPROC_WRAPPERS = frozenset(
    {
        "preproc_if",
        "preproc_ifdef",
        "preproc_elif",
        "preproc_else",
        "preproc_region",
    }
)


class CSharpSyntaxError(ValueError):
    """Raised when C# source does not parse cleanly."""


class Token(NamedTuple):
    kind: str
    value: str
    start: int
    end: int


def is_literal(node: Node) -> bool:
    """Literals are single tokens, interpolated strings included."""
    return node.type.endswith("_literal") or node.type.startswith("interpolated_")


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR or missing node below node, in source order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = first_error(child)
            if found is not None:
                return found
    return None


class CSharpSyntax:
    """A parsed C# document.

    Example:
        syntax = CSharpSyntax(source)
        syntax.check()
        for node in syntax.root.named_children:
            print(node.type, syntax.start(node))
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode("utf-8")
        self.tree = Parser(CSHARP).parse(self.data)
        self._ascii = len(self.data) == len(text)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def offset(self, byte_offset: int) -> int:
        """Convert a byte offset of the parse to a character offset."""
        if self._ascii:
            return byte_offset
        return len(self.data[:byte_offset].decode("utf-8"))

    def start(self, node: Node) -> int:
        return self.offset(node.start_byte)

    def end(self, node: Node) -> int:
        return self.offset(node.end_byte)

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def check(self) -> None:
        """Raise if the parse contains errors.

        Raises:
            CSharpSyntaxError: Naming the line of the first error
        """
        if not self.root.has_error:
            return
        node = first_error(self.root)
        if node is None:
            raise CSharpSyntaxError("Syntax error")
        line = node.start_point[0] + 1
        if node.is_missing:
            raise CSharpSyntaxError(f"Missing '{node.type}' at line {line}")
        raise CSharpSyntaxError(f"Syntax error at line {line}: {self.node_text(node)[:40]!r}")

    def tokens(self) -> List[Token]:
        """Return the leaves of the tree in source order.

        Literals and comments are single tokens. A preprocessor directive is
        one token running to the end of its line.
        """
        tokens: List[Token] = []
        directive_end = -1
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.start_byte == node.end_byte:
                continue
            if node.child_count and node.type != COMMENT and not is_literal(node):
                stack.extend(reversed(node.children))
                continue

            start, end = self.start(node), self.end(node)
            if start < directive_end:
                continue
            value = self.text[start:end]
            if not value.strip():
                continue
            if value.startswith("#"):
                line_end = self.text.find("\n", start)
                directive_end = len(self.text) if line_end == -1 else line_end
                tokens.append(Token(DIRECTIVE, self.text[start:directive_end].rstrip("\r"), start, directive_end))
                continue
            tokens.append(Token(_kind(node, value), value, start, end))
        return tokens


def _kind(node: Node, value: str) -> str:
    if node.type == COMMENT:
        return COMMENT
    if is_literal(node):
        return LITERAL
    if not node.is_named and not (value[0].isalnum() or value[0] == "_"):
        return PUNCT
    return IDENT
