"""Reduce namespace-qualified type names to their simple names.

``System.Collections.Generic.List<System.String>`` becomes ``List<String>``.
The input is parsed with a small grammar for type references:

    union     := type ("|" type)*
    type      := (tuple | qualified) suffix*
    tuple     := "(" union [ident] ("," union [ident])* ")"
    qualified := segment (("." | "::") segment)*
    segment   := ident [ "<" args ">" | "[" args "]" ]
    suffix    := "?" | "*" | "[" ","* "]"

Each qualified name keeps only its last segment. Anything the grammar does
not recognize leaves the whole input untouched: normalization never raises.
"""

import logging
import re
from typing import List, NamedTuple

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<ident>@?[^\W\d]\w*)
    | (?P<scope>::)
    | (?P<punct>[.<>\[\],?*()|])
    """,
    re.VERBOSE,
)

IDENT = "ident"
PUNCT = "punct"
END = "end"


class TypeNameSyntaxError(ValueError):
    """Raised internally when a type reference cannot be parsed."""


class _Token(NamedTuple):
    kind: str
    value: str


def _tokenize(type_text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(type_text):
        match = _TOKEN_PATTERN.match(type_text, pos)
        if match is None:
            raise TypeNameSyntaxError(f"Unexpected character {type_text[pos]!r} at {pos}")
        kind = match.lastgroup
        if kind == "ident":
            tokens.append(_Token(IDENT, match.group()))
        elif kind in ("scope", "punct"):
            tokens.append(_Token(PUNCT, match.group()))
        pos = match.end()
    tokens.append(_Token(END, ""))
    return tokens


class _TypeNameParser:
    """Recursive descent parser that renders the simplified type as it goes."""

    def __init__(self, tokens: List[_Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> str:
        result = self._union()
        if self._peek().kind != END:
            raise TypeNameSyntaxError(f"Unexpected token {self._peek().value!r}")
        return result

    def _peek(self, offset: int = 0) -> _Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _at(self, value: str, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token.kind == PUNCT and token.value == value

    def _advance(self) -> _Token:
        token = self._peek()
        if token.kind == END:
            raise TypeNameSyntaxError("Unexpected end of type name")
        self.pos += 1
        return token

    def _expect(self, value: str) -> None:
        if not self._at(value):
            raise TypeNameSyntaxError(f"Expected {value!r}, found {self._peek().value!r}")
        self.pos += 1

    def _ident(self) -> str:
        token = self._advance()
        if token.kind != IDENT:
            raise TypeNameSyntaxError(f"Expected identifier, found {token.value!r}")
        return token.value

    def _union(self) -> str:
        parts = [self._type()]
        while self._at("|"):
            self._advance()
            parts.append(self._type())
        return " | ".join(parts)

    def _type(self) -> str:
        text = self._tuple() if self._at("(") else self._qualified()
        while True:
            if self._at("?") or self._at("*"):
                text += self._advance().value
            elif self._at("[") and (self._at("]", 1) or self._at(",", 1)):
                self._advance()
                rank = 0
                while self._at(","):
                    self._advance()
                    rank += 1
                self._expect("]")
                text += "[" + "," * rank + "]"
            else:
                return text

    def _tuple(self) -> str:
        self._expect("(")
        elements = [self._tuple_element()]
        while self._at(","):
            self._advance()
            elements.append(self._tuple_element())
        self._expect(")")
        return "(" + ", ".join(elements) + ")"

    def _tuple_element(self) -> str:
        element = self._union()
        if self._peek().kind == IDENT:
            element += " " + self._ident()
        return element

    def _qualified(self) -> str:
        segment = self._segment()
        while self._at(".") or self._at("::"):
            self._advance()
            segment = self._segment()
        return segment

    def _segment(self) -> str:
        name = self._ident()
        if self._at("<"):
            return name + "<" + ", ".join(self._arguments("<", ">")) + ">"
        if self._at("[") and not (self._at("]", 1) or self._at(",", 1)):
            return name + "[" + ", ".join(self._arguments("[", "]")) + "]"
        return name

    def _arguments(self, open_: str, close: str) -> List[str]:
        self._expect(open_)
        arguments = [self._argument(close)]
        while self._at(","):
            self._advance()
            arguments.append(self._argument(close))
        self._expect(close)
        return arguments

    def _argument(self, close: str) -> str:
        # Callable[[int, str], bool]: a bracketed list of types as an argument
        if close == "]" and self._at("["):
            if self._at("]", 1):
                self._advance()
                self._advance()
                return "[]"
            return "[" + ", ".join(self._arguments("[", "]")) + "]"
        return self._union()


def normalize_type_name(type_text: str) -> str:
    """Strip namespace qualifiers from a type reference.

    Args:
        type_text: Raw type reference, e.g. ``System.Collections.Generic.List``

    Returns:
        The simple type name (``List``), or ``type_text`` unchanged when it
        cannot be parsed

    Example:
        >>> normalize_type_name("A.B.C.D")
        'D'
        >>> normalize_type_name("Dictionary<System.String, System.IO.File>")
        'Dictionary<String, File>'
    """
    try:
        return _TypeNameParser(_tokenize(type_text)).parse()
    except (TypeNameSyntaxError, RecursionError) as e:
        logger.debug("Keeping type name %r as written: %s", type_text, e)
        return type_text
