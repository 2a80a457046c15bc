"""Structural scan of C# source into classes and their members.

Classes, members and constructor parameters come from the tree-sitter syntax
tree. Member bodies are located by their block braces and never inspected.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from tree_sitter import Node

from fieldinject.core.models import Access, MemberKind, Parameter
from fieldinject.hosts.csharp.syntax import PREPROC_WRAPPERS, CSharpSyntax

MODIFIERS = frozenset(
    {
        "public",
        "private",
        "protected",
        "internal",
        "static",
        "readonly",
        "const",
        "volatile",
        "virtual",
        "override",
        "abstract",
        "sealed",
        "extern",
        "unsafe",
        "new",
        "partial",
        "async",
        "required",
        "file",
    }
)

_WHITESPACE = re.compile(r"\s+")

_PROPERTY_TYPES = frozenset({"property_declaration", "indexer_declaration"})
_METHOD_TYPES = frozenset({"method_declaration", "operator_declaration", "conversion_operator_declaration"})


@dataclass
class ScannedMember:
    """A member declaration with character offsets into the source.

    ``body_open``/``body_close`` are the offsets of the braces of a block
    body, None for members without one.
    """

    kind: MemberKind
    name: str
    access: Access
    start: int
    end: int
    type_text: str = ""
    parameters: List[Parameter] = field(default_factory=list)
    body_open: Optional[int] = None
    body_close: Optional[int] = None


@dataclass
class ScannedClass:
    """A class declaration with character offsets into the source."""

    name: str
    start: int
    body_open: int
    body_close: int
    members: List[ScannedMember] = field(default_factory=list)

    @property
    def end(self) -> int:
        return self.body_close + 1


def access_from_modifiers(modifiers: Sequence[str]) -> Access:
    """Map declared modifiers to an access level, private when none is given."""
    mods = set(modifiers)
    if "public" in mods:
        return Access.PUBLIC
    if {"protected", "internal"} <= mods:
        return Access.PROTECTED_INTERNAL
    if {"private", "protected"} <= mods:
        return Access.PRIVATE_PROTECTED
    if "protected" in mods:
        return Access.PROTECTED
    if "internal" in mods:
        return Access.INTERNAL
    return Access.PRIVATE


def _children_of_type(node: Node, node_type: str) -> List[Node]:
    return [child for child in node.named_children if child.type == node_type]


def _first_of_type(node: Node, node_type: str) -> Optional[Node]:
    return next(iter(_children_of_type(node, node_type)), None)


def _field_or_child(node: Node, field_name: str, node_type: str, last: bool = False) -> Optional[Node]:
    """Return a field of node, falling back to a named child of the given type."""
    found = node.child_by_field_name(field_name)
    if found is not None:
        return found
    children = _children_of_type(node, node_type)
    if not children:
        return None
    return children[-1] if last else children[0]


def _name_node(node: Node, last: bool = False) -> Optional[Node]:
    return _field_or_child(node, "name", "identifier", last)


class CSharpScanner:
    """Finds classes and members in C# source.

    Example:
        scanner = CSharpScanner(source)
        for scanned in scanner.classes():
            print(scanned.name, [m.name for m in scanned.members])
    """

    def __init__(self, source: str) -> None:
        """Parse the source.

        Raises:
            CSharpSyntaxError: If the source has syntax errors
        """
        self.source = source
        self.syntax = CSharpSyntax(source)
        self.syntax.check()

    def _text(self, node: Node) -> str:
        """Return the source of a node, whitespace collapsed."""
        return _WHITESPACE.sub(" ", self.syntax.node_text(node)).strip()

    def _name(self, node: Node) -> str:
        name = _name_node(node)
        return self.syntax.node_text(name) if name is not None else ""

    def _modifiers(self, node: Node) -> List[str]:
        return [
            self.syntax.node_text(child)
            for child in node.children
            if child.type == "modifier" or child.type in MODIFIERS
        ]

    def classes(self) -> List[ScannedClass]:
        """Return every class declaration in source order, nested ones included."""
        found = []
        stack = [self.syntax.root]
        while stack:
            node = stack.pop()
            if node.type == "class_declaration":
                scanned = self._scan_class(node)
                if scanned is not None:
                    found.append(scanned)
            stack.extend(reversed(node.named_children))
        return found

    def _scan_class(self, node: Node) -> Optional[ScannedClass]:
        body = _field_or_child(node, "body", "declaration_list")
        # "partial class Foo;" declares no body
        if body is None or body.child_count < 2:
            return None
        scanned = ScannedClass(
            name=self._name(node),
            start=self.syntax.start(node),
            body_open=self.syntax.start(body.children[0]),
            body_close=self.syntax.start(body.children[-1]),
        )
        scanned.members = self._scan_members(scanned.name, body)
        return scanned

    def _declarations(self, body: Node) -> List[Node]:
        """Member declarations of a body, looking inside preprocessor blocks."""
        declarations = []
        for child in body.named_children:
            if child.type in PREPROC_WRAPPERS:
                declarations.extend(self._declarations(child))
            elif child.type.endswith("_declaration"):
                declarations.append(child)
        return declarations

    def _scan_members(self, class_name: str, body: Node) -> List[ScannedMember]:
        members: List[ScannedMember] = []
        for node in self._declarations(body):
            members.extend(self._classify(class_name, node))
        return members

    def _classify(self, class_name: str, node: Node) -> List[ScannedMember]:
        access = access_from_modifiers(self._modifiers(node))
        start, stop = self.syntax.start(node), self.syntax.end(node)

        if node.type == "field_declaration":
            return self._fields(node, access, start, stop)
        if node.type == "constructor_declaration":
            name = self._name(node)
            kind = MemberKind.CONSTRUCTOR if name == class_name else MemberKind.METHOD
            return [self._method(node, kind, name, access, start, stop)]
        if node.type in _METHOD_TYPES:
            name = "operator" if "operator" in node.type else self._name(node)
            return [self._method(node, MemberKind.METHOD, name, access, start, stop)]
        if node.type in _PROPERTY_TYPES:
            name = "this" if node.type == "indexer_declaration" else self._name(node)
            return [ScannedMember(MemberKind.PROPERTY, name, access, start, stop)]
        if node.type == "destructor_declaration":
            return [ScannedMember(MemberKind.OTHER, self._name(node), access, start, stop)]
        return [ScannedMember(MemberKind.OTHER, "", access, start, stop)]

    def _method(
        self, node: Node, kind: MemberKind, name: str, access: Access, start: int, stop: int
    ) -> ScannedMember:
        member = ScannedMember(kind, name, access, start, stop)
        parameters = _field_or_child(node, "parameters", "parameter_list")
        if parameters is not None:
            member.parameters = self._parameters(parameters)
        block = _field_or_child(node, "body", "block")
        if block is not None and block.type == "block":
            member.body_open = self.syntax.start(block.children[0])
            member.body_close = self.syntax.start(block.children[-1])
        return member

    def _parameters(self, parameter_list: Node) -> List[Parameter]:
        parameters = []
        for node in parameter_list.named_children:
            if node.type not in ("parameter", "parameter_array"):
                continue
            name = _name_node(node, last=True)
            if name is None:
                continue
            type_node = node.child_by_field_name("type")
            if type_node is None:
                # The type is the named child just before the name
                preceding = [
                    child
                    for child in node.named_children
                    if child.end_byte <= name.start_byte
                    and child.type != "attribute_list"
                    and "modifier" not in child.type
                ]
                type_node = preceding[-1] if preceding else None
            if type_node is None:
                continue
            parameters.append(Parameter(name=self.syntax.node_text(name), type_text=self._text(type_node)))
        return parameters

    def _fields(self, node: Node, access: Access, start: int, stop: int) -> List[ScannedMember]:
        declaration = _first_of_type(node, "variable_declaration")
        if declaration is None:
            return []
        type_node = declaration.child_by_field_name("type")
        if type_node is None:
            type_node = next(
                (child for child in declaration.named_children if child.type != "variable_declarator"),
                None,
            )
        type_text = self._text(type_node) if type_node is not None else ""
        fields = []
        for declarator in _children_of_type(declaration, "variable_declarator"):
            name = _name_node(declarator)
            if name is None or name.type != "identifier":
                continue
            fields.append(
                ScannedMember(
                    MemberKind.FIELD,
                    self.syntax.node_text(name),
                    access,
                    start,
                    stop,
                    type_text=type_text,
                )
            )
        return fields


def scan_classes(source: str) -> List[ScannedClass]:
    """Scan C# source and return its classes.

    Raises:
        CSharpSyntaxError: If the source has syntax errors
    """
    return CSharpScanner(source).classes()
