from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from ngx_patcher.core.errors import ParseError
from ngx_patcher.core.languages import normalize_language, resolve_language

CLASS_DECLARATION_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})


@dataclass(frozen=True)
class SourceDocument:
    """One file's text and the tree-sitter tree parsed from it.

    Offsets handed out by the patchers are byte offsets into ``source``.
    The tree is only read, never edited.
    """

    path: str
    text: str
    source: bytes
    tree: Tree
    language: str

    @classmethod
    def parse(cls, path: str, text: str, language: str | None = None) -> "SourceDocument":
        resolved_language = normalize_language(language) if language else resolve_language(None, Path(path))
        source = text.encode("utf-8")
        parser = get_parser(cast(SupportedLanguage, resolved_language))
        tree = parser.parse(source)

        if tree.root_node.has_error:
            broken = _first_error_node(tree.root_node)
            row, column = broken.start_point if broken is not None else tree.root_node.start_point
            raise ParseError(path, row + 1, column + 1)

        return cls(path=path, text=text, source=source, tree=tree, language=resolved_language)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text_of(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8")

    @property
    def newline(self) -> str:
        return "\r\n" if b"\r\n" in self.source else "\n"

    def with_native_newlines(self, text: str) -> str:
        """Rewrite the line breaks of generated ``text`` to the file's own."""
        return text.replace("\r\n", "\n").replace("\n", self.newline)


def _first_error_node(node: Node) -> Node | None:
    for descendant in iter_descendants(node):
        if descendant.is_error or descendant.is_missing:
            return descendant
    return None


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield every node below ``node`` in document (pre-)order."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def descendants_of_type(node: Node, *types: str) -> Iterator[Node]:
    wanted = set(types)
    return (child for child in iter_descendants(node) if child.is_named and child.type in wanted)


def elements_of(array: Node) -> list[Node]:
    """Element expressions of an array literal."""
    return [child for child in array.named_children if child.type != "comment"]


def leading_trivia(doc: SourceDocument, node: Node) -> str:
    """Whitespace between ``node`` and the token (or comment) before it."""
    return doc.slice(full_start(node), node.start_byte)


def full_start(node: Node) -> int:
    previous = node.prev_sibling
    if previous is not None:
        return previous.end_byte
    if node.parent is not None:
        return node.parent.start_byte
    return 0


def string_value(doc: SourceDocument, node: Node) -> str | None:
    """Content of a string literal, or of a template literal without substitutions."""
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
    elif node.type != "string":
        return None
    return doc.text_of(node)[1:-1]


def first_argument(call: Node) -> Node | None:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return None
    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def module_specifier(doc: SourceDocument, statement: Node) -> str | None:
    """Module specifier of an ``import ... from`` or ``export ... from`` statement."""
    source = statement.child_by_field_name("source")
    if source is None:
        return None
    return string_value(doc, source)


def top_level_statements(doc: SourceDocument, node_type: str) -> list[Node]:
    return [child for child in doc.root.named_children if child.type == node_type]


# ---------------------------------------------------------------------------
# Classes and members
# ---------------------------------------------------------------------------


def class_declarations(doc: SourceDocument) -> list[Node]:
    return list(descendants_of_type(doc.root, *CLASS_DECLARATION_TYPES))


def class_decorators(class_node: Node) -> list[Node]:
    """Decorators of a class, including those written before ``export``."""
    decorators = [child for child in class_node.children if child.type == "decorator"]
    parent = class_node.parent
    if parent is not None and parent.type == "export_statement":
        decorators = [child for child in parent.children if child.type == "decorator"] + decorators
    return decorators


def decorator_name(doc: SourceDocument, decorator: Node) -> str | None:
    for child in decorator.named_children:
        target = child.child_by_field_name("function") if child.type == "call_expression" else child
        if target is None:
            return None
        if target.type == "member_expression":
            target = target.child_by_field_name("property")
        return doc.text_of(target) if target is not None else None
    return None


def decorator_call(decorator: Node) -> Node | None:
    for child in decorator.named_children:
        if child.type == "call_expression":
            return child
    return None


def extends_names(doc: SourceDocument, class_node: Node) -> list[str]:
    names: list[str] = []
    for heritage in class_node.children:
        if heritage.type != "class_heritage":
            continue
        for clause in heritage.named_children:
            if clause.type != "extends_clause":
                continue
            names.extend(
                doc.text_of(ident)
                for ident in descendants_of_type(clause, "identifier", "property_identifier", "type_identifier")
            )
    return names


def find_class_extending(doc: SourceDocument, base_class: str) -> Node | None:
    for class_node in class_declarations(doc):
        if base_class in extends_names(doc, class_node):
            return class_node
    return None


def class_body(class_node: Node) -> Node | None:
    return class_node.child_by_field_name("body")


def class_members(class_node: Node) -> list[Node]:
    body = class_body(class_node)
    if body is None:
        return []
    return [child for child in body.named_children if child.type not in ("comment", "decorator")]


def is_getter(member: Node) -> bool:
    if member.type != "method_definition":
        return False
    return any(not child.is_named and child.type == "get" for child in member.children)


def member_name(doc: SourceDocument, member: Node) -> str | None:
    name = member.child_by_field_name("name")
    return doc.text_of(name) if name is not None else None


def getters(doc: SourceDocument, class_node: Node) -> list[Node]:
    return [member for member in class_members(class_node) if is_getter(member)]


def find_getter(doc: SourceDocument, class_node: Node, name: str) -> Node | None:
    for getter in getters(doc, class_node):
        if member_name(doc, getter) == name:
            return getter
    return None


def find_constructor(doc: SourceDocument, class_node: Node) -> Node | None:
    for member in class_members(class_node):
        if member.type == "method_definition" and member_name(doc, member) == "constructor":
            return member
    return None


# ---------------------------------------------------------------------------
# Object literals
# ---------------------------------------------------------------------------


def property_key(doc: SourceDocument, member: Node) -> str | None:
    if member.type == "shorthand_property_identifier":
        return doc.text_of(member)
    if member.type != "pair":
        return None
    key = member.child_by_field_name("key")
    if key is None:
        return None
    if key.type == "string":
        return string_value(doc, key)
    return doc.text_of(key)


def object_properties(obj: Node) -> list[Node]:
    return [child for child in obj.named_children if child.type != "comment"]


def find_property(doc: SourceDocument, obj: Node, name: str) -> Node | None:
    for member in object_properties(obj):
        if property_key(doc, member) == name:
            return member
    return None


def find_nested_property(doc: SourceDocument, node: Node, name: str) -> Node | None:
    """First ``pair`` anywhere below ``node`` whose key is ``name``."""
    for pair in descendants_of_type(node, "pair"):
        if property_key(doc, pair) == name:
            return pair
    return None


def property_value(member: Node) -> Node | None:
    if member.type != "pair":
        return None
    return member.child_by_field_name("value")
