import re
from collections import Counter

from tree_sitter import Node

from ngx_patcher.core.ast import SourceDocument

_LEADING_WHITESPACE = re.compile(r"^([ \t]+)", re.MULTILINE)
_INDENT_BEFORE_TEXT = re.compile(r"^[ \t]*(?=\S)", re.MULTILINE)
_FIRST_MEMBER_INDENT = re.compile(r"^(?:\r?\n)+([ \t]*)")
_LEADING_SPACES = re.compile(r"^( +)", re.MULTILINE)

DEFAULT_INDENT_WIDTH = 2


def indent_width(whitespace: str) -> int:
    """Width of a whitespace run; a tab counts as two columns."""
    return sum(2 if char == "\t" else 1 for char in whitespace)


def update_spaces(text: str, spaces_to_use: int, initial_spaces: int = DEFAULT_INDENT_WIDTH) -> str:
    """Rescale every line's indentation from ``initial_spaces`` per level to ``spaces_to_use``."""

    def _rescale(match: re.Match[str]) -> str:
        width = indent_width(match.group(1))
        return " " * ((width // initial_spaces) * spaces_to_use + width % 2)

    return _LEADING_WHITESPACE.sub(_rescale, text)


def strip_indent(text: str) -> str:
    indents = _INDENT_BEFORE_TEXT.findall(text)
    if not indents:
        return text
    width = min(len(indent) for indent in indents)
    if width > 0:
        text = re.sub(rf"^[ \t]{{{width}}}", "", text, flags=re.MULTILINE)
    return text.strip()


def indent_by(indentation: int, text: str) -> str:
    """Strip the common indentation of ``text`` and indent every line by ``indentation`` spaces."""
    prefix = " " * indentation
    return prefix + strip_indent(text).replace("\n", "\n" + prefix)


def infer_indent_unit(doc: SourceDocument) -> str:
    """The file's indentation step: a tab, or the most common indentation increase in spaces."""
    steps: Counter[int] = Counter()
    previous_width = 0
    for line in doc.text.splitlines():
        stripped = line.lstrip(" \t")
        if not stripped or stripped.startswith("*"):
            continue
        whitespace = line[: len(line) - len(stripped)]
        if whitespace.startswith("\t"):
            return "\t"
        width = len(whitespace)
        if width > previous_width:
            steps[width - previous_width] += 1
        previous_width = width

    if not steps:
        return " " * DEFAULT_INDENT_WIDTH
    return " " * steps.most_common(1)[0][0]


def tabify(text: str, tab_width: int = DEFAULT_INDENT_WIDTH) -> str:
    """Turn leading runs of spaces into tabs, ``tab_width`` spaces per tab."""

    def _to_tabs(match: re.Match[str]) -> str:
        width = len(match.group(1))
        return "\t" * (width // tab_width) + " " * (width % tab_width)

    return _LEADING_SPACES.sub(_to_tabs, text)


def member_whitespace(doc: SourceDocument, body: Node) -> str | None:
    """Leading whitespace of the first member of a ``{ ... }`` block.

    None when the block is empty or its first member shares the brace's line.
    """
    open_brace = next((child for child in body.children if child.type == "{"), None)
    if open_brace is None:
        return None
    first = open_brace.next_sibling
    if first is None or first.type == "}":
        return None
    match = _FIRST_MEMBER_INDENT.match(doc.slice(open_brace.end_byte, first.start_byte))
    return match.group(1) if match is not None else None


def member_indent(doc: SourceDocument, body: Node) -> int:
    """Indent width of the first member of a ``{ ... }`` block, two by default."""
    whitespace = member_whitespace(doc, body)
    if not whitespace:
        return DEFAULT_INDENT_WIDTH
    return indent_width(whitespace)


def fit_to_block(doc: SourceDocument, body: Node, text: str) -> str:
    """Rescale two-space ``text`` to the members of ``body``.

    Tab-indented blocks get one tab per level; line breaks follow the file.
    """
    whitespace = member_whitespace(doc, body)
    if whitespace and whitespace.startswith("\t"):
        text = tabify(text)
    else:
        text = update_spaces(text, member_indent(doc, body))
    return doc.with_native_newlines(text)
