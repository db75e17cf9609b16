from tree_sitter import Node

from ngx_patcher.core.ast import SourceDocument, elements_of, full_start, leading_trivia
from ngx_patcher.core.edits import insert_after, insertion, replacement
from ngx_patcher.models import TextEdit


def insert_into_array(doc: SourceDocument, array: Node, element: str, index: int | None = None) -> TextEdit:
    """Insert ``element`` into an array literal.

    With ``index`` the element goes before the existing element at that
    position; otherwise it is appended. The caller checks for duplicates.
    """
    elements = elements_of(array)

    if index is not None and 0 <= index < len(elements):
        anchor = elements[index]
        spaces = leading_trivia(doc, anchor)
        if not spaces:
            if index == 0:
                return insertion(full_start(anchor), f"{element}, ")
            spaces = " "
        return insertion(full_start(anchor), f"{spaces}{element},")

    if elements:
        last = elements[-1]
        spaces = leading_trivia(doc, last) or " "
        trailing = trailing_comma(last)
        if trailing is not None:
            return insert_after(trailing, f"{spaces}{element},")
        return insert_after(last, f",{spaces}{element}")

    open_bracket, close_bracket = array.children[0], array.children[-1]
    if doc.slice(open_bracket.end_byte, close_bracket.start_byte).strip():
        # Only comments between the brackets; keep them.
        return insert_after(open_bracket, element)
    return replacement(open_bracket.end_byte, close_bracket.start_byte, element)


def trailing_comma(element: Node) -> Node | None:
    """The comma directly following ``element``, skipping comments."""
    sibling = element.next_sibling
    while sibling is not None and sibling.type == "comment":
        sibling = sibling.next_sibling
    if sibling is not None and sibling.type == ",":
        return sibling
    return None


def last_list_token(array: Node) -> Node | None:
    """Last element or comma inside the brackets, or None for an empty array."""
    tokens = [child for child in array.children[1:-1] if child.type != "comment"]
    return tokens[-1] if tokens else None


def insert_last(doc: SourceDocument, array: Node, text: str) -> TextEdit:
    """Insert ``text`` after the last element or comma.

    The blank interior of an empty array is replaced so ``text`` controls
    where the closing bracket lands.
    """
    last = last_list_token(array)
    if last is not None:
        return insertion(last.end_byte, text)
    open_bracket, close_bracket = array.children[0], array.children[-1]
    if doc.slice(open_bracket.end_byte, close_bracket.start_byte).strip():
        return insertion(close_bracket.start_byte, text)
    return replacement(open_bracket.end_byte, close_bracket.start_byte, text)


def contains_element(doc: SourceDocument, array: Node, element: str) -> bool:
    return any(doc.text_of(existing) == element for existing in elements_of(array))
