from collections.abc import Iterable

from tree_sitter import Node

from ngx_patcher.core.errors import OverlappingEditsError
from ngx_patcher.models import TextEdit


def insertion(offset: int, text: str) -> TextEdit:
    return TextEdit(start=offset, end=offset, text=text)


def replacement(start: int, end: int, text: str) -> TextEdit:
    return TextEdit(start=start, end=end, text=text)


def insert_after(node: Node, text: str) -> TextEdit:
    return insertion(node.end_byte, text)


def sort_edits(edits: Iterable[TextEdit]) -> list[TextEdit]:
    """Order edits by position, keeping list order for edits at the same offset.

    Raises ``OverlappingEditsError`` when two ranges share any byte.
    """
    ordered = [edit for _, edit in sorted(enumerate(edits), key=lambda item: (item[1].start, item[0]))]
    for previous, current in zip(ordered, ordered[1:], strict=False):
        if current.start < previous.end:
            raise OverlappingEditsError((previous.start, previous.end), (current.start, current.end))
    return ordered


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Apply edits computed against ``text`` in a single pass."""
    buffer = text.encode("utf-8")
    parts: list[bytes] = []
    cursor = 0
    for edit in sort_edits(edits):
        parts.append(buffer[cursor : edit.start])
        parts.append(edit.text.encode("utf-8"))
        cursor = max(cursor, edit.end)
    parts.append(buffer[cursor:])
    return b"".join(parts).decode("utf-8")
