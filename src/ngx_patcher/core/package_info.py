import logging
import re

from tree_sitter import Node

from ngx_patcher.config import get_base_class
from ngx_patcher.core.arrays import insert_last, last_list_token
from ngx_patcher.core.ast import (
    SourceDocument,
    class_body,
    descendants_of_type,
    elements_of,
    find_class_extending,
    find_getter,
    find_nested_property,
    first_argument,
    property_value,
    string_value,
)
from ngx_patcher.core.edits import insertion, replacement
from ngx_patcher.core.imports import merge_import
from ngx_patcher.core.indentation import fit_to_block, indent_by
from ngx_patcher.core.metadata import insert_member
from ngx_patcher.models import ImportSpec, PackageInfo, TextEdit

logger = logging.getLogger(__name__)

PACKAGE_INFO_ACCESSOR = "packageInfo"
PACKAGE_INFO_IMPORT = ImportSpec(symbol_name="PackageInfo", module_specifier="cmf-core")

_WEBPACK_EXPORTS = re.compile(r"(webpackExports\s*:\s*\[)(.*?)\]", re.DOTALL)
_QUOTED = re.compile(r"[\"']([^\"']*)[\"']")
_SINGLE = "'"
_DOUBLE = '"'


def insert_package_info_metadata(
    doc: SourceDocument,
    info: PackageInfo,
    base_class: str | None = None,
) -> list[TextEdit]:
    """Register widgets, data sources, converters and components in the ``packageInfo`` accessor.

    The names are also appended to the ``webpackExports`` comment of the
    loader's dynamic import so the bundler keeps them.
    """
    base_class = base_class or info.base_class or get_base_class()

    class_node = find_class_extending(doc, base_class)
    body = class_body(class_node) if class_node is not None else None
    if class_node is None or body is None:
        logger.debug("No class extending %s in %s", base_class, doc.path)
        return []

    accessor = find_getter(doc, class_node, PACKAGE_INFO_ACCESSOR)

    if accessor is None:
        logger.info("Adding %s accessor for %s to %s", PACKAGE_INFO_ACCESSOR, info.package, doc.path)
        edits = [insert_member(doc, class_node, fit_to_block(doc, body, _package_info_accessor(info)))]
        package_import = merge_import(doc, PACKAGE_INFO_IMPORT)
        return [package_import, *edits] if package_import is not None else edits

    return_statement = next(descendants_of_type(accessor, "return_statement"), None)
    if return_statement is None:
        logger.debug("%s accessor in %s has no return statement", PACKAGE_INFO_ACCESSOR, doc.path)
        return []

    edits: list[TextEdit] = []
    added: list[str] = []
    for identifier, names in (
        ("widgets", info.widgets),
        ("dataSources", info.data_sources),
        ("converters", info.converters),
        ("components", info.components),
    ):
        prop = find_nested_property(doc, return_statement, identifier)
        array = property_value(prop) if prop is not None else None
        if array is None or array.type != "array":
            continue

        present = {string_value(doc, element) for element in elements_of(array)}
        to_add = [name for name in dict.fromkeys(names) if name not in present]
        if not to_add:
            continue

        last = last_list_token(array)
        comma = "," if last is not None and last.type != "," else ""
        closing = "" if last is not None else "\n      "
        items = indent_by(8, _quoted_lines(to_add, _SINGLE))
        edits.append(insert_last(doc, array, fit_to_block(doc, body, f"{comma}\n{items}{closing}")))
        added.extend(to_add)

    if not added:
        return edits

    comment_edit = _append_webpack_exports(doc, body, return_statement, added)
    if comment_edit is not None:
        edits.append(comment_edit)
    return edits


def _append_webpack_exports(
    doc: SourceDocument, body: Node, return_statement: Node, added: list[str]
) -> TextEdit | None:
    loader = find_nested_property(doc, return_statement, "loader")
    dynamic_import = None
    if loader is not None:
        dynamic_import = next(
            (
                call
                for call in descendants_of_type(loader, "call_expression")
                if (function := call.child_by_field_name("function")) is not None and doc.text_of(function) == "import"
            ),
            None,
        )
    argument = first_argument(dynamic_import) if dynamic_import is not None else None
    if dynamic_import is None or argument is None:
        logger.warning("No loader import() in %s; webpackExports not updated for %s", doc.path, ", ".join(added))
        return None

    for comment in descendants_of_type(dynamic_import, "comment"):
        if comment.end_byte > argument.start_byte:
            break
        comment_text = doc.text_of(comment)
        match = _WEBPACK_EXPORTS.search(comment_text)
        if match is None:
            continue

        listed = set(_QUOTED.findall(match.group(2)))
        names = [name for name in dict.fromkeys(added) if name not in listed]
        if not names:
            return None

        items = indent_by(10, _quoted_lines(names, _DOUBLE))
        trimmed = match.group(2).rstrip()
        if not trimmed:
            start = comment.start_byte + _byte_length(comment_text, match.end(1))
            end = comment.start_byte + _byte_length(comment_text, match.end(2))
            return replacement(start, end, fit_to_block(doc, body, f"\n{items}\n        "))

        comma = "" if trimmed.endswith(",") else ","
        offset = _byte_length(comment_text, match.end(1) + len(trimmed))
        return insertion(comment.start_byte + offset, fit_to_block(doc, body, f"{comma}\n{items}"))

    # Known limitation: the arrays are patched but the comment list lags behind.
    logger.warning("No webpackExports list in %s; not registering %s", doc.path, ", ".join(added))
    return None


def _byte_length(text: str, index: int) -> int:
    return len(text[:index].encode("utf-8"))


def _package_info_accessor(info: PackageInfo) -> str:
    return (
        "\n"
        "\n"
        "  /**\n"
        "   * Package Info\n"
        "   */\n"
        f"  public override get {PACKAGE_INFO_ACCESSOR}(): PackageInfo {{\n"
        "    return {\n"
        f"      name: '{info.package}',\n"
        "      loader: () => import(\n"
        f"        /* webpackExports: {_list_block(info.exported_names, 10, 8, _DOUBLE)} */\n"
        f"        '{info.package}'),\n"
        f"      widgets: {_list_block(info.widgets, 8, 6, _SINGLE)},\n"
        f"      dataSources: {_list_block(info.data_sources, 8, 6, _SINGLE)},\n"
        f"      converters: {_list_block(info.converters, 8, 6, _SINGLE)},\n"
        f"      components: {_list_block(info.components, 8, 6, _SINGLE)}\n"
        "    };\n"
        "  }"
    )


def _list_block(names: list[str], indentation: int, closing_indentation: int, quote: str) -> str:
    if not names:
        return "[]"
    items = indent_by(indentation, _quoted_lines(list(dict.fromkeys(names)), quote))
    return f"[\n{items}\n{' ' * closing_indentation}]"


def _quoted_lines(names: list[str], quote: str) -> str:
    return ",\n".join(f"{quote}{name}{quote}" for name in names)
