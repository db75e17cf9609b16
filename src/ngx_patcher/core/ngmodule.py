"""Register symbols in the array properties of a class decorator's metadata object.

``@NgModule({ imports: [...], declarations: [...] })`` is the usual target,
but any decorator taking an object literal as its first argument works.
"""

import logging

from tree_sitter import Node

from ngx_patcher.core.arrays import contains_element, insert_into_array, trailing_comma
from ngx_patcher.core.ast import (
    SourceDocument,
    class_declarations,
    class_decorators,
    decorator_call,
    decorator_name,
    elements_of,
    find_property,
    first_argument,
    leading_trivia,
    object_properties,
    property_value,
)
from ngx_patcher.core.edits import insert_after, replacement
from ngx_patcher.core.imports import merge_import
from ngx_patcher.core.indentation import infer_indent_unit
from ngx_patcher.models import ImportSpec, TextEdit

logger = logging.getLogger(__name__)


def add_symbol_to_decorator_array(
    doc: SourceDocument,
    decorator_name: str,
    metadata_field: str,
    symbol_name: str,
    import_path: str | None = None,
    insert_before: str | None = None,
) -> list[TextEdit]:
    metadata = find_decorator_metadata(doc, decorator_name)
    if metadata is None:
        logger.debug("No class decorated with @%s in %s", decorator_name, doc.path)
        return []

    metadata_property = find_property(doc, metadata, metadata_field)
    if metadata_property is None:
        return [
            _add_array_property(doc, metadata, metadata_field, symbol_name),
            *_symbol_import(doc, symbol_name, import_path),
        ]

    array = property_value(metadata_property)
    if array is None or array.type != "array":
        logger.debug("@%s %s in %s is not an array literal", decorator_name, metadata_field, doc.path)
        return []

    if contains_element(doc, array, symbol_name):
        return []

    index: int | None = None
    if insert_before is not None:
        texts = [doc.text_of(element) for element in elements_of(array)]
        if insert_before in texts:
            index = texts.index(insert_before)
        else:
            logger.debug("%s not found in %s, appending %s", insert_before, metadata_field, symbol_name)

    return [
        insert_into_array(doc, array, symbol_name, index),
        *_symbol_import(doc, symbol_name, import_path),
    ]


def add_symbol_to_ng_module(
    doc: SourceDocument,
    metadata_field: str,
    symbol_name: str,
    import_path: str | None = None,
    insert_before: str | None = None,
) -> list[TextEdit]:
    return add_symbol_to_decorator_array(doc, "NgModule", metadata_field, symbol_name, import_path, insert_before)


def find_decorator_metadata(doc: SourceDocument, name: str) -> Node | None:
    """Object literal passed to the first ``@name(...)`` decorator found on a class."""
    for class_node in class_declarations(doc):
        for decorator in class_decorators(class_node):
            if decorator_name(doc, decorator) != name:
                continue
            call = decorator_call(decorator)
            argument = first_argument(call) if call is not None else None
            if argument is not None and argument.type == "object":
                return argument
            break
    return None


def _symbol_import(doc: SourceDocument, symbol_name: str, import_path: str | None) -> list[TextEdit]:
    if import_path is None:
        return []
    root_identifier = symbol_name.split(".", 1)[0]
    edit = merge_import(doc, ImportSpec(symbol_name=root_identifier, module_specifier=import_path))
    return [edit] if edit is not None else []


def _add_array_property(doc: SourceDocument, metadata: Node, field: str, symbol_name: str) -> TextEdit:
    members = object_properties(metadata)

    if not members:
        open_brace, close_brace = metadata.children[0], metadata.children[-1]
        if doc.slice(open_brace.end_byte, close_brace.start_byte).strip():
            return insert_after(open_brace, f" {field}: [{symbol_name}],")
        return replacement(open_brace.end_byte, close_brace.start_byte, f" {field}: [{symbol_name}] ")

    last = members[-1]
    spaces = leading_trivia(doc, last)
    if "\n" in spaces:
        newline = "\r\n" if "\r\n" in spaces else "\n"
        indent = spaces.rsplit("\n", 1)[1]
        unit = infer_indent_unit(doc)
        separator = f"{newline}{indent}"
        value = f"[{newline}{indent}{unit}{symbol_name}{newline}{indent}]"
    else:
        separator = " "
        value = f"[{symbol_name}]"

    comma = trailing_comma(last)
    if comma is not None:
        return insert_after(comma, f"{separator}{field}: {value},")
    return insert_after(last, f",{separator}{field}: {value}")
