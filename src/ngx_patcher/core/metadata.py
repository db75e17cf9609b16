"""Patches for package metadata services.

A metadata service is a class extending ``PackageMetadata`` that exposes
one getter per registry kind::

    export class LibMetadataService extends PackageMetadata {

      /**
       * Actions
       */
      public override get actions(): Action[] {
        return [
          { id: 'Lot.Wizard', ... }
        ];
      }
    }
"""

import logging
import posixpath
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from tree_sitter import Node

from ngx_patcher.config import get_base_class
from ngx_patcher.core.arrays import insert_last, last_list_token
from ngx_patcher.core.ast import (
    SourceDocument,
    class_body,
    class_members,
    descendants_of_type,
    elements_of,
    find_class_extending,
    find_constructor,
    find_getter,
    getters,
    module_specifier,
    top_level_statements,
)
from ngx_patcher.core.edits import insert_after
from ngx_patcher.core.imports import merge_imports
from ngx_patcher.core.indentation import fit_to_block, indent_by
from ngx_patcher.core.strings import nameify
from ngx_patcher.models import ImportSpec, TextEdit

logger = logging.getLogger(__name__)


class MetadataProperty(str, Enum):
    ROUTE = "routes"
    ACTION = "actions"
    ACTION_GROUP = "actionGroups"
    ACTION_BUTTON = "actionButtons"
    ACTION_BUTTON_GROUP = "actionButtonGroups"
    ACTION_BAR = "actionBars"
    MENU_ITEM = "menuItems"
    MENU_SUB_GROUP = "menuSubGroups"
    MENU_GROUP = "menuGroups"
    ENTITY_TYPE = "entityTypes"
    TABLE = "tables"
    STATIC_TYPE = "staticTypes"
    FILE_VIEWER = "fileViewers"
    SIDE_BAR_TAB = "sideBarTabs"
    USER_MENU = "userMenus"
    CREDIT = "credits"
    FLEX_COMPONENT = "flexComponents"


class PropertyReference(NamedTuple):
    type_name: str
    origin_module: str


PROPERTY_REFERENCE: Mapping[MetadataProperty, PropertyReference] = MappingProxyType(
    {
        MetadataProperty.ROUTE: PropertyReference("RouteConfig", "cmf-core"),
        MetadataProperty.ACTION: PropertyReference("Action", "cmf-core"),
        MetadataProperty.ACTION_GROUP: PropertyReference("ActionGroup", "cmf-core"),
        MetadataProperty.ACTION_BUTTON: PropertyReference("ActionButton", "cmf-core"),
        MetadataProperty.ACTION_BUTTON_GROUP: PropertyReference("ActionButtonGroup", "cmf-core"),
        MetadataProperty.ACTION_BAR: PropertyReference("ActionBar", "cmf-core"),
        MetadataProperty.MENU_ITEM: PropertyReference("MenuItem", "cmf-core"),
        MetadataProperty.MENU_SUB_GROUP: PropertyReference("MenuSubGroup", "cmf-core"),
        MetadataProperty.MENU_GROUP: PropertyReference("MenuGroup", "cmf-core"),
        MetadataProperty.ENTITY_TYPE: PropertyReference("EntityTypeMetadata", "cmf-core"),
        MetadataProperty.TABLE: PropertyReference("Table", "cmf-core"),
        MetadataProperty.STATIC_TYPE: PropertyReference("StaticType", "cmf-core"),
        MetadataProperty.FILE_VIEWER: PropertyReference("FileViewerMetadata", "cmf-core"),
        MetadataProperty.SIDE_BAR_TAB: PropertyReference("SideBarTab", "cmf-core"),
        MetadataProperty.USER_MENU: PropertyReference("UserMenu", "cmf-core"),
        MetadataProperty.CREDIT: PropertyReference("Credit", "cmf-core"),
        MetadataProperty.FLEX_COMPONENT: PropertyReference("FlexComponent", "cmf-core"),
    }
)


def insert_metadata(
    doc: SourceDocument,
    required_imports: Mapping[str, str],
    property_identifier: MetadataProperty | str,
    to_insert: str,
    base_class: str | None = None,
) -> list[TextEdit]:
    """Append ``to_insert`` to the array returned by the ``property_identifier`` getter.

    The getter is created when the metadata class doesn't declare it yet.
    Returns no edits when no class extends ``base_class`` or the getter
    doesn't return an array literal.
    """
    kind = MetadataProperty(property_identifier)
    base_class = base_class or get_base_class()

    class_node = find_class_extending(doc, base_class)
    body = class_body(class_node) if class_node is not None else None
    if class_node is None or body is None:
        logger.debug("No class extending %s in %s", base_class, doc.path)
        return []

    accessor = find_getter(doc, class_node, kind.value)

    if accessor is None:
        reference = PROPERTY_REFERENCE[kind]
        template = (
            "\n"
            "\n"
            "  /**\n"
            f"   * {nameify(kind.value)}\n"
            "   */\n"
            f"  public override get {kind.value}(): {reference.type_name}[] {{\n"
            "    return [\n"
            f"{indent_by(6, to_insert)}\n"
            "    ];\n"
            "  }"
        )
        imports = {**required_imports, reference.type_name: reference.origin_module}
        logger.info("Adding %s accessor to %s", kind.value, doc.path)
        return [
            *merge_imports(doc, import_specs(imports)),
            insert_member(doc, class_node, fit_to_block(doc, body, template)),
        ]

    array = returned_array(accessor)
    if array is None:
        logger.debug("%s accessor in %s does not return an array literal", kind.value, doc.path)
        return []

    if _normalized(to_insert) in {_normalized(doc.text_of(element)) for element in elements_of(array)}:
        logger.debug("%s already lists the inserted entry in %s", kind.value, doc.path)
        return []

    last = last_list_token(array)
    comma = "," if last is not None and last.type != "," else ""
    closing = "" if last is not None else "\n    "
    text = fit_to_block(doc, body, f"{comma}\n{indent_by(6, to_insert)}{closing}")
    return [
        *merge_imports(doc, import_specs(required_imports)),
        insert_last(doc, array, text),
    ]


def find_metadata_file(content: str, file_name: str, root: str) -> str | None:
    """Path of the metadata service re-exported by the metadata package's public api."""
    doc = SourceDocument.parse(file_name, content)
    for statement in top_level_statements(doc, "export_statement"):
        specifier = module_specifier(doc, statement)
        if specifier is not None and specifier.endswith("metadata.service"):
            metadata_dir = posixpath.dirname(posixpath.join(root, "metadata", file_name))
            return posixpath.normpath(posixpath.join(metadata_dir, specifier)) + ".ts"
    return None


def insert_member(doc: SourceDocument, class_node: Node, text: str) -> TextEdit:
    """Insert a class member after the last getter, else after the constructor, else at the top of the body."""
    existing = getters(doc, class_node)
    anchor = existing[-1] if existing else find_constructor(doc, class_node)
    if anchor is not None:
        return insert_after(anchor, text)

    body = class_body(class_node)
    assert body is not None
    suffix = "" if class_members(class_node) else doc.newline
    return insert_after(body.children[0], f"{text}{suffix}")


def returned_array(accessor: Node) -> Node | None:
    return_statement = next(descendants_of_type(accessor, "return_statement"), None)
    if return_statement is None:
        return None
    return next(descendants_of_type(return_statement, "array"), None)


def import_specs(imports: Mapping[str, str]) -> list[ImportSpec]:
    return [ImportSpec(symbol_name=symbol, module_specifier=module) for symbol, module in imports.items()]


def _normalized(text: str) -> str:
    return " ".join(text.split())
