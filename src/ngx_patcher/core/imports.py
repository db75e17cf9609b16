import logging
from collections.abc import Iterable

from tree_sitter import Node

from ngx_patcher.core.ast import SourceDocument, module_specifier, top_level_statements
from ngx_patcher.core.edits import insert_after, insertion, replacement
from ngx_patcher.models import ExportSpec, ImportSpec, TextEdit

logger = logging.getLogger(__name__)


def merge_import(doc: SourceDocument, spec: ImportSpec) -> TextEdit | None:
    """Return the edit that makes ``spec`` imported in ``doc``, or None if it already is."""
    edits = merge_imports(doc, [spec])
    return edits[0] if edits else None


def merge_imports(doc: SourceDocument, specs: Iterable[ImportSpec]) -> list[TextEdit]:
    """Merge several imports at once.

    Named imports are grouped per module so a module missing from the file
    gets a single new declaration.
    """
    edits: list[TextEdit] = []
    named: dict[str, list[str]] = {}

    for spec in specs:
        if spec.is_default:
            edit = _merge_default_import(doc, spec)
            if edit is not None:
                edits.append(edit)
            continue
        names = named.setdefault(spec.module_specifier, [])
        if spec.symbol_name not in names:
            names.append(spec.symbol_name)

    for module, names in named.items():
        edit = _merge_named_imports(doc, module, names)
        if edit is not None:
            edits.append(edit)

    return edits


def merge_export(doc: SourceDocument, spec: ExportSpec) -> TextEdit | None:
    """Return the edit that re-exports ``spec`` from ``doc``, or None if it already is."""
    declarations = _declarations(doc, "export_statement", spec.module_specifier)
    quote = _quote_style(doc)

    if spec.is_default:
        if any(_is_namespace_export(declaration) for declaration in declarations):
            logger.debug("Namespace export of %s already present in %s", spec.module_specifier, doc.path)
            return None
        return _append_statement(doc, f"export * from {quote}{spec.module_specifier}{quote};")

    for declaration in declarations:
        clause = _child_of_type(declaration, "export_clause")
        if clause is not None and spec.symbol_name in _specifier_names(doc, clause, "export_specifier"):
            logger.debug("%s already exported from %s in %s", spec.symbol_name, spec.module_specifier, doc.path)
            return None

    for declaration in declarations:
        clause = _child_of_type(declaration, "export_clause")
        if clause is not None:
            return _append_specifiers(doc, clause, [spec.symbol_name])

    return _append_statement(doc, f"export {{ {spec.symbol_name} }} from {quote}{spec.module_specifier}{quote};")


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


def _merge_default_import(doc: SourceDocument, spec: ImportSpec) -> TextEdit | None:
    for declaration in _declarations(doc, "import_statement", spec.module_specifier):
        clause = _child_of_type(declaration, "import_clause")
        if clause is None:
            if not spec.symbol_name:
                return None
            continue
        if any(child.type in ("identifier", "namespace_import") for child in clause.named_children):
            logger.debug("Default import of %s already present in %s", spec.module_specifier, doc.path)
            return None

    # A default import is never folded into an existing named-only declaration.
    quote = _quote_style(doc)
    if spec.symbol_name:
        statement = f"import {spec.symbol_name} from {quote}{spec.module_specifier}{quote};"
    else:
        statement = f"import {quote}{spec.module_specifier}{quote};"
    return _new_import(doc, statement)


def _merge_named_imports(doc: SourceDocument, module: str, names: list[str]) -> TextEdit | None:
    declarations = [
        declaration
        for declaration in _declarations(doc, "import_statement", module)
        if not _is_type_only(declaration)
    ]

    existing: set[str] = set()
    for declaration in declarations:
        named_imports = _named_imports(declaration)
        if named_imports is not None:
            existing.update(_specifier_names(doc, named_imports, "import_specifier"))

    missing = [name for name in names if name not in existing]
    if not missing:
        logger.debug("%s already imported from %s in %s", ", ".join(names), module, doc.path)
        return None

    for declaration in declarations:
        named_imports = _named_imports(declaration)
        if named_imports is not None:
            return _append_specifiers(doc, named_imports, missing)

    for declaration in declarations:
        clause = _child_of_type(declaration, "import_clause")
        if clause is None or _child_of_type(clause, "namespace_import") is not None:
            continue
        default_import = _child_of_type(clause, "identifier")
        if default_import is not None:
            return insert_after(default_import, f", {{ {', '.join(missing)} }}")

    quote = _quote_style(doc)
    return _new_import(doc, f"import {{ {', '.join(missing)} }} from {quote}{module}{quote};")


def _new_import(doc: SourceDocument, statement: str) -> TextEdit:
    imports = top_level_statements(doc, "import_statement")
    if imports:
        return insert_after(imports[-1], f"{doc.newline}{statement}")

    first_statement = next((child for child in doc.root.named_children if child.type != "comment"), None)
    if first_statement is None:
        return _append_statement(doc, statement)
    return insertion(first_statement.start_byte, f"{statement}{doc.newline * 2}")


def _named_imports(declaration: Node) -> Node | None:
    clause = _child_of_type(declaration, "import_clause")
    if clause is None:
        return None
    return _child_of_type(clause, "named_imports")


def _is_type_only(declaration: Node) -> bool:
    return any(not child.is_named and child.type in ("type", "typeof") for child in declaration.children)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _declarations(doc: SourceDocument, statement_type: str, module: str) -> list[Node]:
    return [
        statement
        for statement in top_level_statements(doc, statement_type)
        if module_specifier(doc, statement) == module
    ]


def _child_of_type(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _specifier_names(doc: SourceDocument, clause: Node, specifier_type: str) -> list[str]:
    names: list[str] = []
    for specifier in clause.named_children:
        if specifier.type != specifier_type:
            continue
        name = specifier.child_by_field_name("name")
        if name is not None:
            names.append(doc.text_of(name))
    return names


def _append_specifiers(doc: SourceDocument, clause: Node, names: list[str]) -> TextEdit:
    """Append names to a ``{ ... }`` import or export list."""
    joined = ", ".join(names)
    items = [child for child in clause.children if child.type not in ("{", "}", "comment")]

    if items:
        last = items[-1]
        if last.type == ",":
            return insert_after(last, f" {joined},")
        return insert_after(last, f", {joined}")

    open_brace = _child_of_type(clause, "{")
    close_brace = _child_of_type(clause, "}")
    assert open_brace is not None and close_brace is not None
    if doc.slice(open_brace.end_byte, close_brace.start_byte).strip():
        return insert_after(open_brace, f" {joined},")
    return replacement(open_brace.end_byte, close_brace.start_byte, f" {joined} ")


def _is_namespace_export(declaration: Node) -> bool:
    return any(not child.is_named and child.type == "*" for child in declaration.children)


def _append_statement(doc: SourceDocument, statement: str) -> TextEdit:
    prefix = "" if not doc.source or doc.source.endswith(b"\n") else doc.newline
    return insertion(len(doc.source), f"{prefix}{statement}{doc.newline}")


def _quote_style(doc: SourceDocument) -> str:
    for statement in doc.root.named_children:
        if statement.type not in ("import_statement", "export_statement"):
            continue
        source = statement.child_by_field_name("source")
        if source is not None:
            quote = doc.text_of(source)[:1]
            if quote in ("'", '"'):
                return quote
    return "'"
