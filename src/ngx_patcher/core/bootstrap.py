import logging
import posixpath

from tree_sitter import Node

from ngx_patcher.core.ast import (
    SourceDocument,
    descendants_of_type,
    first_argument,
    string_value,
    top_level_statements,
)

logger = logging.getLogger(__name__)


def find_bootstrap_module_path(doc: SourceDocument, extension: str = ".ts") -> str | None:
    """Path of the module passed to ``bootstrapModule(...)`` in an entry-point file.

    Handles both ``bootstrapModule(AppModule)`` with a static import and
    ``import('./app/app.module').then(m => ... bootstrapModule(m.AppModule))``.
    """
    calls = list(descendants_of_type(doc.root, "call_expression"))
    bootstrap_call = next((call for call in calls if _callee_text(doc, call).endswith("bootstrapModule")), None)
    if bootstrap_call is None:
        logger.debug("No bootstrapModule call in %s", doc.path)
        return None

    argument = first_argument(bootstrap_call)
    if argument is None:
        return None

    relative_path: str | None = None
    if argument.type == "identifier":
        relative_path = _imported_from(doc, doc.text_of(argument))
    elif argument.type == "member_expression":
        dynamic_import = next((call for call in calls if _callee_text(doc, call) == "import"), None)
        specifier = first_argument(dynamic_import) if dynamic_import is not None else None
        if specifier is not None:
            relative_path = string_value(doc, specifier)

    if not relative_path:
        logger.debug("Cannot resolve the bootstrapped module of %s", doc.path)
        return None

    directory = posixpath.dirname(posixpath.normpath(doc.path))
    return posixpath.normpath(posixpath.join(directory, relative_path)) + extension


def _callee_text(doc: SourceDocument, call: Node) -> str:
    function = call.child_by_field_name("function")
    return doc.text_of(function) if function is not None else ""


def _imported_from(doc: SourceDocument, local_name: str) -> str | None:
    for statement in top_level_statements(doc, "import_statement"):
        for specifier in descendants_of_type(statement, "import_specifier"):
            name = specifier.child_by_field_name("alias")
            if name is None:
                name = specifier.child_by_field_name("name")
            if name is not None and doc.text_of(name) == local_name:
                source = statement.child_by_field_name("source")
                return string_value(doc, source) if source is not None else None
    return None
