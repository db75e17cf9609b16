from ngx_patcher.core.ast import SourceDocument
from ngx_patcher.core.bootstrap import find_bootstrap_module_path
from ngx_patcher.core.imports import merge_export, merge_import
from ngx_patcher.core.metadata import insert_metadata
from ngx_patcher.core.ngmodule import add_symbol_to_decorator_array
from ngx_patcher.core.package_info import insert_package_info_metadata
from ngx_patcher.models import (
    AccessorArraySpec,
    BootstrapLookupSpec,
    DecoratorArraySpec,
    ExportSpec,
    ImportSpec,
    PackageInfo,
    PatchRequest,
    TextEdit,
)


def compute_edits(file_path: str, file_text: str, request: PatchRequest) -> list[TextEdit]:
    """Parse ``file_text`` and return the edits that apply ``request`` to it.

    An empty list means there is nothing to do. Raises ``ParseError`` when
    the text doesn't parse.
    """
    doc = SourceDocument.parse(file_path, file_text)

    if isinstance(request, ImportSpec):
        edit = merge_import(doc, request)
        return [edit] if edit is not None else []
    if isinstance(request, ExportSpec):
        edit = merge_export(doc, request)
        return [edit] if edit is not None else []
    if isinstance(request, DecoratorArraySpec):
        return add_symbol_to_decorator_array(
            doc,
            request.decorator_name,
            request.metadata_field,
            request.symbol_name,
            request.import_path,
            request.insert_before,
        )
    if isinstance(request, AccessorArraySpec):
        return insert_metadata(doc, request.imports, request.identifier, request.to_insert, request.base_class)
    if isinstance(request, PackageInfo):
        return insert_package_info_metadata(doc, request)

    raise TypeError(f"Unsupported patch request: {type(request).__name__}")


def resolve_bootstrap(file_path: str, file_text: str, request: BootstrapLookupSpec | None = None) -> str | None:
    request = request or BootstrapLookupSpec()
    return find_bootstrap_module_path(SourceDocument.parse(file_path, file_text), request.extension)
