"""Read a file from a tree, apply one patch request, write it back.

Every rule re-reads and re-parses its target, so rules can be chained
against the same file.
"""

import logging
import posixpath

from ngx_patcher.core.ast import SourceDocument
from ngx_patcher.core.bootstrap import find_bootstrap_module_path
from ngx_patcher.core.edits import apply_edits
from ngx_patcher.core.engine import compute_edits
from ngx_patcher.core.errors import TargetFileNotFoundError
from ngx_patcher.core.metadata import find_metadata_file
from ngx_patcher.core.ports.file_tree import FileTree
from ngx_patcher.models import (
    AccessorArraySpec,
    BootstrapLookupSpec,
    DecoratorArraySpec,
    ExportSpec,
    PackageInfo,
    PatchRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_METADATA_ENTRY = "src/public-api.ts"


def read_document(tree: FileTree, path: str) -> SourceDocument:
    text = tree.read_text(path)
    if text is None:
        raise TargetFileNotFoundError(path)
    return SourceDocument.parse(path, text)


def patch_file(tree: FileTree, path: str, request: PatchRequest) -> bool:
    """Apply ``request`` to the file at ``path``. Returns whether the file changed."""
    text = tree.read_text(path)
    if text is None:
        raise TargetFileNotFoundError(path)

    edits = compute_edits(path, text, request)
    if not edits:
        logger.debug("Nothing to change in %s", path)
        return False

    tree.write_text(path, apply_edits(text, edits))
    logger.info("Applied %d edit(s) to %s", len(edits), path)
    return True


def update_public_api(
    tree: FileTree, public_api_path: str, module_specifier: str, symbol_name: str | None = None
) -> bool:
    """Re-export ``module_specifier`` (all of it, or only ``symbol_name``) from a public api file."""
    spec = ExportSpec(
        symbol_name=symbol_name or "",
        module_specifier=module_specifier,
        is_default=symbol_name is None,
    )
    return patch_file(tree, public_api_path, spec)


def resolve_metadata_file(tree: FileTree, project_root: str, entry_file: str = DEFAULT_METADATA_ENTRY) -> str | None:
    entry_path = posixpath.join(project_root, "metadata", entry_file)
    content = tree.read_text(entry_path)
    if content is None:
        raise TargetFileNotFoundError(entry_path)
    return find_metadata_file(content, entry_file, project_root)


def update_metadata(
    tree: FileTree, project_root: str, spec: AccessorArraySpec, entry_file: str = DEFAULT_METADATA_ENTRY
) -> bool:
    metadata_path = resolve_metadata_file(tree, project_root, entry_file)
    if metadata_path is None:
        logger.warning("No metadata service exported from %s/metadata/%s", project_root, entry_file)
        return False
    return patch_file(tree, metadata_path, spec)


def update_package_info(
    tree: FileTree, project_root: str, info: PackageInfo, entry_file: str = DEFAULT_METADATA_ENTRY
) -> bool:
    metadata_path = resolve_metadata_file(tree, project_root, entry_file)
    if metadata_path is None:
        logger.warning("No metadata service exported from %s/metadata/%s", project_root, entry_file)
        return False
    return patch_file(tree, metadata_path, info)


def add_to_ng_module(tree: FileTree, module_path: str, spec: DecoratorArraySpec) -> bool:
    return patch_file(tree, module_path, spec)


def find_bootstrap_module(tree: FileTree, main_path: str, lookup: BootstrapLookupSpec | None = None) -> str | None:
    lookup = lookup or BootstrapLookupSpec()
    return find_bootstrap_module_path(read_document(tree, main_path), lookup.extension)


def add_to_bootstrap_module(tree: FileTree, main_path: str, spec: DecoratorArraySpec) -> bool:
    """Register a symbol in the root module bootstrapped by ``main_path``."""
    module_path = find_bootstrap_module(tree, main_path)
    if module_path is None:
        logger.info("No bootstrapped module found from %s", main_path)
        return False
    return patch_file(tree, module_path, spec)
