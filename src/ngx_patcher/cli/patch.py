import difflib
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.syntax import Syntax

from ngx_patcher.config import get_root
from ngx_patcher.core.edits import apply_edits
from ngx_patcher.core.engine import compute_edits
from ngx_patcher.core.errors import PatchError
from ngx_patcher.core.metadata import MetadataProperty
from ngx_patcher.models import (
    AccessorArraySpec,
    DecoratorArraySpec,
    ExportSpec,
    ImportSpec,
    PackageInfo,
    PatchRequest,
)
from ngx_patcher.tree import LocalFileTree

console = Console()

DryRun = Annotated[bool, typer.Option("--dry-run", help="Print the diff instead of writing the file.")]


def _run(path: str, request: PatchRequest, dry_run: bool) -> None:
    tree = LocalFileTree(get_root())
    text = tree.read_text(path)
    if text is None:
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        edits = compute_edits(path, text, request)
    except PatchError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if not edits:
        console.print(f"[yellow]Nothing to change[/yellow] in {path}")
        return

    patched = apply_edits(text, edits)
    if dry_run:
        diff = difflib.unified_diff(
            text.splitlines(keepends=True),
            patched.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
        console.print(Syntax("".join(diff), "diff", theme="ansi_dark"))
        return

    tree.write_text(path, patched)
    console.print(f"[green]Patched[/green] {path} ({len(edits)} edit(s))")


def _parse_imports(values: list[str] | None) -> dict[str, str]:
    imports: dict[str, str] = {}
    for value in values or []:
        symbol, separator, module = value.partition("=")
        if not separator or not symbol or not module:
            raise typer.BadParameter(f"Expected SYMBOL=MODULE, got '{value}'", param_hint="--import")
        imports[symbol.strip()] = module.strip()
    return imports


def add_import(
    path: Annotated[str, typer.Argument(help="File to patch.")],
    symbol: Annotated[str, typer.Argument(help="Symbol to import.")],
    module: Annotated[str, typer.Argument(help="Module specifier to import from.")],
    default: Annotated[bool, typer.Option("--default", help="Add a default import.")] = False,
    dry_run: DryRun = False,
) -> None:
    """Import a symbol unless it is already imported."""
    _run(path, ImportSpec(symbol_name=symbol, module_specifier=module, is_default=default), dry_run)


def add_export(
    path: Annotated[str, typer.Argument(help="File to patch.")],
    module: Annotated[str, typer.Argument(help="Module specifier to re-export.")],
    symbol: Annotated[str | None, typer.Option(help="Only re-export this symbol.")] = None,
    dry_run: DryRun = False,
) -> None:
    """Re-export a module (``export * from``) or one of its symbols."""
    spec = ExportSpec(symbol_name=symbol or "", module_specifier=module, is_default=symbol is None)
    _run(path, spec, dry_run)


def ng_module(
    path: Annotated[str, typer.Argument(help="File declaring the decorated class.")],
    field: Annotated[str, typer.Argument(help="Metadata property, e.g. imports or declarations.")],
    symbol: Annotated[str, typer.Argument(help="Symbol to register.")],
    import_path: Annotated[str | None, typer.Option(help="Module to import the symbol from.")] = None,
    before: Annotated[str | None, typer.Option(help="Insert before this existing element.")] = None,
    decorator: Annotated[str, typer.Option(help="Decorator holding the metadata.")] = "NgModule",
    dry_run: DryRun = False,
) -> None:
    """Add a symbol to an array property of a class decorator."""
    spec = DecoratorArraySpec(
        metadata_field=field,
        symbol_name=symbol,
        decorator_name=decorator,
        import_path=import_path,
        insert_before=before,
    )
    _run(path, spec, dry_run)


def metadata(
    path: Annotated[str, typer.Argument(help="Metadata service file.")],
    kind: Annotated[MetadataProperty, typer.Argument(help="Metadata accessor to extend.")],
    insert: Annotated[str | None, typer.Option(help="Entry to insert.")] = None,
    insert_file: Annotated[Path | None, typer.Option(help="Read the entry to insert from a file.")] = None,
    imports: Annotated[list[str] | None, typer.Option("--import", help="Required import as SYMBOL=MODULE.")] = None,
    base_class: Annotated[str | None, typer.Option(help="Base class of the metadata service.")] = None,
    dry_run: DryRun = False,
) -> None:
    """Append an entry to a metadata accessor, creating the accessor when missing."""
    if insert is not None and insert_file is None:
        to_insert = insert
    elif insert_file is not None and insert is None:
        to_insert = insert_file.read_text(encoding="utf-8")
    else:
        raise typer.BadParameter("Pass exactly one of --insert or --insert-file.")
    spec = AccessorArraySpec(
        identifier=kind.value,
        to_insert=to_insert,
        imports=_parse_imports(imports),
        base_class=base_class,
    )
    _run(path, spec, dry_run)


def package_info(
    path: Annotated[str, typer.Argument(help="Metadata service file.")],
    package: Annotated[str, typer.Argument(help="Package name.")],
    widgets: Annotated[list[str] | None, typer.Option("--widget", help="Widget to register.")] = None,
    data_sources: Annotated[list[str] | None, typer.Option("--data-source", help="Data source to register.")] = None,
    converters: Annotated[list[str] | None, typer.Option("--converter", help="Converter to register.")] = None,
    components: Annotated[list[str] | None, typer.Option("--component", help="Component to register.")] = None,
    dry_run: DryRun = False,
) -> None:
    """Register package artifacts in the packageInfo accessor and its webpackExports list."""
    info = PackageInfo(
        package=package,
        widgets=widgets or [],
        data_sources=data_sources or [],
        converters=converters or [],
        components=components or [],
    )
    _run(path, info, dry_run)
