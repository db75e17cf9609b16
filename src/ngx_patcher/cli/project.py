from typing import Annotated

import typer
from rich.console import Console

from ngx_patcher.config import get_root
from ngx_patcher.core.entries import wizard_action as _wizard_action
from ngx_patcher.core.errors import PatchError
from ngx_patcher.core.rules import (
    DEFAULT_METADATA_ENTRY,
    add_to_bootstrap_module,
    find_bootstrap_module,
    update_metadata,
    update_public_api,
)
from ngx_patcher.models import DecoratorArraySpec
from ngx_patcher.tree import LocalFileTree

project_app = typer.Typer(help="Patch files located through the project layout.")
console = Console()


def _report(changed: bool, target: str) -> None:
    if changed:
        console.print(f"[green]Patched[/green] {target}")
    else:
        console.print(f"[yellow]Nothing to change[/yellow] for {target}")


@project_app.command("bootstrap")
def bootstrap(
    main: Annotated[str, typer.Argument(help="Application entry point, e.g. src/main.ts.")],
) -> None:
    """Print the path of the module bootstrapped by an entry point."""
    try:
        module_path = find_bootstrap_module(LocalFileTree(get_root()), main)
    except PatchError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if module_path is None:
        console.print(f"[yellow]No bootstrapped module found in {main}[/yellow]")
        raise typer.Exit(1)
    console.print(module_path)


@project_app.command("bootstrap-module")
def bootstrap_module(
    main: Annotated[str, typer.Argument(help="Application entry point, e.g. src/main.ts.")],
    field: Annotated[str, typer.Argument(help="NgModule property, e.g. imports.")],
    symbol: Annotated[str, typer.Argument(help="Symbol to register.")],
    import_path: Annotated[str | None, typer.Option(help="Module to import the symbol from.")] = None,
) -> None:
    """Register a symbol in the root NgModule of an application."""
    spec = DecoratorArraySpec(metadata_field=field, symbol_name=symbol, import_path=import_path)
    try:
        changed = add_to_bootstrap_module(LocalFileTree(get_root()), main, spec)
    except PatchError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    _report(changed, main)


@project_app.command("public-api")
def public_api(
    path: Annotated[str, typer.Argument(help="Public api file, e.g. projects/lib/src/public-api.ts.")],
    module: Annotated[str, typer.Argument(help="Module specifier to re-export.")],
    symbol: Annotated[str | None, typer.Option(help="Only re-export this symbol.")] = None,
) -> None:
    """Make a generated file reachable from the library's public api."""
    try:
        changed = update_public_api(LocalFileTree(get_root()), path, module, symbol)
    except PatchError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    _report(changed, path)


@project_app.command("wizard-action")
def wizard_action(
    project_root: Annotated[str, typer.Argument(help="Library root, e.g. projects/lib.")],
    name: Annotated[str, typer.Argument(help="Wizard name.")],
    entity_type: Annotated[str, typer.Argument(help="Entity type the wizard acts on.")],
    project: Annotated[str, typer.Option(help="Package the wizard component is exported from.")],
    entry_file: Annotated[str, typer.Option(help="Public api of the metadata entry point.")] = DEFAULT_METADATA_ENTRY,
) -> None:
    """Register the modal action opening a wizard in the library's metadata service."""
    spec = _wizard_action(name, entity_type, project)
    try:
        changed = update_metadata(LocalFileTree(get_root()), project_root, spec, entry_file)
    except PatchError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    _report(changed, f"{project_root} metadata")
