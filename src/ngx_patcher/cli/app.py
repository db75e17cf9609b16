import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from ngx_patcher.cli.patch import add_export, add_import, metadata, ng_module, package_info
from ngx_patcher.cli.project import project_app
from ngx_patcher.config import get_log_level

app = typer.Typer(
    name="ngx-patcher",
    help="ngx-patcher: register scaffolded artifacts in existing TypeScript files.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every decision, including no-ops.")] = False,
) -> None:
    logging.basicConfig(
        level="DEBUG" if verbose else get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("import")(add_import)
app.command("export")(add_export)
app.command("ng-module")(ng_module)
app.command("metadata")(metadata)
app.command("package-info")(package_info)
app.add_typer(project_app, name="project")


def main() -> None:
    app()
