from collections.abc import Callable

import pytest

from ngx_patcher.core.engine import compute_edits, resolve_bootstrap
from ngx_patcher.core.errors import ParseError
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

Patch = Callable[[str, list[TextEdit]], str]

MODULE = "import { NgModule } from '@angular/core';\n\n@NgModule({\n  imports: []\n})\nexport class AppModule {}\n"
METADATA = "import { PackageMetadata } from 'cmf-core';\n\nexport class Meta extends PackageMetadata {}\n"


@pytest.mark.parametrize(
    ("text", "request_"),
    [
        (MODULE, ImportSpec(symbol_name="CommonModule", module_specifier="@angular/common")),
        (MODULE, ExportSpec(module_specifier="./app.module", is_default=True)),
        (MODULE, DecoratorArraySpec(metadata_field="imports", symbol_name="CommonModule")),
        (METADATA, AccessorArraySpec(identifier="routes", to_insert="{ path: '' }")),
        (METADATA, PackageInfo(package="lib", widgets=["W"])),
    ],
    ids=["import", "export", "decorator-array", "accessor-array", "package-info"],
)
def test_every_request_is_idempotent(
    patch_text: Patch, assert_parses: Callable[[str], None], text: str, request_: PatchRequest
) -> None:
    edits = compute_edits("src/file.ts", text, request_)
    assert edits

    patched = patch_text(text, edits)

    assert_parses(patched)
    assert compute_edits("src/file.ts", patched, request_) == []


def test_parse_errors_surface() -> None:
    with pytest.raises(ParseError):
        compute_edits("src/file.ts", "export class {", ImportSpec(symbol_name="A", module_specifier="a"))


def test_unknown_request_is_rejected() -> None:
    with pytest.raises(TypeError, match="Unsupported patch request"):
        compute_edits("src/file.ts", MODULE, BootstrapLookupSpec())  # type: ignore[arg-type]


def test_resolve_bootstrap() -> None:
    text = "import { AppModule } from './app/app.module';\n\nplatformBrowserDynamic().bootstrapModule(AppModule);\n"

    assert resolve_bootstrap("src/main.ts", text) == "src/app/app.module.ts"
    assert resolve_bootstrap("src/main.ts", text, BootstrapLookupSpec(extension="")) == "src/app/app.module"
