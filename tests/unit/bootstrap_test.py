"""Unit tests for locating the module bootstrapped by an entry point."""

import pytest

from ngx_patcher.core.ast import SourceDocument
from ngx_patcher.core.bootstrap import find_bootstrap_module_path

STATIC_MAIN = """\
import { platformBrowserDynamic } from '@angular/platform-browser-dynamic';
import { AppModule } from './app/app.module';

platformBrowserDynamic().bootstrapModule(AppModule)
  .catch(err => console.error(err));
"""

DYNAMIC_MAIN = """\
import { platformBrowserDynamic } from '@angular/platform-browser-dynamic';

import('./app/app.module').then(m => platformBrowserDynamic().bootstrapModule(m.AppModule));
"""

CONFIG_MAIN = """\
import { platformBrowserDynamic } from '@angular/platform-browser-dynamic';
import { loadApplicationConfig } from 'cmf-core/init';

loadApplicationConfig('assets/config.json').then(() => {
  import(/* webpackMode: "eager" */'./app/app.module').then((m) => {
    platformBrowserDynamic().bootstrapModule(m.AppModule)
      .catch(err => console.error(err));
  });
});
"""


@pytest.mark.parametrize(
    ("path", "text", "expected"),
    [
        ("src/main.ts", STATIC_MAIN, "src/app/app.module.ts"),
        ("main.ts", DYNAMIC_MAIN, "app/app.module.ts"),
        ("/application/src/main.ts", CONFIG_MAIN, "/application/src/app/app.module.ts"),
    ],
    ids=["static-import", "dynamic-import", "config-loader"],
)
def test_resolves_bootstrapped_module(path: str, text: str, expected: str) -> None:
    assert find_bootstrap_module_path(SourceDocument.parse(path, text)) == expected


def test_resolves_aliased_import() -> None:
    text = STATIC_MAIN.replace("import { AppModule }", "import { AppModule as Root }").replace(
        "bootstrapModule(AppModule)", "bootstrapModule(Root)"
    )

    assert find_bootstrap_module_path(SourceDocument.parse("src/main.ts", text)) == "src/app/app.module.ts"


def test_resolves_parent_relative_paths() -> None:
    text = STATIC_MAIN.replace("'./app/app.module'", "'../shared/root.module'")

    assert find_bootstrap_module_path(SourceDocument.parse("src/main.ts", text)) == "shared/root.module.ts"


def test_custom_extension() -> None:
    doc = SourceDocument.parse("src/main.ts", STATIC_MAIN)

    assert find_bootstrap_module_path(doc, extension=".js") == "src/app/app.module.js"


def test_no_bootstrap_call() -> None:
    doc = SourceDocument.parse("src/main.ts", "console.log('no app');\n")

    assert find_bootstrap_module_path(doc) is None


def test_bootstrapped_symbol_not_imported() -> None:
    text = "platformBrowserDynamic().bootstrapModule(AppModule);\n"

    assert find_bootstrap_module_path(SourceDocument.parse("src/main.ts", text)) is None
