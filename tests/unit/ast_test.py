"""Unit tests for the tree-sitter helpers."""

from collections.abc import Callable
from pathlib import Path

import pytest

from ngx_patcher.core.ast import (
    SourceDocument,
    class_decorators,
    decorator_name,
    descendants_of_type,
    extends_names,
    find_class_extending,
    find_constructor,
    find_getter,
    find_property,
    getters,
    member_name,
    module_specifier,
    string_value,
    top_level_statements,
)
from ngx_patcher.core.errors import ParseError, PatchError
from ngx_patcher.core.languages import detect_language_from_path, normalize_language, resolve_language

SERVICE = """\
import { Injectable } from '@angular/core';
import { PackageMetadata } from 'cmf-core';

@Injectable({
  providedIn: 'root'
})
export class LibMetadataService extends PackageMetadata {

  constructor() {
    super();
  }

  public override get routes(): RouteConfig[] {
    return [];
  }

  public get version(): string {
    return '1';
  }
}
"""


def test_parse_detects_language_from_extension() -> None:
    assert SourceDocument.parse("src/main.ts", "const a = 1;\n").language == "typescript"
    assert SourceDocument.parse("src/app.tsx", "const a = <div />;\n").language == "tsx"


def test_parse_error_carries_location() -> None:
    with pytest.raises(ParseError) as exc_info:
        SourceDocument.parse("src/broken.ts", "import { A from 'x';")

    assert exc_info.value.path == "src/broken.ts"
    assert exc_info.value.line == 1
    assert isinstance(exc_info.value, PatchError)


def test_parse_rejects_unsupported_extension() -> None:
    with pytest.raises(ValueError, match="Unsupported file extension"):
        SourceDocument.parse("styles.scss", "a {}")


def test_text_of_uses_byte_offsets(parse: Callable[..., SourceDocument]) -> None:
    doc = parse("const a = 'é ü';\n")
    statement = top_level_statements(doc, "lexical_declaration")[0]

    assert doc.text_of(statement) == "const a = 'é ü';"


def test_module_specifier(parse: Callable[..., SourceDocument]) -> None:
    doc = parse(SERVICE)
    imports = top_level_statements(doc, "import_statement")

    assert [module_specifier(doc, statement) for statement in imports] == ["@angular/core", "cmf-core"]


@pytest.mark.parametrize(
    ("literal", "value"),
    [("'a'", "a"), ('"a"', "a"), ("`a`", "a"), ("`${a}`", None), ("a", None)],
    ids=["single", "double", "template", "substitution", "identifier"],
)
def test_string_value(parse: Callable[..., SourceDocument], literal: str, value: str | None) -> None:
    doc = parse(f"const a = 1;\nconst x = {literal};\n")
    declarator = list(descendants_of_type(doc.root, "variable_declarator"))[-1]
    initializer = declarator.child_by_field_name("value")
    assert initializer is not None

    assert string_value(doc, initializer) == value


def test_newline_follows_the_file(parse: Callable[..., SourceDocument]) -> None:
    assert parse("const a = 1;\n").newline == "\n"
    assert parse("const a = 1;\r\n").newline == "\r\n"
    assert parse("const a = 1;\r\n").with_native_newlines("a\nb\r\n") == "a\r\nb\r\n"


def test_find_class_extending_and_its_members(parse: Callable[..., SourceDocument]) -> None:
    doc = parse(SERVICE)
    class_node = find_class_extending(doc, "PackageMetadata")

    assert class_node is not None
    assert extends_names(doc, class_node) == ["PackageMetadata"]
    assert [member_name(doc, getter) for getter in getters(doc, class_node)] == [
        "routes",
        "version",
    ]
    assert find_getter(doc, class_node, "routes") is not None
    assert find_getter(doc, class_node, "actions") is None
    assert find_constructor(doc, class_node) is not None
    assert find_class_extending(doc, "Other") is None


def test_decorators_before_export_belong_to_the_class(parse: Callable[..., SourceDocument]) -> None:
    doc = parse(SERVICE)
    class_node = find_class_extending(doc, "PackageMetadata")
    assert class_node is not None

    decorators = class_decorators(class_node)

    assert [decorator_name(doc, decorator) for decorator in decorators] == ["Injectable"]


def test_find_property_accepts_quoted_keys(parse: Callable[..., SourceDocument]) -> None:
    doc = parse("const config = { 'imports': [], declarations };\n")
    obj = next(descendants_of_type(doc.root, "object"))

    assert find_property(doc, obj, "imports") is not None
    assert find_property(doc, obj, "declarations") is not None
    assert find_property(doc, obj, "providers") is None


class TestLanguages:
    def test_normalize_aliases(self) -> None:
        assert normalize_language("TS") == "typescript"
        assert normalize_language("js") == "javascript"

    def test_normalize_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unsupported language"):
            normalize_language("python")

    @pytest.mark.parametrize(
        ("path", "language"),
        [("main.ts", "typescript"), ("a.mts", "typescript"), ("c.tsx", "tsx"), ("b.mjs", "javascript")],
    )
    def test_detect_language_from_path(self, path: str, language: str) -> None:
        assert detect_language_from_path(Path(path)) == language

    def test_resolve_requires_a_hint(self) -> None:
        with pytest.raises(ValueError, match="Language must be provided"):
            resolve_language(None, None)
