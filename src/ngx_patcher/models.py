from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextEdit(BaseModel):
    """A positional patch over the UTF-8 bytes of the original buffer.

    ``start == end`` is a pure insertion.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    text: str

    @model_validator(mode="after")
    def _check_range(self) -> "TextEdit":
        if self.end < self.start:
            raise ValueError(f"Invalid edit range [{self.start}, {self.end})")
        return self

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


class ImportSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol_name: str
    module_specifier: str
    is_default: bool = False


class ExportSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol_name: str = ""
    module_specifier: str
    is_default: bool = False


class DecoratorArraySpec(BaseModel):
    """Register ``symbol_name`` in an array property of a class decorator."""

    model_config = ConfigDict(frozen=True)

    metadata_field: str
    symbol_name: str
    decorator_name: str = "NgModule"
    import_path: str | None = None
    insert_before: str | None = None


class AccessorArraySpec(BaseModel):
    """Append ``to_insert`` to the array returned by a metadata class getter."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    to_insert: str
    imports: dict[str, str] = Field(default_factory=dict)
    base_class: str | None = None


class PackageInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    package: str
    widgets: list[str] = Field(default_factory=list)
    data_sources: list[str] = Field(default_factory=list, alias="dataSources")
    converters: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)
    base_class: str | None = None

    @property
    def exported_names(self) -> list[str]:
        return [*self.widgets, *self.data_sources, *self.converters, *self.components]


class BootstrapLookupSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    extension: str = ".ts"


PatchRequest = ImportSpec | ExportSpec | DecoratorArraySpec | AccessorArraySpec | PackageInfo
