import pytest
from pydantic import ValidationError

from ngx_patcher.core.entries import wizard_action
from ngx_patcher.core.metadata import PROPERTY_REFERENCE, MetadataProperty
from ngx_patcher.core.strings import classify, nameify
from ngx_patcher.models import AccessorArraySpec, DecoratorArraySpec, ImportSpec, PackageInfo


def test_package_info_accepts_camel_case_alias() -> None:
    info = PackageInfo.model_validate({"package": "lib", "dataSources": ["Source"]})

    assert info.data_sources == ["Source"]


def test_package_info_exported_names_order() -> None:
    info = PackageInfo(
        package="lib",
        widgets=["W"],
        data_sources=["D"],
        converters=["C"],
        components=["X"],
    )

    assert info.exported_names == ["W", "D", "C", "X"]


def test_requests_are_frozen() -> None:
    spec = ImportSpec(symbol_name="A", module_specifier="a")

    with pytest.raises(ValidationError):
        spec.symbol_name = "B"  # type: ignore[misc]


def test_decorator_array_spec_defaults_to_ng_module() -> None:
    spec = DecoratorArraySpec(metadata_field="imports", symbol_name="CommonModule")

    assert spec.decorator_name == "NgModule"
    assert spec.import_path is None
    assert spec.insert_before is None


def test_every_metadata_property_has_a_type_reference() -> None:
    assert set(PROPERTY_REFERENCE) == set(MetadataProperty)
    assert PROPERTY_REFERENCE[MetadataProperty.ROUTE].type_name == "RouteConfig"
    assert PROPERTY_REFERENCE[MetadataProperty.ENTITY_TYPE].type_name == "EntityTypeMetadata"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("actionButtons", "Action Buttons"), ("routes", "Routes"), ("packageInfo", "Package Info")],
)
def test_nameify(value: str, expected: str) -> None:
    assert nameify(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("menu-item", "MenuItem"), ("lot", "Lot"), ("lot_wizard", "LotWizard")],
)
def test_classify(value: str, expected: str) -> None:
    assert classify(value) == expected


def test_wizard_action_entry() -> None:
    spec = wizard_action("lot-wizard", "lot", "lib")

    assert isinstance(spec, AccessorArraySpec)
    assert spec.identifier == "actions"
    assert spec.imports == {"ActionMode": "cmf-core"}
    assert "id: 'Lot.Wizard'," in spec.to_insert
    assert "'lib').then(m => m.WizardLotWizardComponent)," in spec.to_insert
    assert "mode: ActionMode.ModalPage" in spec.to_insert
