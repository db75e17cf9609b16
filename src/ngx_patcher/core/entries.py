"""Metadata entries registered by the artifact generators."""

from ngx_patcher.core.metadata import MetadataProperty
from ngx_patcher.core.strings import classify
from ngx_patcher.models import AccessorArraySpec


def wizard_action(name: str, entity_type: str, project: str) -> AccessorArraySpec:
    """Action opening a generated wizard as a modal page."""
    entity = classify(entity_type)
    wizard = classify(name)
    component = f"Wizard{wizard}Component"
    to_insert = (
        "{\n"
        f"  id: '{entity}.{wizard.replace(entity, '')}',\n"
        "  loadComponent: () => import(\n"
        f'    /* webpackExports: "{component}" */\n'
        f"    '{project}').then(m => m.{component}),\n"
        "  mode: ActionMode.ModalPage\n"
        "}"
    )
    return AccessorArraySpec(
        identifier=MetadataProperty.ACTION.value,
        to_insert=to_insert,
        imports={"ActionMode": "cmf-core"},
    )
