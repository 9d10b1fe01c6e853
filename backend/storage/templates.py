"""Template collections (imported library merged with custom templates).

Each collection file is a JSON object keyed by template name. Custom
templates win over imported ones on name collision; deleting a custom
override reveals the imported template underneath.
"""

from pathlib import Path

from encounter_builder.models import (
    AdversaryTemplate,
    EnvironmentTemplate,
    Template,
    TemplateKind,
)

from .core import data_dir, read_json, write_json

_MODELS: dict[str, type[AdversaryTemplate] | type[EnvironmentTemplate]] = {
    "adversaries": AdversaryTemplate,
    "environments": EnvironmentTemplate,
}


def _imported_path(kind: TemplateKind) -> Path:
    return data_dir() / f"{kind}.json"


def _custom_path(kind: TemplateKind) -> Path:
    return data_dir() / f"custom-{kind}.json"


def _load(kind: TemplateKind, path: Path) -> dict[str, Template]:
    model = _MODELS[kind]
    raw = read_json(path, {})
    return {name: model.model_validate(data) for name, data in raw.items()}


def _save(path: Path, templates: dict[str, Template]) -> None:
    write_json(path, {name: t.model_dump(mode="json") for name, t in templates.items()})


def list_templates(kind: TemplateKind) -> list[Template]:
    """All templates of one kind, imported merged with custom, sorted by name."""
    by_name = _load(kind, _imported_path(kind))
    by_name.update(_load(kind, _custom_path(kind)))
    return [by_name[name] for name in sorted(by_name, key=str.lower)]


def get_template(kind: TemplateKind, name: str) -> Template | None:
    custom = _load(kind, _custom_path(kind))
    if name in custom:
        return custom[name]
    return _load(kind, _imported_path(kind)).get(name)


def get_custom_template(kind: TemplateKind, name: str) -> Template | None:
    return _load(kind, _custom_path(kind)).get(name)


def save_custom_template(kind: TemplateKind, template: Template) -> Template:
    """Store a user-authored template, overwriting any custom one of that name."""
    saved = template.model_copy(update={"is_custom": True})
    custom = _load(kind, _custom_path(kind))
    custom[saved.name] = saved
    _save(_custom_path(kind), custom)
    return saved


def delete_template(kind: TemplateKind, name: str) -> bool:
    """Delete the custom template of that name, else the imported one."""
    for path in (_custom_path(kind), _imported_path(kind)):
        templates = _load(kind, path)
        if name in templates:
            del templates[name]
            _save(path, templates)
            return True
    return False


def replace_imported_templates(kind: TemplateKind, templates: dict[str, Template]) -> int:
    """Replace the imported collection wholesale. Returns the stored count."""
    stored = {
        name: t.model_copy(update={"is_custom": False}) for name, t in templates.items()
    }
    _save(_imported_path(kind), stored)
    return len(stored)
