"""File-based JSON storage for template collections and app config.

Data layout:
  data/
    adversaries.json            Imported adversary library (name-keyed)
    custom-adversaries.json     User-authored adversaries (name-keyed)
    environments.json           Imported environment library (name-keyed)
    custom-environments.json    User-authored environments (name-keyed)
    config.json                 Battle calculation, battle values, import settings

Merging: list_templates() and get_template() merge imported + custom data;
custom wins on name collision. Deleting a custom override reveals the
imported template. Re-import replaces the imported collection wholesale and
never touches custom templates.

Config: get_config() returns defaults merged with stored values.
update_config() merges battle_calculation, battle_values and import
key-by-key and overwrites default_battle_value.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
)

from .templates import (  # noqa: F401
    delete_template,
    get_custom_template,
    get_template,
    list_templates,
    replace_imported_templates,
    save_custom_template,
)

from .config import (  # noqa: F401
    battle_config_from,
    battle_values_from,
    get_config,
    import_settings_from,
    update_config,
)
