"""Global app configuration (battle calculation, battle values, import)."""

import json
from pathlib import Path
from typing import Any

from encounter_builder.config import (
    DEFAULT_BATTLE_VALUE,
    DEFAULT_BATTLE_VALUES,
    BattleCalculationConfig,
    BattleValueTable,
    ImportSettings,
)

from .core import data_dir

_CONFIG_DEFAULTS: dict[str, Any] = {
    "battle_calculation": BattleCalculationConfig().model_dump(),
    "battle_values": dict(DEFAULT_BATTLE_VALUES),
    "default_battle_value": DEFAULT_BATTLE_VALUE,
    "import": ImportSettings().model_dump(),
}

# Groups merged key-by-key; everything else is a scalar overwrite.
_GROUPS = ("battle_calculation", "battle_values", "import")


def _config_path() -> Path:
    return data_dir() / "config.json"


def _merge(config: dict[str, Any], fields: dict[str, Any]) -> None:
    for group in _GROUPS:
        if group in fields and isinstance(fields[group], dict):
            config[group].update(fields[group])
    if "default_battle_value" in fields:
        config["default_battle_value"] = fields["default_battle_value"]


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = json.loads(json.dumps(_CONFIG_DEFAULTS))
    path = _config_path()
    if path.is_file():
        _merge(config, json.loads(path.read_text()))
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config, validate, and persist. Returns full config.

    Raises pydantic.ValidationError if a merged group is malformed; nothing is
    written in that case.
    """
    config = get_config()
    _merge(config, fields)
    battle_config_from(config)
    battle_values_from(config)
    import_settings_from(config)
    _config_path().write_text(json.dumps(config, indent=2))
    return config


def battle_config_from(config: dict[str, Any]) -> BattleCalculationConfig:
    return BattleCalculationConfig.model_validate(config["battle_calculation"])


def battle_values_from(config: dict[str, Any]) -> BattleValueTable:
    return BattleValueTable(
        values=config["battle_values"],
        default=config["default_battle_value"],
    )


def import_settings_from(config: dict[str, Any]) -> ImportSettings:
    return ImportSettings.model_validate(config["import"])
