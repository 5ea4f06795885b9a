from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from raidinsure.application.services import insurance_tables
from raidinsure.application.services.outcome import ConfigurationGap, Outcome
from raidinsure.domain.models.airdrop import LootRequest, MinMax


_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsuranceConfig:
    return_time_override_seconds: int = insurance_tables.RETURN_TIME_OVERRIDE_SECONDS
    blacklisted_equipment_slots: Tuple[str, ...] = insurance_tables.BLACKLISTED_EQUIPMENT_SLOTS
    insurance_multiplier: Dict[str, float] = field(
        default_factory=lambda: dict(insurance_tables.INSURANCE_MULTIPLIERS)
    )


@dataclass(frozen=True)
class AirdropConfig:
    airdrop_type_weightings: Dict[str, int] = field(
        default_factory=lambda: dict(insurance_tables.AIRDROP_TYPE_WEIGHTINGS)
    )
    loot: Dict[str, LootRequest] = field(
        default_factory=lambda: {key: loot_request_from_dict(row) for key, row in insurance_tables.AIRDROP_LOOT.items()}
    )


def _min_max(payload: Any) -> MinMax:
    if not isinstance(payload, Mapping):
        return MinMax()
    return MinMax(min=int(payload.get("min", 0) or 0), max=int(payload.get("max", 0) or 0))


def loot_request_from_dict(payload: Mapping[str, Any]) -> LootRequest:
    return LootRequest(
        preset_count=_min_max(payload.get("presetCount")),
        item_count=_min_max(payload.get("itemCount")),
        weapon_crate_count=_min_max(payload.get("weaponCrateCount")),
        item_blacklist=[str(tpl) for tpl in payload.get("itemBlacklist", [])],
        item_type_whitelist=[str(tpl) for tpl in payload.get("itemTypeWhitelist", [])],
        item_limits={str(key): int(value) for key, value in dict(payload.get("itemLimits") or {}).items()},
        item_stack_limits={
            str(key): _min_max(value) for key, value in dict(payload.get("itemStackLimits") or {}).items()
        },
        armor_level_whitelist=[int(level) for level in payload.get("armorLevelWhitelist", [])],
    )


def insurance_config_from_dict(payload: Mapping[str, Any]) -> Outcome[InsuranceConfig]:
    """Build insurance settings, defaulting the exclusion set when the section omits it."""
    gap = None
    slots = payload.get("blacklistedEquipment")
    if slots is None:
        gap = ConfigurationGap(kind="blacklisted_equipment", subject="insurance", detail="no slots are excluded")
        slots = ()
    multipliers = payload.get("insuranceMultiplier")
    if not isinstance(multipliers, Mapping):
        multipliers = insurance_tables.INSURANCE_MULTIPLIERS
    config = InsuranceConfig(
        return_time_override_seconds=int(payload.get("returnTimeOverrideSeconds", 0) or 0),
        blacklisted_equipment_slots=tuple(str(slot) for slot in slots),
        insurance_multiplier={str(key): float(value) for key, value in multipliers.items()},
    )
    if gap is not None:
        return Outcome.defaulted(config, gap)
    return Outcome.success(config)


def airdrop_config_from_dict(payload: Mapping[str, Any]) -> AirdropConfig:
    weightings = payload.get("airdropTypeWeightings")
    loot = payload.get("loot")
    defaults = AirdropConfig()
    return AirdropConfig(
        airdrop_type_weightings=(
            {str(key): int(value) for key, value in weightings.items()}
            if isinstance(weightings, Mapping)
            else defaults.airdrop_type_weightings
        ),
        loot=(
            {str(key): loot_request_from_dict(row) for key, row in loot.items() if isinstance(row, Mapping)}
            if isinstance(loot, Mapping)
            else defaults.loot
        ),
    )


def _read_config_file(path: str | Path | None) -> dict[str, Any]:
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        _LOGGER.warning("Insurance config file not found, using defaults", extra={"path": str(config_path)})
        return {}
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    return payload if isinstance(payload, dict) else {}


def load_insurance_config(path: str | Path | None = None) -> InsuranceConfig:
    payload = _read_config_file(path if path is not None else os.getenv("RAIDINS_CONFIG_PATH"))
    section = payload.get("insurance")
    if isinstance(section, Mapping):
        outcome = insurance_config_from_dict(section)
        if outcome.gap is not None:
            _LOGGER.warning(outcome.gap.describe())
        config = outcome.value
    else:
        config = InsuranceConfig()

    override = os.getenv("RAIDINS_INSURANCE_RETURN_OVERRIDE_S")
    if override is not None and override.strip():
        config = InsuranceConfig(
            return_time_override_seconds=max(0, int(override)),
            blacklisted_equipment_slots=config.blacklisted_equipment_slots,
            insurance_multiplier=dict(config.insurance_multiplier),
        )
    return config


def load_airdrop_config(path: str | Path | None = None) -> AirdropConfig:
    payload = _read_config_file(path if path is not None else os.getenv("RAIDINS_CONFIG_PATH"))
    section = payload.get("airdrop")
    if isinstance(section, Mapping):
        return airdrop_config_from_dict(section)
    return AirdropConfig()