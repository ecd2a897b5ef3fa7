"""Garden state <-> structured record conversion.

The record is a tree of plain dicts, lists, strings and numbers suitable for
any JSON encoder. Timestamps are written as ISO 8601 strings and re-parsed
into timezone-aware ``datetime`` objects on load; floats are written as-is so
numeric fields survive a save/load cycle unchanged.

Schema Versioning:
    - Version 1.0: Initial schema

Loading is lenient about content and strict about shape: unknown enum values,
out-of-range levels and broken genetics are repaired to safe defaults, but a
record with the wrong schema version or missing top-level sections is
rejected with ``PersistenceError``.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from garden.config.skill import MAX_LEVEL
from garden.exceptions import PersistenceError
from garden.genetics.traits import default_trait, dominance_rank
from garden.models import (
    Achievement,
    GardenState,
    GeneticTrait,
    GrowthStage,
    Memory,
    MemoryType,
    Plant,
    PlantGenetics,
    Position,
    Resources,
    Rarity,
    Season,
    Seed,
    SkillLedger,
    TraitType,
)
from garden.util.enum_utils import coerce_enum

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

REQUIRED_FIELDS = ("version", "garden")


# =============================================================================
# Timestamps
# =============================================================================


def encode_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.isoformat()


def decode_timestamp(raw: Any, fallback: Optional[datetime] = None) -> datetime:
    """Parse an ISO 8601 string back into an aware ``datetime``.

    Naive values are taken to be UTC. Unparseable values fall back to
    ``fallback`` when given, otherwise raise ``PersistenceError``.
    """
    if isinstance(raw, datetime):
        parsed = raw
    else:
        try:
            parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
        except ValueError as e:
            if fallback is not None:
                logger.warning("Unparseable timestamp %r, using %s", raw, fallback.isoformat())
                return fallback
            raise PersistenceError(f"Invalid timestamp {raw!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_timestamp(raw: Any, fallback: datetime) -> Optional[datetime]:
    if raw is None:
        return None
    return decode_timestamp(raw, fallback)


# =============================================================================
# Scalars
# =============================================================================


def _level(raw: Any, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(value):
        return default
    return max(0.0, min(100.0, value))


def _non_negative(raw: Any, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(value):
        return default
    return max(0.0, value)


def _parent_ids(raw: Any) -> Optional[Tuple[str, str]]:
    if not raw or len(raw) != 2:
        return None
    return (str(raw[0]), str(raw[1]))


# =============================================================================
# Genetics
# =============================================================================


def genetics_to_dict(genetics: PlantGenetics) -> Dict[str, Dict[str, str]]:
    return {
        trait_type.value: {
            "dominant": trait.dominant,
            "recessive": trait.recessive,
            "expressed": trait.expressed,
        }
        for trait_type, trait in genetics.items()
    }


def _trait_from_dict(trait_type: TraitType, data: Any) -> GeneticTrait:
    if not isinstance(data, dict) or "dominant" not in data or "recessive" not in data:
        logger.warning("Repairing missing %s trait", trait_type.value)
        return default_trait(trait_type)

    dominant = str(data["dominant"])
    recessive = str(data["recessive"])
    expressed = data.get("expressed")
    if expressed not in (dominant, recessive):
        # Re-resolve deterministically: higher rank shows, ties keep the dominant allele
        if dominance_rank(trait_type, recessive) > dominance_rank(trait_type, dominant):
            expressed = recessive
        else:
            expressed = dominant
    return GeneticTrait(dominant=dominant, recessive=recessive, expressed=expressed)


def genetics_from_dict(data: Any) -> PlantGenetics:
    data = data if isinstance(data, dict) else {}
    return PlantGenetics.from_traits(
        {trait_type: _trait_from_dict(trait_type, data.get(trait_type.value)) for trait_type in TraitType}
    )


# =============================================================================
# Records
# =============================================================================


def plant_to_dict(plant: Plant) -> Dict[str, Any]:
    return {
        "id": plant.id,
        "name": plant.name,
        "species": plant.species,
        "position": {"x": plant.position.x, "y": plant.position.y, "z": plant.position.z},
        "genetics": genetics_to_dict(plant.genetics),
        "stage": plant.stage.label,
        "growth_progress": plant.growth_progress,
        "health": plant.health,
        "water_level": plant.water_level,
        "rarity": plant.rarity.value,
        "planted_at": encode_timestamp(plant.planted_at),
        "last_watered": encode_timestamp(plant.last_watered),
        "last_update": encode_timestamp(plant.last_update),
    }


def plant_from_dict(data: Dict[str, Any], fallback_time: datetime) -> Plant:
    position = data.get("position") or {}
    planted_at = decode_timestamp(data.get("planted_at"), fallback_time)
    progress = _non_negative(data.get("growth_progress"), 0.0)

    # The stored stage can only be ahead of progress, never behind it
    stored_stage = coerce_enum(GrowthStage, data.get("stage"), GrowthStage.SEED)
    stage = max(stored_stage, GrowthStage(min(int(progress), int(GrowthStage.MATURE))))

    return Plant(
        id=str(data["id"]),
        name=str(data.get("name") or data.get("species") or "Unnamed"),
        species=str(data.get("species") or "Unknown"),
        position=Position(
            x=int(position.get("x", 0)), y=int(position.get("y", 0)), z=int(position.get("z", 0))
        ),
        genetics=genetics_from_dict(data.get("genetics")),
        planted_at=planted_at,
        last_watered=decode_timestamp(data.get("last_watered"), planted_at),
        last_update=decode_timestamp(data.get("last_update"), planted_at),
        stage=stage,
        growth_progress=progress,
        health=_level(data.get("health"), 100.0),
        water_level=_level(data.get("water_level"), 0.0),
        rarity=coerce_enum(Rarity, data.get("rarity"), Rarity.COMMON),
    )


def seed_to_dict(seed: Seed) -> Dict[str, Any]:
    return {
        "id": seed.id,
        "species": seed.species,
        "genetics": genetics_to_dict(seed.genetics),
        "created_at": encode_timestamp(seed.created_at),
        "rarity": seed.rarity.value,
        "parent_ids": list(seed.parent_ids) if seed.parent_ids else None,
    }


def seed_from_dict(data: Dict[str, Any], fallback_time: datetime) -> Seed:
    return Seed(
        id=str(data["id"]),
        species=str(data.get("species") or "Unknown"),
        genetics=genetics_from_dict(data.get("genetics")),
        created_at=decode_timestamp(data.get("created_at"), fallback_time),
        rarity=coerce_enum(Rarity, data.get("rarity"), Rarity.COMMON),
        parent_ids=_parent_ids(data.get("parent_ids")),
    )


def memory_to_dict(memory: Memory) -> Dict[str, Any]:
    return {
        "id": memory.id,
        "type": memory.type.value,
        "occurred_at": encode_timestamp(memory.occurred_at),
        "description": memory.description,
        "season": memory.season.value,
        "plant_id": memory.plant_id,
        "rarity": memory.rarity.value if memory.rarity else None,
        "parent_ids": list(memory.parent_ids) if memory.parent_ids else None,
    }


def memory_from_dict(data: Dict[str, Any], fallback_time: datetime) -> Memory:
    rarity = data.get("rarity")
    return Memory(
        id=str(data["id"]),
        type=coerce_enum(MemoryType, data.get("type"), MemoryType.MILESTONE),
        occurred_at=decode_timestamp(data.get("occurred_at"), fallback_time),
        description=str(data.get("description", "")),
        season=coerce_enum(Season, data.get("season"), Season.SPRING),
        plant_id=data.get("plant_id"),
        rarity=coerce_enum(Rarity, rarity, Rarity.COMMON) if rarity else None,
        parent_ids=_parent_ids(data.get("parent_ids")),
    )


def achievement_to_dict(achievement: Achievement) -> Dict[str, Any]:
    return {
        "id": achievement.id,
        "name": achievement.name,
        "description": achievement.description,
        "unlocked": achievement.unlocked,
        "unlocked_at": encode_timestamp(achievement.unlocked_at) if achievement.unlocked_at else None,
    }


def achievement_from_dict(data: Dict[str, Any], fallback_time: datetime) -> Achievement:
    return Achievement(
        id=str(data["id"]),
        name=str(data.get("name", data["id"])),
        description=str(data.get("description", "")),
        unlocked=bool(data.get("unlocked", False)),
        unlocked_at=_optional_timestamp(data.get("unlocked_at"), fallback_time),
    )


def _skill_from_dict(data: Any) -> SkillLedger:
    data = data if isinstance(data, dict) else {}
    try:
        level = int(data.get("level", 1))
    except (TypeError, ValueError):
        level = 1
    try:
        total_actions = int(data.get("total_actions", 0))
    except (TypeError, ValueError):
        total_actions = 0
    return SkillLedger(
        level=max(1, min(MAX_LEVEL, level)),
        experience=_non_negative(data.get("experience"), 0.0),
        total_actions=max(0, total_actions),
    )


# =============================================================================
# Aggregate
# =============================================================================


def state_to_record(state: GardenState) -> Dict[str, Any]:
    """Serialize the whole garden to a versioned record."""
    return {
        "version": SCHEMA_VERSION,
        "garden": {
            "id": state.id,
            "name": state.name,
            "created_at": encode_timestamp(state.created_at),
            "season": state.season.value,
            "season_start": encode_timestamp(state.season_start),
            "last_update": encode_timestamp(state.last_update),
            "plants": [plant_to_dict(plant) for plant in state.plants],
            "resources": {
                "water": state.resources.water,
                "fertilizer": state.resources.fertilizer,
                "seeds": [seed_to_dict(seed) for seed in state.resources.seeds],
            },
            "skill": {
                "level": state.skill.level,
                "experience": state.skill.experience,
                "total_actions": state.skill.total_actions,
            },
            "achievements": [achievement_to_dict(a) for a in state.achievements],
            "memories": [memory_to_dict(memory) for memory in state.memories],
            "seasons_seen": [season.value for season in state.seasons_seen],
        },
    }


def state_from_record(record: Dict[str, Any]) -> GardenState:
    """Rebuild a garden from a record produced by ``state_to_record``.

    Raises:
        PersistenceError: If the record is not a garden record of this schema
    """
    if not isinstance(record, dict):
        raise PersistenceError(f"Invalid garden record: expected an object, got {type(record).__name__}")
    for field_name in REQUIRED_FIELDS:
        if field_name not in record:
            raise PersistenceError(f"Invalid garden record: missing field '{field_name}'")
    if record["version"] != SCHEMA_VERSION:
        raise PersistenceError(
            f"Version mismatch: expected {SCHEMA_VERSION}, got {record['version']}"
        )

    garden = record["garden"]
    try:
        created_at = decode_timestamp(garden["created_at"])
        last_update = decode_timestamp(garden.get("last_update"), created_at)
        season_start = decode_timestamp(garden.get("season_start"), created_at)

        resources = garden.get("resources") or {}
        seeds: List[Seed] = [seed_from_dict(s, last_update) for s in resources.get("seeds", [])]

        return GardenState(
            id=str(garden["id"]),
            name=str(garden.get("name", "")),
            created_at=created_at,
            season=coerce_enum(Season, garden.get("season"), Season.SPRING),
            season_start=season_start,
            last_update=last_update,
            plants=[plant_from_dict(p, last_update) for p in garden.get("plants", [])],
            resources=Resources(
                water=_non_negative(resources.get("water"), 0.0),
                fertilizer=max(0, int(resources.get("fertilizer", 0))),
                seeds=seeds,
            ),
            skill=_skill_from_dict(garden.get("skill")),
            achievements=[achievement_from_dict(a, last_update) for a in garden.get("achievements", [])],
            memories=[memory_from_dict(m, last_update) for m in garden.get("memories", [])],
            seasons_seen=[
                coerce_enum(Season, raw, Season.SPRING) for raw in garden.get("seasons_seen", [])
            ],
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PersistenceError(f"Invalid garden record: {e}") from e
