"""Data model for the garden simulation.

Records are plain dataclasses owned by ``GardenState``. Engines mutate plants
and the skill ledger in place; genetic records are frozen and only ever
replaced wholesale (crossing produces brand-new traits).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Optional, Tuple


class TraitType(Enum):
    """Named genetic trait slots carried by every plant."""

    COLOR = "color"
    BLOOM_SIZE = "bloom_size"
    HEIGHT = "height"
    BLOOM_PATTERN = "bloom_pattern"
    FRAGRANCE = "fragrance"


class GrowthStage(IntEnum):
    """Lifecycle buckets derived from continuous growth progress."""

    SEED = 0
    SPROUT = 1
    SMALL = 2
    MEDIUM = 3
    MATURE = 4

    @property
    def label(self) -> str:
        return self.name.lower()


class Season(Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"

    def next(self) -> "Season":
        order = list(Season)
        return order[(order.index(self) + 1) % len(order)]


class Rarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"


class GardeningAction(Enum):
    """Player actions that grant experience."""

    PLANT = "plant"
    WATER = "water"
    CROSS_BREED = "cross-breed"
    HARVEST = "harvest"
    FERTILIZE = "fertilize"


class MemoryType(Enum):
    """Kinds of entries in the garden's memory journal."""

    PLANTING = "planting"
    BLOOM = "bloom"
    HARVEST = "harvest"
    MILESTONE = "milestone"
    DISCOVERY = "discovery"
    CROSS_BREED = "cross-breed"
    GROWTH = "growth"
    SEASON = "season"
    LEVEL_UP = "level-up"
    ACHIEVEMENT = "achievement"


@dataclass(frozen=True)
class GeneticTrait:
    """A pair of alleles and the one that shows.

    Attributes:
        dominant: The higher-ranked allele (or the first allele on a tie)
        recessive: The other allele
        expressed: The allele actually visible; always one of the two above
    """

    dominant: str
    recessive: str
    expressed: str

    def __post_init__(self) -> None:
        if self.expressed not in (self.dominant, self.recessive):
            raise ValueError(
                f"expressed allele {self.expressed!r} is neither "
                f"{self.dominant!r} nor {self.recessive!r}"
            )

    @property
    def alleles(self) -> Tuple[str, str]:
        return (self.dominant, self.recessive)


@dataclass(frozen=True)
class PlantGenetics:
    """One ``GeneticTrait`` per trait slot; every slot is always present."""

    color: GeneticTrait
    bloom_size: GeneticTrait
    height: GeneticTrait
    bloom_pattern: GeneticTrait
    fragrance: GeneticTrait

    def get(self, trait_type: TraitType) -> GeneticTrait:
        return getattr(self, trait_type.value)

    def items(self) -> Iterator[Tuple[TraitType, GeneticTrait]]:
        for trait_type in TraitType:
            yield trait_type, self.get(trait_type)

    @classmethod
    def from_traits(cls, traits: Dict[TraitType, GeneticTrait]) -> "PlantGenetics":
        return cls(**{trait_type.value: trait for trait_type, trait in traits.items()})


@dataclass(frozen=True)
class Position:
    """A plot coordinate. Occupancy is decided on ``(x, y)`` only."""

    x: int
    y: int
    z: int = 0

    @property
    def cell(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass
class Plant:
    """A plant growing in the garden.

    ``stage`` only ever moves forward; ``health`` and ``water_level`` are kept
    within [0, 100] by the growth engine.
    """

    id: str
    name: str
    species: str
    position: Position
    genetics: PlantGenetics
    planted_at: datetime
    last_watered: datetime
    last_update: datetime
    stage: GrowthStage = GrowthStage.SEED
    growth_progress: float = 0.0
    health: float = 100.0
    water_level: float = 80.0
    rarity: Rarity = Rarity.COMMON


@dataclass
class Seed:
    """A seed in the inventory, either a starter or the result of a cross."""

    id: str
    species: str
    genetics: PlantGenetics
    created_at: datetime
    rarity: Rarity = Rarity.COMMON
    parent_ids: Optional[Tuple[str, str]] = None


@dataclass
class SkillLedger:
    level: int = 1
    experience: float = 0.0
    total_actions: int = 0


@dataclass
class Resources:
    water: float = 100.0
    fertilizer: int = 10
    seeds: List[Seed] = field(default_factory=list)


@dataclass
class Achievement:
    id: str
    name: str
    description: str
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None


@dataclass
class Memory:
    """A journal entry describing something that happened in the garden."""

    id: str
    type: MemoryType
    occurred_at: datetime
    description: str
    season: Season
    plant_id: Optional[str] = None
    rarity: Optional[Rarity] = None
    parent_ids: Optional[Tuple[str, str]] = None


@dataclass
class GardenState:
    """Aggregate root: everything that is persisted for one garden."""

    id: str
    name: str
    created_at: datetime
    season: Season
    season_start: datetime
    last_update: datetime
    plants: List[Plant] = field(default_factory=list)
    resources: Resources = field(default_factory=Resources)
    skill: SkillLedger = field(default_factory=SkillLedger)
    achievements: List[Achievement] = field(default_factory=list)
    memories: List[Memory] = field(default_factory=list)
    seasons_seen: List[Season] = field(default_factory=list)

    @property
    def occupied_positions(self) -> List[Position]:
        return [plant.position for plant in self.plants]

    def is_occupied(self, position: Position) -> bool:
        return any(plant.position.cell == position.cell for plant in self.plants)

    def find_plant(self, plant_id: str) -> Optional[Plant]:
        return next((plant for plant in self.plants if plant.id == plant_id), None)

    def find_seed(self, seed_id: str) -> Optional[Seed]:
        return next((seed for seed in self.resources.seeds if seed.id == seed_id), None)


