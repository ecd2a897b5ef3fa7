"""Garden state store: offline catch-up and the player action boundary.

The simulation is pull-based. There is no background ticker; every call into
the store runs one read-advance-write cycle:

1. load the persisted garden,
2. catch up: grow, dry and heal each plant for the real time elapsed since
   it was last observed, then roll the season clock forward,
3. validate and apply the requested action,
4. save, and only then publish the queued events.

Validation happens before the action mutates anything, and a failed save
leaves nothing cached: the next call starts again from the last persisted
garden.
"""

import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar, Union

from garden.achievements import evaluate_achievements
from garden.config import GardenConfig
from garden.config.growth import INITIAL_PLANT_HEALTH, INITIAL_PLANT_WATER
from garden.events import (
    AchievementUnlocked,
    EventBus,
    MemoryRecorded,
    PlantBloomed,
    SeasonChanged,
    SkillLeveledUp,
)
from garden.exceptions import NotFoundError, PersistenceError, PreconditionFailedError
from garden.genetics.crossing import GeneticsEngine, describe_genetics
from garden.growth import engine as growth
from garden.models import (
    GardenState,
    GardeningAction,
    GrowthStage,
    Memory,
    MemoryType,
    Plant,
    Position,
    Rarity,
    Season,
    Seed,
)
from garden.skills.ledger import SkillGain, SkillTracker, skill_tier
from garden.storage.base import GardenRepository, create_new_garden
from garden.util.clock import Clock, SystemClock
from garden.util.ids import new_id
from garden.util.rng import require_rng_param

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    """What a player action produced.

    Attributes:
        value: The plant or seed the action was about
        skill_gain: Experience granted for the action, if any
        memories: Journal entries recorded during this call, catch-up included
    """

    value: T
    skill_gain: Optional[SkillGain] = None
    memories: List[Memory] = field(default_factory=list)


@dataclass(frozen=True)
class GardenStatus:
    garden: GardenState
    plant_count: int
    season: Season
    skill_level: int
    skill_tier: str


@dataclass(frozen=True)
class PlantDetails:
    plant: Plant
    age_days: int
    genetic_description: str
    needs_water: bool
    condition: str


class GardenStore:
    """Owns one garden and applies player actions to it.

    Args:
        repository: Where the garden is loaded from and saved to
        clock: Source of "now"; read once per call
        rng: Seedable RNG shared by the genetics engine and skill tracker
        config: Tuning knobs (season length, plot size, ...)
        event_bus: Receives domain events after each successful save
    """

    def __init__(
        self,
        repository: GardenRepository,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        config: Optional[GardenConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.repository = repository
        self.clock = clock or SystemClock()
        self.config = config or GardenConfig()
        self.events = event_bus or EventBus()
        self._rng = require_rng_param(rng, "GardenStore.__init__")
        self.genetics = GeneticsEngine(self._rng)
        self.skills = SkillTracker(self._rng)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> GardenState:
        """Return the saved garden, creating and saving a new one if none exists."""
        state = self.repository.load()
        if state is not None:
            return state

        state = create_new_garden(self.config, self.clock.now(), self._rng)
        self.repository.save(state)
        logger.info("Created new garden %s (%s)", state.id, state.name)
        return state

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_status(self) -> GardenStatus:
        with self._transaction() as (state, _now, _memories):
            return GardenStatus(
                garden=state,
                plant_count=len(state.plants),
                season=state.season,
                skill_level=state.skill.level,
                skill_tier=skill_tier(state.skill.level),
            )

    def get_plant_details(self, plant_id: str) -> PlantDetails:
        with self._transaction() as (state, now, _memories):
            plant = self._require_plant(state, plant_id)
            return PlantDetails(
                plant=plant,
                age_days=max(0, (now - plant.planted_at) // timedelta(days=1)),
                genetic_description=describe_genetics(plant.genetics),
                needs_water=growth.needs_water(plant),
                condition=growth.plant_condition(plant),
            )

    def get_seeds(self) -> List[Seed]:
        with self._transaction() as (state, _now, _memories):
            return list(state.resources.seeds)

    def get_memories(
        self,
        memory_type: Union[MemoryType, str, None] = None,
        limit: Optional[int] = None,
    ) -> List[Memory]:
        """Journal entries, newest first, optionally filtered by type."""
        wanted = self._memory_type(memory_type) if memory_type is not None else None
        with self._transaction() as (state, _now, _memories):
            memories = [m for m in state.memories if wanted is None or m.type == wanted]
            memories.sort(key=lambda m: m.occurred_at, reverse=True)
            if limit is not None:
                memories = memories[: max(0, limit)]
            return memories

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def plant_seed(
        self, seed_id: str, position: Position, name: Optional[str] = None
    ) -> ActionResult[Plant]:
        """Plant a seed from the inventory at ``position``.

        Raises:
            NotFoundError: No garden, or no seed with this id
            PreconditionFailedError: Position outside the plot or already occupied
        """
        with self._transaction() as (state, now, memories):
            seed = state.find_seed(seed_id)
            if seed is None:
                raise NotFoundError(f"Seed {seed_id} not found.")
            if not self._in_bounds(position):
                raise PreconditionFailedError(
                    f"Position ({position.x}, {position.y}) is outside the "
                    f"{self.config.layout_width}x{self.config.layout_height} plot."
                )
            if state.is_occupied(position):
                raise PreconditionFailedError("Position already occupied.")

            plant = Plant(
                id=new_id("plant", self._rng),
                name=name or seed.species,
                species=seed.species,
                position=position,
                genetics=seed.genetics,
                planted_at=now,
                last_watered=now,
                last_update=now,
                health=INITIAL_PLANT_HEALTH,
                water_level=INITIAL_PLANT_WATER,
                rarity=seed.rarity,
            )
            state.plants.append(plant)
            state.resources.seeds.remove(seed)

            gain = self._grant(state, GardeningAction.PLANT, now)
            self._remember(
                state,
                now,
                MemoryType.PLANTING,
                f"Planted {plant.name}.",
                plant_id=plant.id,
                rarity=plant.rarity,
            )
            logger.info("Planted %s (%s) at (%d, %d)", plant.name, plant.id, position.x, position.y)
            return ActionResult(plant, gain, memories)

    def water_plant(self, plant_id: str, amount: Optional[float] = None) -> ActionResult[Plant]:
        with self._transaction() as (state, now, memories):
            plant = self._require_plant(state, plant_id)
            growth.water_plant(
                plant, now, self.config.default_water_amount if amount is None else amount
            )
            gain = self._grant(state, GardeningAction.WATER, now)
            logger.info("Watered %s (water %.1f)", plant.id, plant.water_level)
            return ActionResult(plant, gain, memories)

    def fertilize_plant(self, plant_id: str) -> ActionResult[Plant]:
        """Spend one fertilizer to boost a plant's health.

        Raises:
            NotFoundError: Unknown plant
            PreconditionFailedError: No fertilizer left
        """
        with self._transaction() as (state, now, memories):
            plant = self._require_plant(state, plant_id)
            if state.resources.fertilizer < 1:
                raise PreconditionFailedError("Not enough fertilizer.")

            growth.fertilize_plant(plant)
            state.resources.fertilizer -= 1
            gain = self._grant(state, GardeningAction.FERTILIZE, now)
            logger.info("Fertilized %s (health %.1f)", plant.id, plant.health)
            return ActionResult(plant, gain, memories)

    def cross_breed(self, parent1_id: str, parent2_id: str) -> ActionResult[Seed]:
        """Cross two mature plants into a new seed for the inventory.

        Raises:
            NotFoundError: Either parent does not exist
            PreconditionFailedError: Same plant twice, or a parent is not mature
        """
        with self._transaction() as (state, now, memories):
            parent1 = state.find_plant(parent1_id)
            parent2 = state.find_plant(parent2_id)
            if parent1 is None or parent2 is None:
                raise NotFoundError("One or both parent plants not found.")
            if parent1.id == parent2.id:
                raise PreconditionFailedError("A plant cannot be crossed with itself.")
            if parent1.stage != GrowthStage.MATURE or parent2.stage != GrowthStage.MATURE:
                raise PreconditionFailedError("Both plants must be mature to cross-breed.")

            seed = self.genetics.cross_breed(parent1, parent2, state.skill, now)
            state.resources.seeds.append(seed)

            gain = self._grant(state, GardeningAction.CROSS_BREED, now)
            self._remember(
                state,
                now,
                MemoryType.CROSS_BREED,
                f"Created {seed.species} from {parent1.name} and {parent2.name}.",
                rarity=seed.rarity,
                parent_ids=seed.parent_ids,
            )
            if seed.rarity in (Rarity.RARE, Rarity.LEGENDARY):
                self._remember(
                    state,
                    now,
                    MemoryType.DISCOVERY,
                    f"Discovered a {seed.rarity.value} {seed.species}.",
                    rarity=seed.rarity,
                    parent_ids=seed.parent_ids,
                )
            logger.info(
                "Cross-bred %s x %s -> %s (%s, %s)",
                parent1.id,
                parent2.id,
                seed.species,
                seed.rarity.value,
                describe_genetics(seed.genetics),
            )
            return ActionResult(seed, gain, memories)

    def harvest(self, plant_id: str) -> ActionResult[Seed]:
        """Harvest a mature plant, freeing its plot and keeping one of its seeds.

        Raises:
            NotFoundError: Unknown plant
            PreconditionFailedError: The plant is not mature yet
        """
        with self._transaction() as (state, now, memories):
            plant = self._require_plant(state, plant_id)
            if plant.stage != GrowthStage.MATURE:
                raise PreconditionFailedError(f"{plant.name} is not ready to harvest.")

            seed = Seed(
                id=new_id("seed", self._rng),
                species=plant.species,
                genetics=plant.genetics,
                created_at=now,
                rarity=plant.rarity,
            )
            state.plants.remove(plant)
            state.resources.seeds.append(seed)

            gain = self._grant(state, GardeningAction.HARVEST, now)
            self._remember(
                state,
                now,
                MemoryType.HARVEST,
                f"Harvested {plant.name}.",
                plant_id=plant.id,
                rarity=plant.rarity,
            )
            logger.info("Harvested %s (%s)", plant.name, plant.id)
            return ActionResult(seed, gain, memories)

    # ------------------------------------------------------------------
    # Read-advance-write cycle
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self) -> Iterator[Tuple[GardenState, datetime, List[Memory]]]:
        now = self.clock.now()
        state = self.repository.load()
        if state is None:
            raise NotFoundError("No garden found. Create a new garden first.")

        first_new_memory = len(state.memories)
        memories: List[Memory] = []
        try:
            self.catch_up(state, now)
            yield state, now, memories
            for achievement in evaluate_achievements(state, now):
                self._remember(
                    state, now, MemoryType.ACHIEVEMENT, f"Unlocked {achievement.name}."
                )
                self.events.defer(AchievementUnlocked(achievement.id, achievement.name, now))
            # Results built inside the action hold this list; it is filled once the action is done
            memories.extend(state.memories[first_new_memory:])
            self.repository.save(state)
        except PersistenceError:
            dropped = self.events.discard_pending()
            logger.error("Garden %s not saved; discarded %d pending events", state.id, dropped)
            raise
        except Exception:
            self.events.discard_pending()
            raise
        self.events.flush()

    def catch_up(self, state: GardenState, now: datetime) -> None:
        """Apply everything that happened between the last observation and ``now``.

        Each plant is advanced over its own elapsed span in a single step,
        so a garden left alone for a week grows and dries exactly as much as
        a week of real time implies. Plants with no elapsed time (including a
        clock that went backwards) are left untouched.
        """
        elapsed = now - state.last_update
        if elapsed > timedelta(0):
            logger.debug("Catching up garden %s over %s", state.id, elapsed)

        for plant in state.plants:
            delta = now - plant.last_update
            if delta <= timedelta(0):
                continue
            result = growth.advance(plant, delta, state.season, state.skill.level)
            growth.deplete_water(plant, delta, state.season)
            growth.update_health(plant)
            plant.last_update = now

            if result.bloomed:
                logger.info("%s (%s) bloomed", plant.name, plant.id)
                self._remember(
                    state,
                    now,
                    MemoryType.BLOOM,
                    f"{plant.name} bloomed.",
                    plant_id=plant.id,
                    rarity=plant.rarity,
                )
                self.events.defer(PlantBloomed(plant.id, plant.name, now))

        self._advance_seasons(state, now)
        state.last_update = max(state.last_update, now)

    def _advance_seasons(self, state: GardenState, now: datetime) -> int:
        """Roll the season clock forward; returns how many seasons passed."""
        duration = self.config.season_duration
        elapsed = now - state.season_start
        if elapsed < duration:
            return 0

        if self.config.multi_season_catch_up:
            steps = elapsed // duration
            state.season_start = state.season_start + steps * duration
        else:
            steps = 1
            state.season_start = now

        # Only the last full cycle can add anything new to the journal
        skipped = max(0, steps - len(Season))
        for _ in range(skipped % len(Season)):
            state.season = state.season.next()
        for _ in range(steps - skipped):
            previous = state.season
            state.season = previous.next()
            if state.season not in state.seasons_seen:
                state.seasons_seen.append(state.season)
            self._remember(state, now, MemoryType.SEASON, f"{state.season.value.capitalize()} arrived.")
            self.events.defer(SeasonChanged(previous, state.season, now))

        logger.info("Season advanced %d step(s) to %s", steps, state.season.value)
        return steps

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _grant(self, state: GardenState, action: GardeningAction, now: datetime) -> SkillGain:
        gain = self.skills.grant_experience(state.skill, action)
        if gain.leveled_up:
            tier = skill_tier(gain.new_level)
            self._remember(
                state, now, MemoryType.LEVEL_UP, f"Reached skill level {gain.new_level} ({tier})."
            )
            self.events.defer(SkillLeveledUp(gain.new_level - gain.levels_gained, gain.new_level, tier))
        for unlock in gain.unlocks:
            self._remember(state, now, MemoryType.MILESTONE, unlock)
        return gain

    def _remember(
        self,
        state: GardenState,
        now: datetime,
        memory_type: MemoryType,
        description: str,
        plant_id: Optional[str] = None,
        rarity: Optional[Rarity] = None,
        parent_ids: Optional[Tuple[str, str]] = None,
    ) -> Memory:
        memory = Memory(
            id=new_id("memory", self._rng),
            type=memory_type,
            occurred_at=now,
            description=description,
            season=state.season,
            plant_id=plant_id,
            rarity=rarity,
            parent_ids=parent_ids,
        )
        state.memories.append(memory)
        self.events.defer(MemoryRecorded(memory))
        return memory

    def _require_plant(self, state: GardenState, plant_id: str) -> Plant:
        plant = state.find_plant(plant_id)
        if plant is None:
            raise NotFoundError(f"Plant {plant_id} not found.")
        return plant

    def _in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.config.layout_width and 0 <= position.y < self.config.layout_height

    @staticmethod
    def _memory_type(memory_type: Union[MemoryType, str]) -> MemoryType:
        if isinstance(memory_type, MemoryType):
            return memory_type
        try:
            return MemoryType(memory_type)
        except ValueError as e:
            raise PreconditionFailedError(f"Unknown memory type {memory_type!r}.") from e
